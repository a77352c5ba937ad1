"""字段映射获取与扁平化模块."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Any

from ..typing import FieldMappingResponse, IndexExpression
from .cluster import CLUSTER_ERRORS, response_body, translate_cluster_error
from .exceptions import ClusterError, MissingIndicesError
from .models import Field

logger = logging.getLogger(__name__)

DEFAULT_META_FIELDS: tuple[str, ...] = ("_source", "_id", "_type", "_index", "_score")

# 集群映射类型 -> 归一化类型
_TYPE_CASTS: dict[str, str] = {
    "string": "string",
    "text": "string",
    "keyword": "string",
    "constant_keyword": "string",
    "wildcard": "string",
    "match_only_text": "string",
    "search_as_you_type": "string",
    "completion": "string",
    "version": "string",
    "long": "number",
    "integer": "number",
    "short": "number",
    "byte": "number",
    "double": "number",
    "float": "number",
    "half_float": "number",
    "scaled_float": "number",
    "unsigned_long": "number",
    "token_count": "number",
    "date": "date",
    "date_nanos": "date",
    "boolean": "boolean",
    "ip": "ip",
    "geo_point": "geo_point",
    "geo_shape": "geo_shape",
    "object": "object",
    "nested": "object",
    "flattened": "object",
    "attachment": "attachment",
    "murmur3": "murmur3",
}

# 元字段的归一化类型
_META_FIELD_TYPES: dict[str, str] = {
    "_id": "string",
    "_type": "string",
    "_index": "string",
    "_source": "_source",
    "_score": "number",
}

_NOT_AGGREGATABLE_TYPES = frozenset(
    {"object", "nested", "flattened", "geo_shape", "attachment", "_source"}
)


def cast_mapping_type(es_type: str | None) -> str:
    """将集群映射类型转换为归一化类型，未知类型返回 "unknown"."""
    if es_type is None:
        return "unknown"
    return _TYPE_CASTS.get(es_type, "unknown")


def _is_true(value: Any) -> bool:
    return value is True or value == "true"


def _is_searchable(mapping: dict[str, Any]) -> bool:
    return mapping.get("index", True) not in (False, "false", "no")


def _is_aggregatable(es_type: str, mapping: dict[str, Any]) -> bool:
    if es_type in _NOT_AGGREGATABLE_TYPES or cast_mapping_type(es_type) == "unknown":
        return False
    if es_type == "text":
        return _is_true(mapping.get("fielddata", False))
    if es_type == "string" and mapping.get("index", "analyzed") == "analyzed":
        # 旧版 analyzed string 只有开启 fielddata 才能聚合
        return _is_true(mapping.get("fielddata", False))
    return mapping.get("doc_values", True) not in (False, "false")


def _iter_field_entries(
    index_name: str, mappings: dict[str, Any]
) -> Iterator[tuple[str, dict[str, Any]]]:
    """遍历单个索引的字段映射条目.

    兼容两种布局：
        - 无类型: {字段全名: {"full_name": ..., "mapping": {...}}}
        - 按类型: {类型名: {字段全名: {"full_name": ..., "mapping": {...}}}}
    """
    for key, value in mappings.items():
        if not isinstance(value, dict):
            raise ClusterError(f"映射响应格式异常: 索引 '{index_name}' 的 '{key}'")
        if isinstance(value.get("mapping"), dict):
            yield key, value
            continue
        for field_name, entry in value.items():
            if not isinstance(entry, dict):
                raise ClusterError(
                    f"映射响应格式异常: 索引 '{index_name}' 类型 '{key}' 的 '{field_name}'"
                )
            yield field_name, entry


def _build_field(
    key: str, entry: dict[str, Any], meta_fields: tuple[str, ...]
) -> Field | None:
    mapping = entry.get("mapping", {})
    if not isinstance(mapping, dict):
        raise ClusterError(f"映射响应格式异常: 字段 '{key}' 的 mapping 不是对象")
    if not mapping:
        return None

    name = entry.get("full_name") or key
    if name.startswith("_") and name not in meta_fields:
        return None

    leaf = next(iter(mapping.values()))
    if not isinstance(leaf, dict):
        raise ClusterError(f"映射响应格式异常: 字段 '{name}' 的映射不是对象")

    if name in _META_FIELD_TYPES:
        return _meta_field(name)

    es_type = leaf.get("type")
    field_type = cast_mapping_type(es_type)
    return Field(
        name=name,
        type=field_type,
        searchable=_is_searchable(leaf),
        aggregatable=_is_aggregatable(es_type or "", leaf),
        format=leaf.get("format"),
        es_type=es_type,
    )


def _meta_field(name: str) -> Field:
    return Field(
        name=name,
        type=_META_FIELD_TYPES.get(name, "string"),
        searchable=name not in ("_source", "_score"),
        aggregatable=name in ("_index", "_type"),
    )


def transform_mapping_into_fields(
    response: FieldMappingResponse,
    meta_fields: tuple[str, ...] = DEFAULT_META_FIELDS,
    skip_index: str | None = None,
    index_order: list[str] | None = None,
) -> list[Field]:
    """将嵌套的字段映射响应转换为扁平字段列表.

    同名字段出现在多个索引中时，以 index_order 中靠后的索引为准；未给出
    index_order 或索引不在其中时按响应顺序处理。
    以下划线开头的字段只保留 meta_fields 中列出的元字段，
    响应中缺少的元字段会被补齐。

    Args:
        response: get_field_mapping 响应体
        meta_fields: 需要保留的元字段
        skip_index: 需要跳过的索引（如持久化索引模式所在索引）
        index_order: 请求时的索引列表，决定同名字段的覆盖顺序

    Returns:
        按字段名去重的字段列表

    Raises:
        ClusterError: 响应结构不符合预期时抛出

    Example:
        >>> transform_mapping_into_fields({
        ...     "logs-2024.01.01": {"mappings": {
        ...         "status": {"full_name": "status",
        ...                    "mapping": {"status": {"type": "keyword"}}},
        ...     }},
        ... }, meta_fields=())
        [Field(name='status', type='string', searchable=True, aggregatable=True, ...)]
    """
    names = list(response)
    if index_order:
        position = {name: i for i, name in enumerate(index_order)}
        # 集群不保证按请求顺序返回索引
        names.sort(key=lambda name: position.get(name, len(position)))

    fields: dict[str, Field] = {}
    for index_name in names:
        index_data = response[index_name]
        if index_name == skip_index:
            continue
        if not isinstance(index_data, dict):
            raise ClusterError(f"映射响应格式异常: 索引 '{index_name}'")
        mappings = index_data.get("mappings") or {}
        if not isinstance(mappings, dict):
            raise ClusterError(f"映射响应格式异常: 索引 '{index_name}' 的 mappings 不是对象")

        for key, entry in _iter_field_entries(index_name, mappings):
            field = _build_field(key, entry, meta_fields)
            if field is not None:
                fields[field.name] = field

    for meta in meta_fields:
        if meta not in fields:
            fields[meta] = _meta_field(meta)

    return list(fields.values())


async def fetch_fields(
    client: Any,
    index: IndexExpression,
    include_defaults: bool = True,
    meta_fields: tuple[str, ...] = DEFAULT_META_FIELDS,
    skip_index: str | None = None,
) -> list[Field]:
    """获取索引列表（或模式字符串）的字段映射并扁平化.

    传入列表时容忍其中部分索引在解析与获取之间消失（ignore_unavailable），
    但整个列表都不存在时失败（allow_no_indices=False）。传入字符串时交由
    集群自身的通配符语义处理。

    Args:
        client: AsyncElasticsearch 客户端
        index: 已解析的索引列表或模式字符串
        include_defaults: 是否包含映射默认值
        meta_fields: 需要保留的元字段
        skip_index: 需要跳过的索引

    Returns:
        扁平字段列表

    Raises:
        MissingIndicesError: 索引列表为空或集群返回 4xx 时抛出
        ClusterError: 其他集群错误或响应格式异常
    """
    is_list = isinstance(index, list)
    if is_list and not index:
        raise MissingIndicesError(message="没有可用于获取字段映射的索引")
    expression = ",".join(index) if is_list else index

    try:
        response = await client.indices.get_field_mapping(
            fields="*",
            index=index,
            ignore_unavailable=is_list,
            allow_no_indices=False,
            include_defaults=include_defaults,
        )
    except CLUSTER_ERRORS as e:
        raise translate_cluster_error(e, expression) from e

    fields = transform_mapping_into_fields(
        response_body(response, expression),
        meta_fields,
        skip_index,
        index_order=index if is_list else None,
    )
    logger.info(f"索引表达式 '{expression}' 获取到 {len(fields)} 个字段")
    return fields
