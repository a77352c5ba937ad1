"""持久化字段快照读取模块."""

from __future__ import annotations

import json
import logging
from typing import Any

from elasticsearch import NotFoundError

from .cluster import CLUSTER_ERRORS, response_body
from .exceptions import ClusterError
from .models import Field

logger = logging.getLogger(__name__)


def parse_field_snapshot(raw: Any, pattern_id: str) -> list[Field]:
    """解析快照中的字段列表.

    快照中的 fields 可能是序列化后的 JSON 字符串，也可能已经是列表。

    Raises:
        ClusterError: 快照内容无法解析时抛出
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as e:
            raise ClusterError(f"索引模式 '{pattern_id}' 的字段快照不是合法 JSON") from e
    if not isinstance(raw, list):
        raise ClusterError(f"索引模式 '{pattern_id}' 的字段快照不是列表")
    try:
        return [Field.from_dict(item) for item in raw]
    except ValueError as e:
        raise ClusterError(f"索引模式 '{pattern_id}' 的字段快照格式异常: {e}") from e


async def fetch_field_snapshot(
    client: Any,
    pattern_id: str,
    store_index: str = ".kibana",
    doc_type: str = "index-pattern",
) -> list[Field] | None:
    """读取索引模式文档中持久化的字段列表.

    字段列表位于 _source.fields，或按文档类型嵌套在 _source.<doc_type>.fields。

    Args:
        client: AsyncElasticsearch 客户端
        pattern_id: 索引模式标识
        store_index: 索引模式文档所在索引
        doc_type: 索引模式文档类型

    Returns:
        持久化的字段列表；文档或字段不存在时返回 None

    Raises:
        ClusterError: 读取失败或快照格式异常
    """
    try:
        response = await client.get(
            index=store_index,
            id=pattern_id,
            source_includes=["fields", f"{doc_type}.fields"],
        )
    except NotFoundError:
        logger.debug(f"索引模式 '{pattern_id}' 没有持久化文档")
        return None
    except CLUSTER_ERRORS as e:
        raise ClusterError(f"读取索引模式 '{pattern_id}' 的持久化文档失败: {e}") from e

    body = response_body(response, store_index)
    if not body.get("found"):
        return None

    source = body.get("_source") or {}
    raw = source.get("fields")
    if raw is None and isinstance(source.get(doc_type), dict):
        raw = source[doc_type].get("fields")
    if raw is None:
        return None

    return parse_field_snapshot(raw, pattern_id)
