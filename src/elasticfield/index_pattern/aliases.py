"""别名解析与日期索引匹配模块."""

from __future__ import annotations

import logging
from typing import Any

from ..typing import AliasResponse, IndexExpression
from .cluster import CLUSTER_ERRORS, response_body, translate_cluster_error
from .date_template import DateTemplate, get_template
from .exceptions import ClusterError

logger = logging.getLogger(__name__)


def flatten_aliases(response: AliasResponse, expression: str | None = None) -> list[str]:
    """将别名列表响应展开为排序、去重后的名称列表.

    每个索引贡献自身名称以及指向它的所有别名。

    Args:
        response: get_alias 响应体，格式为 {索引名: {"aliases": {别名: {...}}}}
        expression: 请求的索引表达式，用于错误信息

    Returns:
        排序、去重后的索引与别名名称

    Raises:
        ClusterError: 响应结构不符合预期时抛出

    Example:
        >>> flatten_aliases({
        ...     "logs-2024.01.02": {"aliases": {"logs-current": {}}},
        ...     "logs-2024.01.01": {"aliases": {}},
        ... })
        ['logs-2024.01.01', 'logs-2024.01.02', 'logs-current']
    """
    names: set[str] = set()
    for index_name, index_data in response.items():
        if not isinstance(index_data, dict):
            raise ClusterError(f"别名响应格式异常 ('{expression}'): 索引 '{index_name}'")
        aliases = index_data.get("aliases") or {}
        if not isinstance(aliases, dict):
            raise ClusterError(
                f"别名响应格式异常 ('{expression}'): 索引 '{index_name}' 的 aliases 不是对象"
            )
        names.add(index_name)
        names.update(aliases.keys())
    return sorted(names)


async def resolve_aliases(
    client: Any,
    index: IndexExpression,
    ignore_unavailable: bool = False,
) -> list[str]:
    """查询集群中与名称/通配符匹配的索引及其别名.

    Args:
        client: AsyncElasticsearch 客户端
        index: 索引名、通配符、逗号列表或名称列表
        ignore_unavailable: 是否忽略不存在的具体索引名（用于候选索引列表）

    Returns:
        排序、去重后的索引与别名名称

    Raises:
        MissingIndicesError: 集群返回 4xx（名称无法解析）时抛出
        ClusterError: 其他集群错误或响应格式异常
    """
    expression = ",".join(index) if isinstance(index, list) else index
    params: dict[str, Any] = {"index": expression}
    if ignore_unavailable:
        params["ignore_unavailable"] = True

    try:
        response = await client.indices.get_alias(**params)
    except CLUSTER_ERRORS as e:
        raise translate_cluster_error(e, expression) from e

    names = flatten_aliases(response_body(response, expression), expression)
    logger.debug(f"索引表达式 '{expression}' 解析出 {len(names)} 个索引/别名")
    return names


def match_dated_indices(pattern: str | DateTemplate, names: list[str]) -> list[str]:
    """保留能按日期模板严格回环的名称.

    名称按模板解析出日期后再按同一模板渲染，必须与原名称逐字相同，
    以排除通配符偶然匹配到的无关索引或别名。

    Args:
        pattern: 索引模式或已编译的日期模板
        names: 候选名称

    Returns:
        匹配的名称，按解析出的日期先后排序，日期相同时保持输入顺序

    Example:
        >>> match_dated_indices(
        ...     "events-[YYYY.MM.DD]",
        ...     ["events-2023.01.05", "events-2023.01.05-backup", "eventsfoo"],
        ... )
        ['events-2023.01.05']
    """
    template = pattern if isinstance(pattern, DateTemplate) else get_template(pattern)

    dated = []
    for name in names:
        parsed = template.parse(name)
        if parsed is not None and template.format(parsed) == name:
            dated.append((parsed, name))

    dated.sort(key=lambda item: item[0])
    return [name for _, name in dated]
