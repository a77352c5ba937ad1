"""索引模式解析器使用示例.

本文件展示了如何使用 IndexPatternMapper 将索引模式解析为实际索引并获取字段列表。
"""

import asyncio
import logging

from elasticfield import ClusterConfig, create_async_client
from elasticfield.index_pattern import (
    IndexPattern,
    IndexPatternMapper,
    MapperConfig,
    MissingIndicesError,
    candidate_indices,
)

logging.basicConfig(level=logging.INFO)


# ==================== 示例1：滚动索引模式 ====================
async def example_interval_pattern(mapper: IndexPatternMapper):
    """获取按天滚动的索引模式的字段."""
    pattern = IndexPattern(
        id="logs-[YYYY.MM.DD]",
        time_field_name="@timestamp",
        interval_name="daily",
    )

    # 先查看集群中实际存在的日期索引
    resolved = await mapper.get_indices_for_index_pattern(pattern)
    print(f"全部名称: {resolved.all}")
    print(f"日期索引: {resolved.matches}")

    # 只使用最近 lookback 个索引的映射
    fields = await mapper.get_fields_for_index_pattern(pattern)
    for field in fields:
        print(f"  {field.name}: {field.type} (可聚合={field.aggregatable})")

    # 第二次调用直接命中缓存
    await mapper.get_fields_for_index_pattern(pattern)
    return fields


# ==================== 示例2：普通通配符模式 ====================
async def example_wildcard_pattern(mapper: IndexPatternMapper):
    """获取普通通配符模式的字段，索引不存在时给出提示."""
    pattern = IndexPattern(id="metrics-*")
    try:
        fields = await mapper.get_fields_for_index_pattern(pattern)
    except MissingIndicesError as e:
        print(f"没有匹配的索引: {e.pattern}")
        return []

    print(f"字段数量: {len(fields)}")
    return fields


# ==================== 示例3：映射变更后刷新 ====================
async def example_refresh(mapper: IndexPatternMapper):
    """映射变更后清除缓存并重新解析."""
    mapper.clear_cache("metrics-*")
    return await example_wildcard_pattern(mapper)


# ==================== 示例4：离线计算候选索引 ====================
def example_candidate_indices():
    """不访问集群，计算时间范围内的候选索引名."""
    from datetime import UTC, datetime

    candidates = candidate_indices(
        "logs-[YYYY.MM.DD]",
        "@timestamp",
        datetime(2024, 1, 1, tzinfo=UTC),
        datetime(2024, 1, 3, 12, tzinfo=UTC),
    )
    for candidate in candidates:
        print(f"  {candidate.index}: {candidate.start} ~ {candidate.end}")
    return candidates


async def main():
    """运行所有示例."""
    client = create_async_client(ClusterConfig(hosts=["http://localhost:9200"]))
    mapper = IndexPatternMapper(client, MapperConfig(lookback=3))
    try:
        await example_interval_pattern(mapper)
        await example_wildcard_pattern(mapper)
        await example_refresh(mapper)
        example_candidate_indices()
    finally:
        await client.close()


if __name__ == "__main__":
    asyncio.run(main())
