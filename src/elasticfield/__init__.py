"""elasticfield - Elasticsearch 索引模式解析与字段缓存库.

将逻辑上的索引模式（可能包含通配符或按时间滚动的日期模板）解析为集群中
实际存在的索引/别名集合，获取其字段映射，并在本地缓存扁平化后的字段列表。

主要功能:
    - IndexPatternMapper: 解析索引模式并获取字段列表（带缓存与并发合并）
    - FieldCache: 进程内字段缓存
    - DateTemplate: 日期模板格式化与回环校验
    - create_async_client: 根据集群配置创建 AsyncElasticsearch 客户端

使用示例:
    from elasticfield import IndexPattern, IndexPatternMapper

    mapper = IndexPatternMapper(es_client)
    fields = await mapper.get_fields_for_index_pattern(
        IndexPattern(id="logs-[YYYY.MM.DD]", time_field_name="@timestamp",
                     interval_name="daily")
    )
"""

__version__ = "0.1.0"

# 导出连接组件
from elasticfield.connection import ClusterConfig, ConnectionConfig, create_async_client

# 导出异常
from elasticfield.exceptions import ElasticFieldError

# 导出索引模式组件
from elasticfield.index_pattern import (
    CandidateIndex,
    ClusterError,
    DateTemplate,
    Field,
    FieldCache,
    IndexPattern,
    IndexPatternError,
    IndexPatternMapper,
    IntervalName,
    MapperConfig,
    MissingIndicesError,
    ResolvedIndices,
)

__all__ = [
    # 版本
    "__version__",
    # 核心类
    "IndexPatternMapper",
    "FieldCache",
    "DateTemplate",
    # 数据模型
    "IndexPattern",
    "Field",
    "IntervalName",
    "CandidateIndex",
    "ResolvedIndices",
    "MapperConfig",
    # 连接
    "ClusterConfig",
    "ConnectionConfig",
    "create_async_client",
    # 异常
    "ElasticFieldError",
    "IndexPatternError",
    "MissingIndicesError",
    "ClusterError",
]
