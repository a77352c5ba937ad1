"""索引模式解析模块.

该模块将逻辑索引模式解析为集群中实际存在的索引，并缓存其字段列表：
- 日期模板的格式化、解析与回环校验
- 按时间区间计算候选索引名
- 别名展开与日期索引匹配
- 字段映射获取与扁平化
- 带并发合并与持久化快照预热的字段缓存

示例用法:
    >>> from elasticfield.index_pattern import IndexPattern, IndexPatternMapper
    >>> mapper = IndexPatternMapper(es_client)
    >>> pattern = IndexPattern(
    ...     id="logs-[YYYY.MM.DD]", time_field_name="@timestamp", interval_name="daily"
    ... )
    >>> fields = await mapper.get_fields_for_index_pattern(pattern)
    >>> mapper.clear_cache(pattern)
"""

from .aliases import flatten_aliases, match_dated_indices, resolve_aliases
from .cache import FieldCache
from .date_template import DateTemplate, get_template, pattern_to_wildcard
from .exceptions import (
    ClusterError,
    ConfigError,
    IndexPatternError,
    InvalidPatternError,
    MissingIndicesError,
)
from .flight import SingleFlight
from .intervals import INTERVALS, Interval, candidate_indices, get_interval
from .mappings import cast_mapping_type, fetch_fields, transform_mapping_into_fields
from .models import (
    CandidateIndex,
    Field,
    IndexPattern,
    IntervalName,
    MapperConfig,
    ResolvedIndices,
)
from .snapshot import fetch_field_snapshot, parse_field_snapshot
from .tool import IndexPatternMapper

__all__ = [
    # 核心类
    "IndexPatternMapper",
    "FieldCache",
    "SingleFlight",
    "DateTemplate",
    # 数据模型
    "IndexPattern",
    "Field",
    "IntervalName",
    "Interval",
    "CandidateIndex",
    "ResolvedIndices",
    "MapperConfig",
    "INTERVALS",
    # 工具函数
    "candidate_indices",
    "get_interval",
    "get_template",
    "pattern_to_wildcard",
    "resolve_aliases",
    "flatten_aliases",
    "match_dated_indices",
    "fetch_fields",
    "transform_mapping_into_fields",
    "cast_mapping_type",
    "fetch_field_snapshot",
    "parse_field_snapshot",
    # 异常类
    "IndexPatternError",
    "MissingIndicesError",
    "ClusterError",
    "InvalidPatternError",
    "ConfigError",
]
