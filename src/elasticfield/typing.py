"""elasticfield 类型定义模块."""

from typing import Any, Dict, List

# 别名列表响应类型
# 格式: {索引名: {"aliases": {别名: {...}}}}
AliasResponse = Dict[str, Dict[str, Any]]

# 字段映射响应类型
# 格式: {索引名: {"mappings": {字段全名: {"full_name": ..., "mapping": {...}}}}}
FieldMappingResponse = Dict[str, Dict[str, Any]]

# 持久化字段快照中的单个字段
SerializedField = Dict[str, Any]

# 索引表达式：逗号列表、通配符或候选索引列表
IndexExpression = str | List[str]
