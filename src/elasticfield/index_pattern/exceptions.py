"""索引模式解析异常定义模块."""

from ..exceptions import ElasticFieldError


class IndexPatternError(ElasticFieldError):
    """索引模式解析基础异常类."""

    pass


class MissingIndicesError(IndexPatternError):
    """索引模式没有匹配到任何索引.

    集群对别名/映射查询返回 4xx，或时间滚动模式解析出零个日期索引时抛出。
    调用方通常将其展示为"该模式/时间范围内没有数据"，而非系统故障。
    """

    def __init__(self, pattern: str | None = None, message: str | None = None):
        self.pattern = pattern
        if message is None:
            message = (
                f"索引模式 '{pattern}' 未匹配到任何索引"
                if pattern
                else "索引模式未匹配到任何索引"
            )
        super().__init__(message)


class ClusterError(IndexPatternError):
    """集群返回的其他错误（5xx、网络错误、响应格式异常）."""

    pass


class InvalidPatternError(IndexPatternError):
    """索引模式的日期模板不合法（如方括号不成对）."""

    pass


class ConfigError(IndexPatternError):
    """解析器配置参数不合法."""

    pass
