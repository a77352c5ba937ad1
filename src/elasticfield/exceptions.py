"""elasticfield 异常定义模块."""


class ElasticFieldError(Exception):
    """elasticfield 基础异常类."""

    pass
