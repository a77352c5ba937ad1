"""集群调用边界模块：响应解包与错误转换.

集群调用抛出的 ApiError / TransportError 都在这里统一转换：
4xx 视为索引缺失，其余为集群错误。其他异常不经过此处，原样向上抛出。
"""

from __future__ import annotations

import logging
from typing import Any

from elasticsearch import ApiError, TransportError

from .exceptions import ClusterError, IndexPatternError, MissingIndicesError

logger = logging.getLogger(__name__)

# 集群调用需要转换的异常类型
CLUSTER_ERRORS = (ApiError, TransportError)


def is_client_error(exc: BaseException) -> bool:
    """是否为集群返回的 4xx 错误."""
    if not isinstance(exc, ApiError):
        return False
    status = getattr(exc, "status_code", None)
    return isinstance(status, int) and 400 <= status < 500


def translate_cluster_error(
    exc: ApiError | TransportError, pattern: str | None = None
) -> IndexPatternError:
    """将 elasticsearch 客户端异常转换为本库异常.

    Args:
        exc: 客户端抛出的异常
        pattern: 触发请求的索引表达式，用于错误信息

    Returns:
        4xx 返回 MissingIndicesError，其余返回 ClusterError
    """
    if is_client_error(exc):
        logger.warning(f"索引表达式 '{pattern}' 未匹配到索引: {exc}")
        return MissingIndicesError(pattern)
    return ClusterError(f"集群请求失败 ('{pattern}'): {exc}")


def response_body(response: Any, expression: str | None = None) -> dict[str, Any]:
    """取出响应体并校验其为字典.

    客户端返回的 ObjectApiResponse 通过 body 属性取出原始字典。

    Raises:
        ClusterError: 响应体不是字典时抛出
    """
    body = getattr(response, "body", response)
    if not isinstance(body, dict):
        raise ClusterError(
            f"集群响应格式异常 ('{expression}'): 期望对象，实际为 {type(body).__name__}"
        )
    return body
