"""异步 ES 客户端创建模块."""

from __future__ import annotations

import logging

from elasticsearch import AsyncElasticsearch

from .models import ClusterConfig, ConnectionConfig

logger = logging.getLogger(__name__)


def build_client_kwargs(
    cluster_config: ClusterConfig,
    connection_config: ConnectionConfig | None = None,
) -> dict:
    """根据配置构建客户端参数.

    Args:
        cluster_config: 集群地址与认证配置
        connection_config: 重试与超时配置，默认使用 ConnectionConfig 的默认值

    Returns:
        可直接传给 AsyncElasticsearch 的关键字参数
    """
    connection_config = connection_config or ConnectionConfig()
    kwargs: dict = {
        "hosts": cluster_config.hosts,
        "max_retries": connection_config.max_retries,
        "retry_on_timeout": connection_config.retry_on_timeout,
        "request_timeout": connection_config.request_timeout,
        "http_compress": connection_config.http_compress,
        "verify_certs": cluster_config.verify_certs,
    }

    # 认证方式按 Basic Auth / API Key / Bearer Token 依次叠加
    if cluster_config.username and cluster_config.password:
        kwargs["basic_auth"] = (cluster_config.username, cluster_config.password)
    if cluster_config.api_key:
        kwargs["api_key"] = cluster_config.api_key
    if cluster_config.bearer_token:
        kwargs["bearer_auth"] = cluster_config.bearer_token

    if cluster_config.ca_certs:
        kwargs["ca_certs"] = cluster_config.ca_certs

    return kwargs


def create_async_client(
    cluster_config: ClusterConfig,
    connection_config: ConnectionConfig | None = None,
) -> AsyncElasticsearch:
    """创建 AsyncElasticsearch 客户端.

    Args:
        cluster_config: 集群地址与认证配置
        connection_config: 重试与超时配置

    Returns:
        AsyncElasticsearch 客户端实例，由调用方负责 close

    Examples:
        >>> client = create_async_client(ClusterConfig(hosts=["http://localhost:9200"]))
        >>> mapper = IndexPatternMapper(client)
    """
    kwargs = build_client_kwargs(cluster_config, connection_config)
    logger.info(f"创建异步 ES 客户端: {cluster_config.hosts}")
    return AsyncElasticsearch(**kwargs)
