"""集群连接模块 - 根据配置创建 AsyncElasticsearch 客户端.

主要组件:
    - create_async_client: 客户端创建函数
    - ClusterConfig: 集群配置模型
    - ConnectionConfig: 重试与超时配置模型

使用示例:
    from elasticfield.connection import ClusterConfig, create_async_client

    client = create_async_client(ClusterConfig(hosts=["http://localhost:9200"]))
"""

from .exceptions import ConnectionConfigError
from .models import ClusterConfig, ConnectionConfig
from .tool import build_client_kwargs, create_async_client

__all__ = [
    # 工具函数
    "create_async_client",
    "build_client_kwargs",
    # 模型
    "ClusterConfig",
    "ConnectionConfig",
    # 异常
    "ConnectionConfigError",
]
