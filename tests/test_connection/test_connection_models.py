"""连接数据模型（ClusterConfig、ConnectionConfig）单元测试."""

import pytest

from elasticfield.connection.exceptions import ConnectionConfigError
from elasticfield.connection.models import ClusterConfig, ConnectionConfig


class TestClusterConfig:
    """ClusterConfig 数据模型测试."""

    def test_create_with_hosts(self) -> None:
        """测试使用 hosts 创建配置."""
        config = ClusterConfig(hosts=["http://localhost:9200"])
        assert config.hosts == ["http://localhost:9200"]
        assert config.verify_certs is True
        assert config.username is None

    def test_empty_hosts(self) -> None:
        """测试 hosts 为空时抛出异常."""
        with pytest.raises(ConnectionConfigError, match="hosts"):
            ClusterConfig(hosts=[])

    def test_default_hosts(self) -> None:
        """测试未提供 hosts 时抛出异常."""
        with pytest.raises(ConnectionConfigError):
            ClusterConfig()

    def test_username_without_password(self) -> None:
        """测试只提供用户名时抛出异常."""
        with pytest.raises(ConnectionConfigError):
            ClusterConfig(hosts=["http://localhost:9200"], username="elastic")


class TestConnectionConfig:
    """ConnectionConfig 数据模型测试."""

    def test_defaults(self) -> None:
        """测试默认值."""
        config = ConnectionConfig()
        assert config.max_retries == 3
        assert config.retry_on_timeout is True
        assert config.request_timeout == 30
        assert config.http_compress is True

    def test_zero_values_allowed(self) -> None:
        """测试边界值 0 合法."""
        config = ConnectionConfig(max_retries=0, request_timeout=0)
        assert config.max_retries == 0

    def test_negative_max_retries(self) -> None:
        """测试 max_retries 为负数."""
        with pytest.raises(ConnectionConfigError, match="max_retries"):
            ConnectionConfig(max_retries=-1)

    def test_negative_request_timeout(self) -> None:
        """测试 request_timeout 为负数."""
        with pytest.raises(ConnectionConfigError, match="request_timeout"):
            ConnectionConfig(request_timeout=-1)
