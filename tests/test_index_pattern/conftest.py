"""索引模式测试公共 fixtures."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from elastic_transport import ApiResponseMeta, HttpHeaders, NodeConfig
from elasticsearch import ApiError, NotFoundError


def _meta(status: int) -> ApiResponseMeta:
    return ApiResponseMeta(
        status=status,
        http_version="1.1",
        headers=HttpHeaders(),
        duration=0.0,
        node=NodeConfig("http", "localhost", 9200),
    )


@pytest.fixture
def api_error():
    """按状态码构造 elasticsearch 的 ApiError."""

    def _make(status: int, message: str = "error") -> ApiError:
        cls = NotFoundError if status == 404 else ApiError
        return cls(message=message, meta=_meta(status), body={"error": message})

    return _make


@pytest.fixture
def es_client():
    """模拟 AsyncElasticsearch 客户端."""
    client = MagicMock()
    client.indices.get_alias = AsyncMock(return_value={})
    client.indices.get_field_mapping = AsyncMock(return_value={})
    client.get = AsyncMock(return_value={"found": False})
    return client


def _field_mapping(name: str, es_type: str | None = None, **extra) -> dict:
    """构造单个字段的 get_field_mapping 条目."""
    leaf = name.split(".")[-1]
    body = dict(extra)
    if es_type is not None:
        body["type"] = es_type
    return {name: {"full_name": name, "mapping": {leaf: body}}}


@pytest.fixture
def field_mapping():
    return _field_mapping
