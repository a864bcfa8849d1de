"""Pytest 配置文件。

提供测试 Fixtures 和配置。
"""

import os
from collections.abc import Callable

import httpx
import pytest
from fastapi.testclient import TestClient

from src.config import clear_settings_cache
from src.container import reset_services
from src.main import app

UPSTREAM_BASE_URL = "http://upstream.test"


@pytest.fixture(autouse=True)
def reset_env_before_each_test():
    """在每个测试前后重置环境变量、配置缓存和服务容器。"""
    original_env = os.environ.copy()
    clear_settings_cache()
    reset_services()

    yield

    os.environ.clear()
    os.environ.update(original_env)
    clear_settings_cache()
    reset_services()
    app.dependency_overrides.clear()


class FakeClock:
    """可手动推进的时钟。"""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    """从 1000 秒开始的假时钟。"""
    return FakeClock()


class RecordingTransport(httpx.MockTransport):
    """记录所有请求的 Mock 传输层。"""

    def __init__(self, handler: Callable[[httpx.Request], httpx.Response]) -> None:
        self.requests: list[httpx.Request] = []

        def _record(request: httpx.Request) -> httpx.Response:
            self.requests.append(request)
            return handler(request)

        super().__init__(_record)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def mock_upstream():
    """构造指向 Mock 上游的 httpx 异步客户端。

    用法: http_client, transport = mock_upstream(handler)
    """

    def _factory(handler: Callable[[httpx.Request], httpx.Response]):
        transport = RecordingTransport(handler)
        http_client = httpx.AsyncClient(transport=transport, base_url=UPSTREAM_BASE_URL)
        return http_client, transport

    return _factory


@pytest.fixture(scope="function")
def client():
    """FastAPI 测试客户端 Fixture。"""
    clear_settings_cache()

    with TestClient(app) as test_client:
        yield test_client

    clear_settings_cache()
