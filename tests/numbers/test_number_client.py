"""NumberClient 单元测试。

测试类别映射、时间预算和错误处理。
"""

import httpx
import pytest
from returns.result import Failure, Success

from src.numbers.client import (
    FetchFailedError,
    FetchTimeoutError,
    InvalidCategoryError,
    NumberClient,
)


def _numbers_handler(numbers):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"numbers": numbers})

    return handler


class SlowClock:
    """每次读取推进固定步长的时钟，模拟耗时的上游调用。"""

    def __init__(self, step: float) -> None:
        self.now = 0.0
        self.step = step

    def __call__(self) -> float:
        value = self.now
        self.now += self.step
        return value


class TestNumberClient:
    """NumberClient 测试类。"""

    @pytest.mark.parametrize(
        "code, path",
        [("p", "/primes"), ("f", "/fibo"), ("e", "/even"), ("r", "/rand")],
    )
    async def test_category_maps_to_endpoint(self, mock_upstream, code, path):
        """测试类别代码映射到对应端点。"""
        http_client, transport = mock_upstream(_numbers_handler([1, 2]))
        client = NumberClient(http_client=http_client)

        result = await client.fetch_numbers(code)

        assert isinstance(result, Success)
        assert transport.paths() == [path]

    async def test_fetch_success(self, mock_upstream):
        """测试成功获取数字并记录耗时。"""
        http_client, transport = mock_upstream(_numbers_handler([2, 3, 5, 7]))
        client = NumberClient(http_client=http_client, clock=SlowClock(0.1))

        result = await client.fetch_numbers("p")

        assert result.unwrap() == [2, 3, 5, 7]
        assert client.response_times == {"prime": 100}
        assert len(transport.requests) == 1

    async def test_invalid_category_makes_no_request(self, mock_upstream):
        """测试无效类别直接失败，不访问上游。"""
        http_client, transport = mock_upstream(_numbers_handler([1]))
        client = NumberClient(http_client=http_client)

        result = await client.fetch_numbers("x")

        assert isinstance(result, Failure)
        assert isinstance(result.failure(), InvalidCategoryError)
        assert transport.requests == []

    async def test_late_response_is_discarded(self, mock_upstream):
        """测试超出预算的响应即使有效也被丢弃。"""
        http_client, _ = mock_upstream(_numbers_handler([1, 2, 3]))
        client = NumberClient(http_client=http_client, timeout_ms=500, clock=SlowClock(0.6))

        result = await client.fetch_numbers("e")

        assert isinstance(result, Failure)
        assert isinstance(result.failure(), FetchTimeoutError)
        assert client.response_times == {}

    async def test_response_exactly_on_budget_is_accepted(self, mock_upstream):
        """测试耗时等于预算的响应仍被接受。"""
        http_client, _ = mock_upstream(_numbers_handler([4]))
        client = NumberClient(http_client=http_client, timeout_ms=500, clock=SlowClock(0.5))

        result = await client.fetch_numbers("e")

        assert result.unwrap() == [4]

    async def test_transport_timeout(self, mock_upstream):
        """测试 httpx 超时映射为 FetchTimeoutError。"""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        http_client, transport = mock_upstream(handler)
        client = NumberClient(http_client=http_client)

        result = await client.fetch_numbers("r")

        assert isinstance(result.failure(), FetchTimeoutError)
        assert len(transport.requests) == 1

    async def test_network_error(self, mock_upstream):
        """测试网络错误映射为 FetchFailedError。"""

        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        http_client, _ = mock_upstream(handler)
        client = NumberClient(http_client=http_client)

        result = await client.fetch_numbers("f")

        assert isinstance(result.failure(), FetchFailedError)

    async def test_server_error_is_not_retried(self, mock_upstream):
        """测试 5xx 只调用一次且不重试。"""
        http_client, transport = mock_upstream(lambda request: httpx.Response(503))
        client = NumberClient(http_client=http_client)

        result = await client.fetch_numbers("p")

        error = result.failure()
        assert isinstance(error, FetchFailedError)
        assert error.status_code == 503
        assert len(transport.requests) == 1

    @pytest.mark.parametrize(
        "body",
        [{"values": [1, 2]}, {"numbers": "1,2"}, {"numbers": [1, "2"]}, [1, 2]],
    )
    async def test_malformed_body(self, mock_upstream, body):
        """测试响应格式错误。"""
        http_client, _ = mock_upstream(lambda request: httpx.Response(200, json=body))
        client = NumberClient(http_client=http_client)

        result = await client.fetch_numbers("p")

        assert isinstance(result.failure(), FetchFailedError)

    async def test_close_keeps_injected_client_open(self, mock_upstream):
        """测试 close 不关闭外部注入的 HTTP 客户端。"""
        http_client, _ = mock_upstream(_numbers_handler([1]))
        client = NumberClient(http_client=http_client)

        await client.close()

        assert not http_client.is_closed

    async def test_close_releases_own_client(self):
        """测试 close 关闭客户端自行创建的 HTTP 客户端，之后可重新创建。"""
        client = NumberClient(base_url="http://numbers.test", timeout_ms=500)
        client._ensure_client()
        own_client = client._client

        await client.close()

        assert own_client.is_closed
        assert client._client is None
