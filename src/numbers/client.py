"""数字生成服务客户端。

封装数字生成服务的 HTTP 调用：每次调用只发出一个请求，
并受墙钟时间预算约束，超出预算的响应一律丢弃。
"""

import logging
import time
from typing import Any, Callable

import httpx
from returns.result import Failure, Result, Success

from src.config import get_settings
from src.monitoring.metrics import record_upstream_request
from src.numbers.domain.models import Number, NumberCategory

logger = logging.getLogger(__name__)


class NumberClientError(Exception):
    """数字服务客户端错误基类。"""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """初始化错误。

        Args:
            message: 错误消息
            status_code: HTTP 状态码（如果有）
        """
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class InvalidCategoryError(NumberClientError):
    """类别代码不在 p/f/e/r 之内。"""


class FetchTimeoutError(NumberClientError):
    """上游响应超出时间预算。"""


class FetchFailedError(NumberClientError):
    """上游调用失败（网络错误、非 200 状态码或响应格式错误）。"""


def _is_number(value: Any) -> bool:
    # bool 是 int 的子类，需要单独排除
    return isinstance(value, (int, float)) and not isinstance(value, bool)


class NumberClient:
    """数字生成服务客户端。

    不做任何重试：每次 fetch_numbers 至多一次上游调用。
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout_ms: int | None = None,
        endpoints: dict[NumberCategory, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """初始化客户端。

        Args:
            base_url: 服务基础地址，默认取配置
            timeout_ms: 时间预算（毫秒），默认取配置
            endpoints: 类别到端点路径的映射，默认取配置
            http_client: 外部提供的 HTTP 客户端（主要用于测试）
            clock: 单调时钟，返回秒
        """
        settings = get_settings()
        self._base_url = base_url or settings.number_server_url
        self._timeout_ms = timeout_ms or settings.number_fetch_timeout_ms
        self._endpoints = endpoints or {
            NumberCategory.prime: settings.primes_endpoint,
            NumberCategory.fibonacci: settings.fibonacci_endpoint,
            NumberCategory.even: settings.even_endpoint,
            NumberCategory.random: settings.random_endpoint,
        }
        self._client = http_client
        self._owns_client = http_client is None
        self._clock = clock
        # 每个类别最近一次成功调用的耗时（毫秒），仅用于观测
        self.response_times: dict[str, int] = {}

    def _ensure_client(self) -> None:
        """确保 HTTP 客户端已初始化。"""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._base_url,
                timeout=self._timeout_ms / 1000,
            )
            self._owns_client = True

    async def close(self) -> None:
        """关闭自行创建的 HTTP 客户端。"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch_numbers(
        self,
        code: str,
    ) -> Result[list[Number], NumberClientError]:
        """获取指定类别的数字列表。

        Args:
            code: 类别代码（p, f, e, r）

        Returns:
            Result[list, NumberClientError]:
                Success: 上游返回的数字列表
                Failure: InvalidCategoryError / FetchTimeoutError / FetchFailedError
        """
        category = NumberCategory.from_code(code)
        if category is None:
            return Failure(InvalidCategoryError(f"无效的类别代码: {code}"))

        endpoint = self._endpoints[category]

        self._ensure_client()
        assert self._client is not None

        start = self._clock()
        try:
            response = await self._client.get(endpoint)
        except httpx.TimeoutException as e:
            logger.warning(f"数字服务请求超时: {category.name} - {e}")
            record_upstream_request("numbers", "timeout")
            return Failure(FetchTimeoutError(f"请求超时: {e}"))
        except httpx.HTTPError as e:
            logger.error(f"数字服务网络错误: {category.name} - {e}")
            record_upstream_request("numbers", "failed")
            return Failure(FetchFailedError(f"网络错误: {e}"))

        elapsed_ms = (self._clock() - start) * 1000

        # 超出预算的响应即使内容有效也必须丢弃
        if elapsed_ms > self._timeout_ms:
            logger.warning(
                f"数字服务响应耗时 {elapsed_ms:.0f}ms 超过预算 {self._timeout_ms}ms，丢弃结果"
            )
            record_upstream_request("numbers", "timeout")
            return Failure(
                FetchTimeoutError(f"响应耗时 {elapsed_ms:.0f}ms 超过 {self._timeout_ms}ms")
            )

        if response.status_code != 200:
            logger.error(f"数字服务返回错误状态码: {response.status_code}")
            record_upstream_request("numbers", "failed")
            return Failure(
                FetchFailedError(
                    f"API 错误 {response.status_code}",
                    status_code=response.status_code,
                )
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"数字服务响应解析失败: {e}")
            record_upstream_request("numbers", "failed")
            return Failure(FetchFailedError(f"响应解析失败: {e}"))

        numbers = payload.get("numbers") if isinstance(payload, dict) else None
        if not isinstance(numbers, list) or not all(_is_number(n) for n in numbers):
            logger.error(f"数字服务响应格式错误: {str(payload)[:200]}")
            record_upstream_request("numbers", "failed")
            return Failure(FetchFailedError("响应格式错误: 缺少 numbers 数组"))

        self.response_times[category.name] = round(elapsed_ms)
        record_upstream_request(
            "numbers", "success", endpoint=category.name, duration=elapsed_ms / 1000
        )
        logger.info(f"获取 {category.name} 数字 {len(numbers)} 个，耗时 {elapsed_ms:.0f}ms")
        return Success(numbers)
