"""上游认证令牌缓存。

缓存上游认证服务签发的 Bearer 令牌，过期后按需刷新。
"""

import logging
import time
from typing import Callable

import httpx
from returns.result import Failure, Result, Success

from src.config import get_settings
from src.monitoring.metrics import auth_token_refreshes_total, record_refresh

logger = logging.getLogger(__name__)


class AuthenticationError(Exception):
    """获取上游认证令牌失败。"""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class AuthTokenCache:
    """Bearer 令牌缓存。

    令牌仅在 expiry > now 时可用。expiry 直接取自上游响应的 expires_in，
    按绝对时间戳（epoch 秒）解释，而不是相对时长。
    若上游实际返回的是相对秒数，令牌会被视为已过期，每次调用都会重新认证。

    并发未命中时不做去重，可能同时发出多个刷新请求，以最后写入者为准。
    """

    def __init__(
        self,
        base_url: str | None = None,
        credentials: dict[str, str] | None = None,
        http_client: httpx.AsyncClient | None = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """初始化令牌缓存。

        Args:
            base_url: 上游服务基础地址，默认取配置
            credentials: 认证载荷，默认取配置
            http_client: 外部提供的 HTTP 客户端（主要用于测试）
            clock: 返回 epoch 秒的时钟
        """
        settings = get_settings()
        self._base_url = base_url or settings.social_api_base_url
        self._credentials = credentials or settings.auth_payload()
        self._client = http_client
        self._owns_client = http_client is None
        self._clock = clock
        self._token: str | None = None
        self._expiry: float = 0

    @property
    def expiry(self) -> float:
        return self._expiry

    def is_valid(self) -> bool:
        """当前缓存的令牌是否仍可使用。"""
        return self._token is not None and self._expiry > self._clock()

    def invalidate(self) -> None:
        """丢弃缓存的令牌。"""
        self._token = None
        self._expiry = 0

    def _ensure_client(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=10.0)
            self._owns_client = True

    async def close(self) -> None:
        """关闭自行创建的 HTTP 客户端。"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def get_token(self) -> Result[str, AuthenticationError]:
        """获取可用令牌，必要时向上游认证服务申请新令牌。

        Returns:
            Result[str, AuthenticationError]:
                Success: Bearer 令牌
                Failure: 认证请求失败或响应中缺少令牌
        """
        if self.is_valid():
            return Success(self._token)  # type: ignore[arg-type]

        self._ensure_client()
        assert self._client is not None

        try:
            response = await self._client.post("/auth", json=self._credentials)
        except httpx.HTTPError as e:
            logger.error(f"认证请求失败: {e}")
            record_refresh(auth_token_refreshes_total, "failed")
            return Failure(AuthenticationError(f"认证请求失败: {e}"))

        if response.status_code not in (200, 201):
            logger.error(f"认证服务返回错误状态码: {response.status_code}")
            record_refresh(auth_token_refreshes_total, "failed")
            return Failure(
                AuthenticationError(
                    f"认证失败 {response.status_code}",
                    status_code=response.status_code,
                )
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"认证响应解析失败: {e}")
            record_refresh(auth_token_refreshes_total, "failed")
            return Failure(AuthenticationError(f"认证响应解析失败: {e}"))

        token = payload.get("access_token") if isinstance(payload, dict) else None
        if not token:
            logger.error("认证响应中缺少 access_token")
            record_refresh(auth_token_refreshes_total, "failed")
            return Failure(AuthenticationError("认证响应中缺少 access_token"))

        expires_in = payload.get("expires_in")
        try:
            expiry = float(expires_in) if expires_in is not None else 0
        except (TypeError, ValueError):
            logger.warning(f"无法解析 expires_in: {expires_in!r}，令牌视为立即过期")
            expiry = 0

        self._token = token
        self._expiry = expiry
        record_refresh(auth_token_refreshes_total, "success")
        logger.info(f"已获取新的认证令牌，过期时间戳: {expiry}")
        return Success(token)
