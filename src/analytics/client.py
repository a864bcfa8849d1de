"""社交数据服务客户端。

封装用户、帖子、评论三类资源的 HTTP 调用，每个请求都携带 Bearer 令牌。
"""

import logging
import time
from typing import Any

import httpx
from pydantic import ValidationError
from returns.result import Failure, Result, Success

from src.analytics.domain.models import Comment, Post
from src.analytics.services.token_cache import AuthTokenCache
from src.config import get_settings
from src.monitoring.metrics import record_upstream_request

logger = logging.getLogger(__name__)


class SocialClientError(Exception):
    """社交数据服务客户端错误。"""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        """初始化错误。

        Args:
            message: 错误消息
            status_code: HTTP 状态码（如果有）
        """
        self.message = message
        self.status_code = status_code
        super().__init__(message)


class SocialClient:
    """社交数据服务客户端。

    单次调用，不重试。
    """

    DEFAULT_TIMEOUT = 10.0  # 秒

    def __init__(
        self,
        token_cache: AuthTokenCache,
        base_url: str | None = None,
        http_client: httpx.AsyncClient | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> None:
        """初始化客户端。

        Args:
            token_cache: 认证令牌缓存
            base_url: 服务基础地址，默认取配置
            http_client: 外部提供的 HTTP 客户端（主要用于测试）
            timeout: 请求超时时间（秒）
        """
        self._token_cache = token_cache
        self._base_url = base_url or get_settings().social_api_base_url
        self._timeout = timeout
        self._client = http_client
        self._owns_client = http_client is None

    def _ensure_client(self) -> None:
        if self._client is None:
            self._client = httpx.AsyncClient(base_url=self._base_url, timeout=self._timeout)
            self._owns_client = True

    async def close(self) -> None:
        """关闭自行创建的 HTTP 客户端。"""
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def fetch_users(self) -> Result[dict[str, str], SocialClientError]:
        """获取全部用户（ID → 名称），保持上游顺序。"""
        result = await self._get("/users", resource="users")
        if isinstance(result, Failure):
            return result

        users = result.unwrap().get("users") or {}
        if not isinstance(users, dict):
            return Failure(SocialClientError("响应格式错误: users 不是对象"))
        return Success({str(uid): name for uid, name in users.items()})

    async def fetch_user_posts(
        self, user_id: str
    ) -> Result[list[Post], SocialClientError]:
        """获取指定用户的帖子列表。"""
        result = await self._get(f"/users/{user_id}/posts", resource="posts")
        if isinstance(result, Failure):
            return result

        try:
            posts = [Post.model_validate(p) for p in result.unwrap().get("posts") or []]
        except (ValidationError, TypeError) as e:
            logger.error(f"用户 {user_id} 的帖子解析失败: {e}")
            return Failure(SocialClientError(f"帖子解析失败: {e}"))
        return Success(posts)

    async def fetch_post_comments(
        self, post_id: int
    ) -> Result[list[Comment], SocialClientError]:
        """获取指定帖子的评论列表。"""
        result = await self._get(f"/posts/{post_id}/comments", resource="comments")
        if isinstance(result, Failure):
            return result

        try:
            comments = [
                Comment.model_validate(c) for c in result.unwrap().get("comments") or []
            ]
        except (ValidationError, TypeError) as e:
            logger.error(f"帖子 {post_id} 的评论解析失败: {e}")
            return Failure(SocialClientError(f"评论解析失败: {e}"))
        return Success(comments)

    async def _get(
        self, path: str, resource: str
    ) -> Result[dict[str, Any], SocialClientError]:
        """携带令牌发出 GET 请求并返回 JSON 对象。

        Args:
            path: 请求路径
            resource: 资源名，用于指标标签

        Returns:
            Result[dict, SocialClientError]: 响应 JSON 或错误
        """
        token_result = await self._token_cache.get_token()
        if isinstance(token_result, Failure):
            error = token_result.failure()
            return Failure(SocialClientError(error.message, status_code=error.status_code))

        self._ensure_client()
        assert self._client is not None

        start = time.perf_counter()
        try:
            response = await self._client.get(
                path,
                headers={"Authorization": f"Bearer {token_result.unwrap()}"},
            )
        except httpx.HTTPError as e:
            logger.error(f"社交数据服务请求失败 {path}: {e}")
            record_upstream_request("social", "failed")
            return Failure(SocialClientError(f"网络错误: {e}"))
        duration = time.perf_counter() - start

        if response.status_code != 200:
            logger.error(f"社交数据服务返回错误 {path}: {response.status_code}")
            record_upstream_request("social", "failed")
            return Failure(
                SocialClientError(
                    f"API 错误 {response.status_code}: {path}",
                    status_code=response.status_code,
                )
            )

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"社交数据服务响应解析失败 {path}: {e}")
            record_upstream_request("social", "failed")
            return Failure(SocialClientError(f"响应解析失败: {e}"))

        if not isinstance(payload, dict):
            record_upstream_request("social", "failed")
            return Failure(
                SocialClientError(f"响应格式错误: 期望 dict，实际 {type(payload).__name__}")
            )

        record_upstream_request("social", "success", endpoint=resource, duration=duration)
        return Success(payload)
