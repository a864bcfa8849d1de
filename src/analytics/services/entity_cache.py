"""社交数据集缓存。

按 用户 → 帖子 → 评论 的顺序逐个请求上游，构建联合数据集并在 TTL 内复用。
"""

import asyncio
import logging
import time
from typing import Callable

from returns.result import Failure, Result, Success

from src.analytics.client import SocialClient, SocialClientError
from src.analytics.domain.models import CachedDataset
from src.monitoring.metrics import entity_cache_refreshes_total, record_refresh

logger = logging.getLogger(__name__)


class EntityCache:
    """带 TTL 的联合数据集缓存。

    读者只会看到完整刷新得到的数据集：重建写入暂存数据集，
    全部请求成功后才整体替换。任一请求失败即中止本次刷新，原数据集保持不变，
    下一次调用会重新执行完整重建。

    同一时刻只允许一个重建在进行，并发的过期调用等待其完成后复用结果。
    """

    DEFAULT_TTL_SECONDS = 60.0

    def __init__(
        self,
        client: SocialClient,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        """初始化缓存。

        Args:
            client: 社交数据服务客户端
            ttl_seconds: 缓存有效期（秒）
            clock: 单调时钟，返回秒
        """
        self._client = client
        self._ttl = ttl_seconds
        self._clock = clock
        self._dataset = CachedDataset()
        self._refresh_lock = asyncio.Lock()

    @property
    def dataset(self) -> CachedDataset:
        return self._dataset

    def is_valid(self) -> bool:
        """数据集是否已填充且未过期。"""
        last_fetch = self._dataset.last_fetch
        return last_fetch > 0 and (self._clock() - last_fetch) < self._ttl

    def invalidate(self) -> None:
        """将缓存标记为过期，保留现有数据。"""
        self._dataset.last_fetch = 0.0

    async def ensure_fresh(self) -> Result[CachedDataset, SocialClientError]:
        """返回未过期的数据集，必要时执行一次完整重建。

        Returns:
            Result[CachedDataset, SocialClientError]:
                Success: 当前数据集
                Failure: 重建过程中第一个失败的上游调用
        """
        if self.is_valid():
            return Success(self._dataset)

        async with self._refresh_lock:
            # 等锁期间其他调用可能已经完成刷新
            if self.is_valid():
                return Success(self._dataset)

            result = await self._rebuild()
            if isinstance(result, Failure):
                record_refresh(entity_cache_refreshes_total, "failed")
                logger.error(f"数据集刷新失败，保留原缓存: {result.failure().message}")
                return result

            staged = result.unwrap()
            staged.last_fetch = self._clock()
            self._dataset = staged
            record_refresh(entity_cache_refreshes_total, "success")
            logger.info(
                "数据集刷新完成: users=%d, posts=%d, commented_posts=%d",
                len(staged.users),
                sum(len(p) for p in staged.posts.values()),
                len(staged.comments),
            )
            return Success(staged)

    async def _rebuild(self) -> Result[CachedDataset, SocialClientError]:
        """顺序抓取全部数据到暂存数据集。"""
        staged = CachedDataset()

        users_result = await self._client.fetch_users()
        if isinstance(users_result, Failure):
            return users_result
        staged.users = users_result.unwrap()

        for user_id in staged.users:
            posts_result = await self._client.fetch_user_posts(user_id)
            if isinstance(posts_result, Failure):
                return posts_result
            posts = posts_result.unwrap()
            staged.posts[user_id] = posts

            for post in posts:
                comments_result = await self._client.fetch_post_comments(post.id)
                if isinstance(comments_result, Failure):
                    return comments_result
                staged.comments[post.id] = comments_result.unwrap()

        return Success(staged)
