"""社交数据聚合服务。

基于缓存数据集计算评论最多的用户、评论最多的帖子和最新帖子。
"""

import logging

from returns.result import Failure, Result, Success

from src.analytics.client import SocialClientError
from src.analytics.domain.models import CachedDataset, PostStats, UserStats
from src.analytics.services.entity_cache import EntityCache

logger = logging.getLogger(__name__)

TOP_USERS_LIMIT = 5
LATEST_POSTS_LIMIT = 5


def compute_top_users(dataset: CachedDataset, limit: int = TOP_USERS_LIMIT) -> list[UserStats]:
    """按评论总数降序返回前 limit 个用户。

    排序是稳定的，评论数相同时保持用户的枚举顺序。
    """
    stats = []
    for user_id, name in dataset.users.items():
        user_posts = dataset.posts.get(user_id, [])
        stats.append(
            UserStats(
                user_id=user_id,
                name=name,
                comment_count=sum(dataset.comment_count(p.id) for p in user_posts),
                post_count=len(user_posts),
            )
        )
    stats.sort(key=lambda s: s.comment_count, reverse=True)
    return stats[:limit]


def compute_post_stats(dataset: CachedDataset) -> list[PostStats]:
    """为每个帖子附加作者名称和评论数。"""
    return [
        PostStats(
            id=post.id,
            user_id=post.user_id,
            content=post.content,
            user_name=dataset.user_name(post.user_id),
            comment_count=dataset.comment_count(post.id),
        )
        for post in dataset.iter_posts()
    ]


def compute_popular_posts(dataset: CachedDataset) -> list[PostStats]:
    """返回评论数等于最大值的全部帖子。"""
    posts = compute_post_stats(dataset)
    max_count = max((p.comment_count for p in posts), default=0)
    return [p for p in posts if p.comment_count == max_count]


def compute_latest_posts(dataset: CachedDataset, limit: int = LATEST_POSTS_LIMIT) -> list[PostStats]:
    """按帖子 ID 降序返回前 limit 个帖子（ID 越大越新）。"""
    posts = compute_post_stats(dataset)
    posts.sort(key=lambda p: p.id, reverse=True)
    return posts[:limit]


class AnalyticsService:
    """社交数据聚合服务。

    每个查询先确保数据集新鲜，再在内存中计算。
    """

    def __init__(self, cache: EntityCache) -> None:
        self._cache = cache

    @property
    def cache(self) -> EntityCache:
        return self._cache

    async def top_users(self) -> Result[list[UserStats], SocialClientError]:
        result = await self._cache.ensure_fresh()
        if isinstance(result, Failure):
            return result
        return Success(compute_top_users(result.unwrap()))

    async def popular_posts(self) -> Result[list[PostStats], SocialClientError]:
        result = await self._cache.ensure_fresh()
        if isinstance(result, Failure):
            return result
        return Success(compute_popular_posts(result.unwrap()))

    async def latest_posts(self) -> Result[list[PostStats], SocialClientError]:
        result = await self._cache.ensure_fresh()
        if isinstance(result, Failure):
            return result
        return Success(compute_latest_posts(result.unwrap()))
