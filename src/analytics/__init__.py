"""社交数据分析包。

提供上游数据抓取、数据集缓存和评论统计聚合功能。
"""

from src.analytics.client import SocialClient, SocialClientError
from src.analytics.domain.models import CachedDataset, Comment, Post, PostStats, UserStats
from src.analytics.services.aggregation_service import AnalyticsService
from src.analytics.services.entity_cache import EntityCache
from src.analytics.services.token_cache import AuthenticationError, AuthTokenCache

__all__ = [
    "SocialClient",
    "SocialClientError",
    "CachedDataset",
    "Comment",
    "Post",
    "PostStats",
    "UserStats",
    "AnalyticsService",
    "EntityCache",
    "AuthTokenCache",
    "AuthenticationError",
]
