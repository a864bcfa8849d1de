"""服务容器。

按需构造各服务对象并在进程内复用，通过 FastAPI 依赖注入提供给路由。
测试可通过 app.dependency_overrides 注入全新的服务实例。
"""

from __future__ import annotations

import logging

from src.analytics.client import SocialClient
from src.analytics.services.aggregation_service import AnalyticsService
from src.analytics.services.entity_cache import EntityCache
from src.analytics.services.token_cache import AuthTokenCache
from src.config import get_settings
from src.numbers.client import NumberClient
from src.numbers.services.numbers_service import NumbersService
from src.numbers.window import SlidingWindowStore

logger = logging.getLogger(__name__)

_numbers_service: NumbersService | None = None
_token_cache: AuthTokenCache | None = None
_social_client: SocialClient | None = None
_analytics_service: AnalyticsService | None = None


def get_numbers_service() -> NumbersService:
    """获取数字窗口服务。首次调用时按配置构造。"""
    global _numbers_service
    if _numbers_service is None:
        settings = get_settings()
        _numbers_service = NumbersService(
            client=NumberClient(),
            store=SlidingWindowStore(settings.window_size),
        )
        logger.info(f"数字窗口服务已初始化，窗口大小: {settings.window_size}")
    return _numbers_service


def get_token_cache() -> AuthTokenCache:
    """获取上游认证令牌缓存。"""
    global _token_cache
    if _token_cache is None:
        _token_cache = AuthTokenCache()
    return _token_cache


def get_analytics_service() -> AnalyticsService:
    """获取社交数据聚合服务。"""
    global _social_client, _analytics_service
    if _analytics_service is None:
        settings = get_settings()
        _social_client = SocialClient(token_cache=get_token_cache())
        _analytics_service = AnalyticsService(
            EntityCache(_social_client, ttl_seconds=settings.analytics_cache_ttl_seconds)
        )
    return _analytics_service


async def close_services() -> None:
    """关闭所有已构造服务持有的 HTTP 客户端。在 main.py lifespan 关闭时调用。"""
    if _numbers_service is not None:
        await _numbers_service.close()
    if _social_client is not None:
        await _social_client.close()
    if _token_cache is not None:
        await _token_cache.close()


def reset_services() -> None:
    """丢弃所有服务实例。

    主要用于测试场景。
    """
    global _numbers_service, _token_cache, _social_client, _analytics_service
    _numbers_service = None
    _token_cache = None
    _social_client = None
    _analytics_service = None
