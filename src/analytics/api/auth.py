"""社交分析认证依赖。

请求进入业务逻辑前先取得上游令牌，取不到则直接 401。
"""

import logging

from fastapi import Depends, HTTPException, status
from returns.result import Failure

from src.analytics.services.token_cache import AuthTokenCache
from src.container import get_token_cache

logger = logging.getLogger(__name__)


async def require_upstream_token(
    token_cache: AuthTokenCache = Depends(get_token_cache),
) -> str:
    """获取缓存或新申请的上游令牌。失败时返回 401。"""
    result = await token_cache.get_token()
    if isinstance(result, Failure):
        logger.warning(f"认证失败: {result.failure().message}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication failed",
        )
    return result.unwrap()
