"""社交分析 API 路由。

提供评论最多用户、热门帖子、最新帖子查询以及存活探针。
"""

import logging
from typing import Union

from fastapi import APIRouter, Depends, HTTPException, Query, status
from returns.result import Failure, Result

from src.analytics.api.auth import require_upstream_token
from src.analytics.api.schemas import (
    HealthResponse,
    LatestPostsResponse,
    PopularPostsResponse,
    TopUsersResponse,
)
from src.analytics.services.aggregation_service import AnalyticsService
from src.container import get_analytics_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["analytics"])


def _unwrap_or_500(result: Result, operation: str):
    """取出成功结果，失败时转换为 500。"""
    if isinstance(result, Failure):
        error = result.failure()
        logger.error(f"{operation} 失败: {error.message}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Server error: {error.message}",
        )
    return result.unwrap()


@router.get("/health", response_model=HealthResponse, summary="存活探针")
async def health() -> HealthResponse:
    """存活探针，不需要认证。"""
    return HealthResponse()


@router.get(
    "/users/top",
    response_model=TopUsersResponse,
    summary="评论最多的用户",
    description="返回所有帖子评论总数最多的前 5 个用户。",
    dependencies=[Depends(require_upstream_token)],
)
async def get_top_users(
    service: AnalyticsService = Depends(get_analytics_service),
) -> TopUsersResponse:
    """获取评论最多的用户。"""
    users = _unwrap_or_500(await service.top_users(), "查询评论最多的用户")
    return TopUsersResponse(top_users=users)


@router.get(
    "/posts",
    response_model=Union[PopularPostsResponse, LatestPostsResponse],
    summary="热门或最新帖子",
    description="type=popular 返回评论数最高的全部帖子，type=latest 返回最新 5 个帖子。",
    dependencies=[Depends(require_upstream_token)],
)
async def get_posts(
    type: str = Query("popular", description="popular 或 latest，不区分大小写"),
    service: AnalyticsService = Depends(get_analytics_service),
) -> PopularPostsResponse | LatestPostsResponse:
    """按类型查询帖子。"""
    post_type = type.lower()

    if post_type == "popular":
        posts = _unwrap_or_500(await service.popular_posts(), "查询热门帖子")
        return PopularPostsResponse(popular_posts=posts)

    if post_type == "latest":
        posts = _unwrap_or_500(await service.latest_posts(), "查询最新帖子")
        return LatestPostsResponse(latest_posts=posts)

    raise HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail='Invalid type parameter. Use "popular" or "latest".',
    )
