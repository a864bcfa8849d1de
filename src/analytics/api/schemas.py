"""社交分析 API 数据模型。"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from src.analytics.domain.models import PostStats, UserStats


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class TopUsersResponse(_CamelModel):
    """评论最多的用户列表响应。"""

    top_users: list[UserStats] = Field(..., description="按评论总数降序的用户")


class PopularPostsResponse(_CamelModel):
    """评论最多的帖子列表响应。"""

    popular_posts: list[PostStats] = Field(..., description="评论数并列最高的全部帖子")


class LatestPostsResponse(_CamelModel):
    """最新帖子列表响应。"""

    latest_posts: list[PostStats] = Field(..., description="ID 最大的若干帖子")


class HealthResponse(BaseModel):
    """存活探针响应。"""

    status: str = Field("UP", description="服务状态")
    message: str = Field("Service is running", description="说明")
