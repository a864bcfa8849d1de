"""社交分析领域模型。

定义用户、帖子、评论以及缓存数据集的数据模型。
"""

from dataclasses import dataclass, field

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Post(BaseModel):
    """帖子模型。

    上游字段名为 userid，序列化时保持一致。
    """

    model_config = ConfigDict(populate_by_name=True)

    id: int = Field(..., description="帖子 ID，同时作为新旧顺序的依据")
    user_id: int | str = Field(..., alias="userid", description="发帖用户 ID")
    content: str = Field("", description="帖子内容")


class Comment(BaseModel):
    """评论模型。聚合只关心数量。"""

    model_config = ConfigDict(populate_by_name=True)

    id: int | str | None = Field(None, description="评论 ID")
    post_id: int | str | None = Field(None, alias="postid", description="所属帖子 ID")
    content: str = Field("", description="评论内容")


class UserStats(BaseModel):
    """用户评论统计。"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    user_id: str = Field(..., description="用户 ID")
    name: str | None = Field(None, description="用户名称")
    comment_count: int = Field(0, ge=0, description="该用户所有帖子的评论总数")
    post_count: int = Field(0, ge=0, description="该用户的帖子数")


class PostStats(BaseModel):
    """附带派生字段的帖子。"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: int = Field(..., description="帖子 ID")
    user_id: int | str = Field(..., alias="userid", description="发帖用户 ID")
    content: str = Field("", description="帖子内容")
    user_name: str | None = Field(None, description="发帖用户名称")
    comment_count: int = Field(0, ge=0, description="评论数")


@dataclass
class CachedDataset:
    """一次完整刷新得到的联合数据集。

    users 的键顺序即上游返回顺序，聚合时以此作为枚举顺序。
    """

    users: dict[str, str] = field(default_factory=dict)
    posts: dict[str, list[Post]] = field(default_factory=dict)
    comments: dict[int, list[Comment]] = field(default_factory=dict)
    last_fetch: float = 0.0

    def iter_posts(self):
        """按用户枚举顺序遍历所有帖子。"""
        for user_posts in self.posts.values():
            yield from user_posts

    def comment_count(self, post_id: int) -> int:
        return len(self.comments.get(post_id, []))

    def user_name(self, user_id: int | str) -> str | None:
        return self.users.get(str(user_id))
