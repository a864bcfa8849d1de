"""社交分析测试 Fixtures。

提供一个内存中的 Mock 社交数据上游。
"""

import re

import httpx
import pytest

from src.analytics.client import SocialClient
from src.analytics.services.entity_cache import EntityCache
from src.analytics.services.token_cache import AuthTokenCache

TOKEN = "test-token"


class FakeSocialUpstream:
    """Mock 社交数据上游。

    fail_paths 中的路径返回 500，auth_status 控制认证接口状态码。
    """

    def __init__(self) -> None:
        self.users = {"1": "John Doe", "2": "Jane Doe", "3": "Bob Stone"}
        self.posts = {
            "1": [{"id": 150, "userid": 1, "content": "Post about ants"}],
            "2": [
                {"id": 246, "userid": 2, "content": "Post about elephants"},
                {"id": 161, "userid": 2, "content": "Post about bees"},
            ],
            "3": [],
        }
        self.comments = {
            150: [{"id": i, "postid": 150, "content": "nice"} for i in range(3)],
            246: [{"id": 10, "postid": 246, "content": "ok"}],
            161: [{"id": 20 + i, "postid": 161, "content": "buzz"} for i in range(3)],
        }
        self.expires_in: float = 5000.0
        self.auth_status = 200
        self.fail_paths: set[str] = set()

    def __call__(self, request: httpx.Request) -> httpx.Response:
        path = request.url.path

        if path in self.fail_paths:
            return httpx.Response(500, json={"message": "upstream error"})

        if request.method == "POST" and path == "/auth":
            if self.auth_status != 200:
                return httpx.Response(self.auth_status)
            return httpx.Response(
                200, json={"access_token": TOKEN, "expires_in": self.expires_in}
            )

        if request.headers.get("Authorization") != f"Bearer {TOKEN}":
            return httpx.Response(401)

        if path == "/users":
            return httpx.Response(200, json={"users": self.users})

        match = re.fullmatch(r"/users/(\w+)/posts", path)
        if match:
            return httpx.Response(200, json={"posts": self.posts.get(match.group(1), [])})

        match = re.fullmatch(r"/posts/(\d+)/comments", path)
        if match:
            return httpx.Response(
                200, json={"comments": self.comments.get(int(match.group(1)), [])}
            )

        return httpx.Response(404)


@pytest.fixture
def social_upstream() -> FakeSocialUpstream:
    return FakeSocialUpstream()


@pytest.fixture
def social_stack(mock_upstream, social_upstream, fake_clock):
    """组装令牌缓存、客户端和数据集缓存，共用同一个 Mock 上游和假时钟。

    Returns:
        tuple: (token_cache, entity_cache, transport)
    """
    http_client, transport = mock_upstream(social_upstream)
    token_cache = AuthTokenCache(
        credentials={"email": "a@b.c"}, http_client=http_client, clock=fake_clock
    )
    social_client = SocialClient(token_cache=token_cache, http_client=http_client)
    entity_cache = EntityCache(social_client, ttl_seconds=60, clock=fake_clock)
    return token_cache, entity_cache, transport
