"""Prometheus 监控中间件。

记录 HTTP 请求的计数和延迟指标。
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.routing import Match
from starlette.types import ASGIApp

from src.monitoring import metrics

# 未匹配任何路由的请求统一使用的路径标签
UNMATCHED_PATH = "unmatched"


class PrometheusMiddleware(BaseHTTPMiddleware):
    """Prometheus 监控中间件。

    自动记录所有 HTTP 请求的计数和延迟。
    """

    def __init__(
        self,
        app: ASGIApp,
        excluded_paths: list[str] | None = None,
    ) -> None:
        """初始化中间件。

        Args:
            app: ASGI 应用
            excluded_paths: 排除监控的路径列表
        """
        super().__init__(app)
        self.excluded_paths = set(excluded_paths or ["/metrics"])

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        """处理请求并记录指标。

        Args:
            request: HTTP 请求
            call_next: 下一个中间件或路由处理器

        Returns:
            Response: HTTP 响应
        """
        if request.url.path in self.excluded_paths:
            return await call_next(request)

        start_time = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start_time

        path = self._route_template(request)

        metrics.http_requests_total.labels(
            method=request.method,
            path=path,
            status=str(response.status_code),
        ).inc()

        metrics.http_request_duration_seconds.labels(
            method=request.method,
            path=path,
        ).observe(duration)

        return response

    def _route_template(self, request: Request) -> str:
        """返回请求命中的路由模板，作为指标的 path 标签。

        如 /numbers/p -> /numbers/{number_id}。未命中任何路由的请求
        （如 404）统一记为 "unmatched"，使标签基数只取决于路由数量。

        Args:
            request: HTTP 请求

        Returns:
            str: 路由模板或 "unmatched"
        """
        route = request.scope.get("route")
        if route is not None and hasattr(route, "path"):
            return route.path

        for candidate in request.app.routes:
            match, _ = candidate.matches(request.scope)
            if match != Match.NONE and hasattr(candidate, "path"):
                return candidate.path
        return UNMATCHED_PATH
