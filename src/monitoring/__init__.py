"""Prometheus 监控模块。

提供 HTTP 请求、上游调用和缓存刷新的监控指标。
"""

from src.monitoring.metrics import (
    auth_token_refreshes_total,
    entity_cache_refreshes_total,
    http_request_duration_seconds,
    http_requests_total,
    upstream_request_duration_seconds,
    upstream_requests_total,
)

__all__ = [
    "http_requests_total",
    "http_request_duration_seconds",
    "upstream_requests_total",
    "upstream_request_duration_seconds",
    "entity_cache_refreshes_total",
    "auth_token_refreshes_total",
]
