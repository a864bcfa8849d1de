"""Prometheus 指标定义。

定义所有应用级别的 Prometheus 监控指标。
"""

from prometheus_client import Counter, Histogram

from src.config import get_settings

# HTTP 请求计数器
# 标签: method (HTTP 方法), path (请求路径), status (HTTP 状态码)
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "path", "status"],
)

# HTTP 请求延迟直方图
# 标签: method (HTTP 方法), path (请求路径)
# 分桶: 0.005s, 0.01s, 0.025s, 0.05s, 0.075s, 0.1s, 0.25s, 0.5s, 0.75s, 1.0s, 2.5s, 5.0s, 7.5s, 10.0s
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0),
)

# 上游请求计数器
# 标签: service (numbers, social, auth), outcome (success, timeout, failed)
upstream_requests_total = Counter(
    "upstream_requests_total",
    "Total upstream API requests",
    ["service", "outcome"],
)

# 上游请求延迟直方图
# 标签: service, endpoint (类别或资源名)
upstream_request_duration_seconds = Histogram(
    "upstream_request_duration_seconds",
    "Upstream API request duration in seconds",
    ["service", "endpoint"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0),
)

# 数据集缓存重建次数
# 标签: outcome (success, failed)
entity_cache_refreshes_total = Counter(
    "entity_cache_refreshes_total",
    "Total analytics dataset refreshes",
    ["outcome"],
)

# 认证令牌刷新次数
# 标签: outcome (success, failed)
auth_token_refreshes_total = Counter(
    "auth_token_refreshes_total",
    "Total upstream auth token refreshes",
    ["outcome"],
)


def record_upstream_request(
    service: str,
    outcome: str,
    endpoint: str | None = None,
    duration: float | None = None,
) -> None:
    """记录一次上游调用。

    监控关闭时不做任何事。

    Args:
        service: 上游服务名
        outcome: 调用结果
        endpoint: 端点标签，与 duration 同时提供时记录延迟
        duration: 调用耗时（秒）
    """
    if not get_settings().prometheus_enabled:
        return

    upstream_requests_total.labels(service=service, outcome=outcome).inc()
    if endpoint is not None and duration is not None:
        upstream_request_duration_seconds.labels(
            service=service, endpoint=endpoint
        ).observe(duration)


def record_refresh(counter: Counter, outcome: str) -> None:
    """记录一次缓存或令牌刷新结果。"""
    if not get_settings().prometheus_enabled:
        return
    counter.labels(outcome=outcome).inc()
