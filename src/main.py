"""FastAPI 应用入口。"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.analytics.api.routes import router as analytics_router
from src.config import get_settings
from src.container import (
    close_services,
    get_analytics_service,
    get_numbers_service,
    get_token_cache,
)
from src.monitoring import routes as monitoring_routes
from src.monitoring.middleware import PrometheusMiddleware
from src.numbers.api.routes import router as numbers_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: ARG001 - app 参数是 FastAPI 要求的
    """应用生命周期管理。

    关闭时释放各服务持有的 HTTP 客户端。
    """
    settings = get_settings()
    logger.info(
        f"服务启动: 窗口大小={settings.window_size}, "
        f"数字服务={settings.number_server_url}, 社交服务={settings.social_api_base_url}"
    )

    yield

    await close_services()
    logger.info("上游 HTTP 客户端已关闭")


# 创建 FastAPI 应用
app = FastAPI(
    title="Window Analytics",
    description="数字滑动窗口平均值与社交数据分析微服务",
    version="0.1.0",
    lifespan=lifespan,
)

# 配置 CORS 中间件
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # 生产环境应限制具体域名
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 配置 Prometheus 监控中间件（在 CORS 之后）
if get_settings().prometheus_enabled:
    app.add_middleware(PrometheusMiddleware)


@app.get("/")
async def index():
    """服务索引，列出可用端点。"""
    settings = get_settings()
    return {
        "status": "OK",
        "message": "Window Analytics microservice is running",
        "window_size": settings.window_size,
        "endpoints": {
            "numbers": "/numbers/{p|f|e|r}",
            "top_users": "/api/users/top",
            "posts": "/api/posts?type=popular|latest",
            "health": "/api/health",
        },
    }


@app.get("/health")
async def health_check():
    """健康检查端点。

    只检查进程内组件，不访问上游。始终返回 HTTP 200 以兼容 Docker HEALTHCHECK。
    """
    store = get_numbers_service().store
    cache = get_analytics_service().cache

    components = {
        "window": {
            "status": "healthy",
            "size": len(store.state().current_state),
            "capacity": store.window_size,
        },
        "dataset_cache": {
            "status": "healthy",
            "fresh": cache.is_valid(),
        },
        "auth_token": {
            "status": "healthy",
            "cached": get_token_cache().is_valid(),
        },
    }

    return {"status": "healthy", "components": components}


app.include_router(numbers_router)
app.include_router(analytics_router)
app.include_router(monitoring_routes.router)


def main():
    """主函数 - 用于开发服务器启动。"""
    import uvicorn

    settings = get_settings()

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )

    uvicorn.run(
        "src.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=True,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
