"""FastAPI app entry."""

from __future__ import annotations

from fastapi import FastAPI, Request

from mirage.adapters.anthropic.router import router as simulate_router
from mirage.adapters.anthropic.upstream import close_upstream_async_client
from mirage.config.credentials import GatewayConfig
from mirage.config.settings import Settings, settings as default_settings
from mirage.util.logger import logger


def create_app(config: GatewayConfig, app_settings: Settings | None = None) -> FastAPI:
    """Build the ASGI app around an already-resolved gateway config."""
    current = app_settings or default_settings
    app = FastAPI(title=current.app_name, docs_url=None, redoc_url=None, openapi_url=None)
    app.state.gateway_config = config

    if current.log_requests:

        @app.middleware("http")
        async def request_log_middleware(request: Request, call_next):
            logger.info("%s %s", request.method, request.url.path)
            return await call_next(request)

    # 必须先于通配路由注册，否则 /health 会被模拟
    if current.enable_health_endpoint:

        @app.get("/health")
        def health() -> dict:
            return {"status": "ok"}

    app.include_router(simulate_router)

    @app.on_event("shutdown")
    async def shutdown_cleanup() -> None:
        await close_upstream_async_client()

    return app
