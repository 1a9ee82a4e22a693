"""Wildcard route: every request becomes a simulated page."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from fastapi.responses import PlainTextResponse, Response

from mirage.adapters.anthropic import upstream
from mirage.config.credentials import GatewayConfig
from mirage.core.errors import UpstreamError
from mirage.core.extract import extract_document
from mirage.core.prompt import build_completion_request
from mirage.observability.logging import log_event
from mirage.util.logger import logger


router = APIRouter()

def _gateway_config(request: Request) -> GatewayConfig:
    return request.app.state.gateway_config


def _error_response(exc: UpstreamError) -> PlainTextResponse:
    return PlainTextResponse(status_code=500, content=exc.public_message)


async def render_page(config: GatewayConfig, method: str, path: str, query: str) -> str:
    """Ask the completion API for a page and pull the HTML out of its reply."""
    completion = build_completion_request(
        method,
        path,
        query,
        model=config.model,
        max_tokens=config.max_tokens,
    )
    status_code, reply_text = await upstream.forward_completion(config, completion)
    if status_code >= 400:
        log_event("upstream_error_status", logging.WARNING, status_code=status_code, method=method, path=path)
    return extract_document(reply_text, config.extract_mode)


def _request_line(request: Request) -> tuple[str, str, str]:
    # 直接取 ASGI scope：已解码的 path 里可能含 ? 或 #，不能再按 URL 重新切分
    path = request.scope.get("path") or "/"
    query = (request.scope.get("query_string") or b"").decode("latin-1")
    return request.scope["method"], path, query


async def simulate(request: Request) -> Response:
    config = _gateway_config(request)
    method, path, query = _request_line(request)
    try:
        html = await render_page(config, method, path, query)
    except UpstreamError as exc:
        logger.error("simulate failed method=%s path=%s error_type=%s error=%s", method, path, type(exc).__name__, exc)
        return _error_response(exc)
    # Content-Type 固定为 text/html，不带 charset
    return Response(content=html, headers={"content-type": "text/html"})


# starlette Route 不限制 methods，TRACE、PROPFIND 等任意方法都会进来
router.add_route("/{full_path:path}", simulate, include_in_schema=False)
