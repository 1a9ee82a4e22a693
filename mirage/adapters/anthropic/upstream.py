"""
补全接口的请求构造与 HTTP 转发。从 router 拆出，便于维护与单测。
"""

from __future__ import annotations

import asyncio
import json
from typing import Any

import httpx

from mirage.config.credentials import GatewayConfig
from mirage.core.errors import RequestBuildError, UpstreamReadError, UpstreamUnreachableError
from mirage.core.models import CompletionRequest
from mirage.util.logger import logger

_upstream_async_client: httpx.AsyncClient | None = None
_upstream_client_lock: Any = None


def _upstream_http_timeout(timeout_seconds: float | None) -> httpx.Timeout:
    if timeout_seconds is None:
        return httpx.Timeout(None)
    timeout = float(timeout_seconds)
    return httpx.Timeout(connect=timeout, read=timeout, write=timeout, pool=timeout)


async def _get_upstream_async_client() -> httpx.AsyncClient:
    global _upstream_async_client, _upstream_client_lock
    if _upstream_async_client is not None:
        return _upstream_async_client
    if _upstream_client_lock is None:
        _upstream_client_lock = asyncio.Lock()
    async with _upstream_client_lock:
        if _upstream_async_client is None:
            # 超时按请求单独设置，客户端本身不限
            _upstream_async_client = httpx.AsyncClient(timeout=httpx.Timeout(None))
    return _upstream_async_client


async def close_upstream_async_client() -> None:
    global _upstream_async_client
    if _upstream_async_client is not None:
        await _upstream_async_client.aclose()
        _upstream_async_client = None


def build_upstream_headers(config: GatewayConfig) -> dict[str, str]:
    return {
        "x-api-key": config.api_key,
        "anthropic-version": config.anthropic_version,
        "content-type": "application/json",
    }


def serialize_completion(request: CompletionRequest) -> bytes:
    try:
        return json.dumps(request.model_dump(), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as exc:
        logger.warning("serialize completion failed error=%s", exc)
        raise RequestBuildError(str(exc)) from exc


def _decode_text(body: bytes) -> str:
    return body.decode("utf-8", errors="replace")


async def forward_completion(config: GatewayConfig, request: CompletionRequest) -> tuple[int, str]:
    """POST one completion request and return (status_code, body_text).

    Upstream 4xx/5xx are returned as-is; only failures to build, send or read
    the exchange raise.
    """
    body = serialize_completion(request)
    client = await _get_upstream_async_client()
    url = config.upstream_url
    try:
        outbound = client.build_request(
            "POST",
            url,
            content=body,
            headers=build_upstream_headers(config),
            timeout=_upstream_http_timeout(config.timeout_seconds),
        )
    except (httpx.InvalidURL, ValueError, TypeError) as exc:
        logger.warning("build upstream request failed url=%s error=%s", url, exc)
        raise RequestBuildError(str(exc)) from exc

    logger.debug("forward_completion start url=%s payload_bytes=%d", url, len(body))
    try:
        response = await client.send(outbound, stream=True)
    except httpx.HTTPError as exc:
        detail = (str(exc) or "").strip() or type(exc).__name__
        logger.warning("forward_completion http_error url=%s error=%s", url, detail)
        raise UpstreamUnreachableError(detail) from exc

    try:
        content = await response.aread()
    except httpx.HTTPError as exc:
        logger.warning("forward_completion read_error url=%s error=%s", url, exc)
        raise UpstreamReadError(str(exc)) from exc
    finally:
        await response.aclose()

    logger.debug("forward_completion done url=%s status=%s reply_bytes=%d", url, response.status_code, len(content))
    return response.status_code, _decode_text(content)
