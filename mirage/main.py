"""Process entry point: resolve the credential, then serve."""

from __future__ import annotations

import logging

import uvicorn

from mirage.config.credentials import load_gateway_config
from mirage.config.settings import settings
from mirage.core.errors import CredentialMissingError
from mirage.core.gateway import create_app
from mirage.util.logger import logger, resolve_level


def uvicorn_log_level(raw: str) -> str:
    # uvicorn 只认 critical/error/warning/info/debug/trace，WARN 之类的别名先归一
    return logging.getLevelName(resolve_level(raw)).lower()


def main() -> None:
    try:
        config = load_gateway_config(settings)
    except CredentialMissingError as exc:
        logger.critical("%s", exc)
        raise SystemExit(1) from exc
    except ValueError as exc:
        logger.critical("invalid configuration: %s", exc)
        raise SystemExit(1) from exc

    logger.info("Starting LLM HTTP Server on port %d...", settings.port)
    uvicorn.run(
        create_app(config),
        host=settings.host,
        port=settings.port,
        log_level=uvicorn_log_level(settings.log_level),
    )


if __name__ == "__main__":
    main()
