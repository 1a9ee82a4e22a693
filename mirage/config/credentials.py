"""
API key 解析与网关运行配置。

顺序：环境变量 ANTHROPIC_API_KEY（非空即用）-> 工作目录 .env 中第一行以 ANTHROPIC_API_KEY= 开头的行。
.env 不支持引号、转义或 export 前缀，等号后的内容原样作为 key。
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from mirage.config.settings import Settings
from mirage.core.errors import CredentialMissingError
from mirage.core.extract import normalize_extract_mode
from mirage.util.logger import logger
from mirage.util.masking import mask_secret

DEFAULT_ENV_VAR = "ANTHROPIC_API_KEY"
DEFAULT_CREDENTIAL_FILE = ".env"


def read_credential_file(path: str | Path, prefix: str) -> str:
    try:
        content = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        logger.debug("credential file unreadable path=%s error=%s", path, exc)
        return ""
    for line in content.split("\n"):
        if line.startswith(prefix):
            return line[len(prefix):]
    return ""


def resolve_api_key(
    environ: Mapping[str, str] | None = None,
    credential_file: str | Path | None = None,
    env_var: str | None = None,
) -> str:
    """Return the API key or raise CredentialMissingError."""
    env = os.environ if environ is None else environ
    name = env_var or DEFAULT_ENV_VAR
    path = credential_file if credential_file is not None else DEFAULT_CREDENTIAL_FILE

    api_key = env.get(name, "")
    if api_key:
        logger.debug("credential resolved source=env var=%s", name)
        return api_key

    api_key = read_credential_file(path, f"{name}=")
    if api_key:
        logger.debug("credential resolved source=file path=%s", path)
        return api_key

    raise CredentialMissingError(f"{name} not found in environment or {path} file")


@dataclass(frozen=True, slots=True)
class GatewayConfig:
    api_key: str
    upstream_url: str
    anthropic_version: str
    model: str
    max_tokens: int
    timeout_seconds: float | None = None
    extract_mode: str = "raw"

    def __repr__(self) -> str:
        return (
            f"GatewayConfig(api_key={mask_secret(self.api_key)!r}, upstream_url={self.upstream_url!r}, "
            f"model={self.model!r}, max_tokens={self.max_tokens}, extract_mode={self.extract_mode!r})"
        )

    @classmethod
    def from_settings(cls, settings: Settings, api_key: str) -> "GatewayConfig":
        return cls(
            api_key=api_key,
            upstream_url=settings.upstream_url,
            anthropic_version=settings.anthropic_version,
            model=settings.model,
            max_tokens=settings.max_tokens,
            timeout_seconds=settings.upstream_timeout_seconds,
            extract_mode=normalize_extract_mode(settings.extract_mode),
        )


def load_gateway_config(settings: Settings, environ: Mapping[str, str] | None = None) -> GatewayConfig:
    api_key = resolve_api_key(
        environ=environ,
        credential_file=settings.credential_file,
        env_var=settings.credential_env_var,
    )
    config = GatewayConfig.from_settings(settings, api_key)
    logger.info("gateway config loaded %r", config)
    return config
