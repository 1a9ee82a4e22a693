"""Runtime settings."""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="MIRAGE_", extra="ignore")

    app_name: str = "Mirage"
    log_level: str = "info"
    log_to_file: bool = True
    log_dir: str = "logs"
    # 每个请求打印一行 METHOD PATH
    log_requests: bool = True
    host: str = "0.0.0.0"
    port: int = 3431
    # 默认关闭：开启后 /health 不再落到通配路由
    enable_health_endpoint: bool = False

    upstream_url: str = "https://api.anthropic.com/v1/messages"
    anthropic_version: str = "2023-06-01"
    model: str = "claude-3-7-sonnet-20250219"
    max_tokens: int = Field(default=4096, ge=1)
    # None 表示不设超时，上游无响应时请求一直挂起
    upstream_timeout_seconds: float | None = None

    credential_env_var: str = "ANTHROPIC_API_KEY"
    credential_file: str = ".env"
    # raw: 直接在原始 JSON 文本里找 HTML；envelope: 先解析 content[].text 再找
    extract_mode: str = "raw"


settings = Settings()
