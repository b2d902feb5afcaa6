"""centralized configuration management using pydantic settings.

this module provides type-safe, validated configuration for the orchestrator.
configuration is loaded from environment variables and optional .env files.
validation happens here, at the caller boundary; the core components trust
the values they are given.
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """main settings class for the agent orchestrator.

    attributes:
        anthropic_api_key: api key for anthropic (claude)
        tavily_api_key: api key for tavily web search
        llm_model: model identifier sent with every request
        max_tokens: maximum output tokens per model call
        temperature: sampling temperature
        max_iterations: model calls allowed per processed message
        max_retries: attempts per model call (including the first)
        retry_base_delay_ms: first backoff delay
        retry_max_delay_ms: backoff ceiling
        rate_limit_per_minute: model calls admitted per 60s window
        request_timeout: optional timeout in seconds for one model call
        data_dir: directory the write_file tool is confined to
        log_level: logging level (DEBUG, INFO, WARNING, ERROR)
        log_dir: optional directory for log files
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # api keys
    anthropic_api_key: str | None = None
    tavily_api_key: str | None = None

    # llm configuration
    llm_model: str = Field(default="claude-sonnet-4-20250514", alias="LLM_MODEL")
    max_tokens: int = Field(default=4096, ge=1)
    temperature: float = Field(default=1.0, ge=0.0, le=1.0)

    # loop configuration
    max_iterations: int = Field(default=10, ge=1)
    max_retries: int = Field(default=3, ge=1, alias="MAX_RETRIES")
    retry_base_delay_ms: int = Field(default=1000, ge=0)
    retry_max_delay_ms: int = Field(default=10_000, ge=0)
    rate_limit_per_minute: int = Field(default=50, ge=1, alias="RATE_LIMIT_PER_MINUTE")
    request_timeout: float | None = Field(default=None, gt=0)

    # tools
    data_dir: str = "./data"

    # logging
    log_level: str = Field(default="WARNING", alias="AGENT_LOG_LEVEL")
    log_dir: str | None = None


@lru_cache
def get_settings() -> Settings:
    """get the singleton settings instance.

    call get_settings.cache_clear() to reload settings if needed.
    """
    return Settings()
