from __future__ import annotations

import re
from pathlib import Path

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from libs.common.errors import ConfigurationError


def _default_workspace() -> str:
    return str(Path.home() / ".openclaw" / "workspace")


class Settings(BaseSettings):
    # 배포 스크립트가 쓰는 변수 이름을 그대로 받아요. 접두사는 쓰지 않아요.
    model_config = SettingsConfigDict(
        extra="ignore",
        env_file=".env",
        env_file_encoding="utf-8",
        populate_by_name=True,
    )

    bot_name: str = Field(default="Assistant", validation_alias=AliasChoices("BOT_NAME", "bot_name"))
    session_label: str = Field(
        default="main",
        validation_alias=AliasChoices("OPENCLAW_SESSION_LABEL", "session_label"),
    )
    api_key: str = Field(default="", validation_alias=AliasChoices("MCP_SERVER_API_KEY", "api_key"))
    port: int = Field(default=3721, validation_alias=AliasChoices("PORT", "port"))
    bind_address: str = Field(default="0.0.0.0", validation_alias=AliasChoices("BIND_ADDRESS", "bind_address"))
    workspace: str = Field(
        default_factory=_default_workspace,
        validation_alias=AliasChoices("OPENCLAW_WORKSPACE", "workspace"),
    )
    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL", "log_level"))

    agent_command: str = Field(default="openclaw", validation_alias=AliasChoices("OPENCLAW_COMMAND", "agent_command"))
    ask_timeout_seconds: int = Field(
        default=120,
        ge=1,
        validation_alias=AliasChoices("OPENCLAW_ASK_TIMEOUT_SECONDS", "ask_timeout_seconds"),
    )
    timeout_grace_seconds: float = Field(
        default=15.0,
        ge=0,
        validation_alias=AliasChoices("OPENCLAW_TIMEOUT_GRACE_SECONDS", "timeout_grace_seconds"),
    )
    sessions_list_limit: int = Field(
        default=10,
        ge=1,
        validation_alias=AliasChoices("OPENCLAW_SESSIONS_LIMIT", "sessions_list_limit"),
    )
    agent_max_output_bytes: int = Field(
        default=1_000_000,
        ge=1,
        validation_alias=AliasChoices("OPENCLAW_MAX_OUTPUT_BYTES", "agent_max_output_bytes"),
    )

    memory_file_name: str = "MEMORY.md"
    memory_search_max_results: int = Field(
        default=10,
        ge=1,
        validation_alias=AliasChoices("MEMORY_SEARCH_MAX_RESULTS", "memory_search_max_results"),
    )

    sse_keepalive_seconds: float = Field(
        default=30.0,
        gt=0,
        validation_alias=AliasChoices("SSE_KEEPALIVE_SECONDS", "sse_keepalive_seconds"),
    )
    session_ttl_seconds: float = Field(
        default=3600.0,
        gt=0,
        validation_alias=AliasChoices("MCP_SESSION_TTL_SECONDS", "session_ttl_seconds"),
    )
    session_max_entries: int = Field(
        default=1024,
        ge=1,
        validation_alias=AliasChoices("MCP_SESSION_MAX_ENTRIES", "session_max_entries"),
    )

    @field_validator("workspace", mode="after")
    @classmethod
    def _expand_workspace(cls, value: str) -> str:
        """`~`로 시작하는 경로를 홈 디렉터리 기준으로 펼쳐요."""
        return str(Path(value).expanduser())

    @property
    def server_slug(self) -> str:
        slug = re.sub(r"\s+", "-", self.bot_name.lower())
        return f"{slug}-mcp-server"

    @property
    def memory_path(self) -> Path:
        return Path(self.workspace) / self.memory_file_name

    def require_api_key(self) -> str:
        """공유 비밀키가 없으면 서버를 띄우지 않아요."""
        if not self.api_key:
            raise ConfigurationError(
                "MCP_SERVER_API_KEY environment variable is required. "
                "Generate one with `openclaw-bridge-keygen` and set it in .env or the environment."
            )
        return self.api_key


settings = Settings()
