from __future__ import annotations

import stat
from pathlib import Path

import pytest
from openclaw_bridge.app.agent_client import OpenClawAgent
from openclaw_bridge.app.settings import Settings

from libs.common.errors import AgentCommandError

TEST_API_KEY = "test-api-key"


@pytest.fixture
def app_settings(tmp_path: Path) -> Settings:
    """각 테스트용 워크스페이스를 가리키는 설정이에요."""
    return Settings(
        api_key=TEST_API_KEY,
        bot_name="Test Bot",
        session_label="main",
        workspace=str(tmp_path),
    )


class FakeAgent(OpenClawAgent):
    """하위 프로세스 대신 호출 인자를 기록하는 에이전트예요."""

    def __init__(self, *, reply: str = "pong", error: str | None = None) -> None:
        super().__init__(command="openclaw-fake")
        self.reply = reply
        self.error = error
        self.sent: list[tuple[str, int]] = []
        self.list_limits: list[int] = []

    async def send_message(self, message: str, *, timeout_seconds: int = 120) -> str:
        self.sent.append((message, timeout_seconds))
        if self.error is not None:
            raise AgentCommandError(self.error)
        return self.reply

    async def list_sessions(self, *, limit: int = 10) -> str:
        self.list_limits.append(limit)
        if self.error is not None:
            raise AgentCommandError(self.error)
        return self.reply


@pytest.fixture
def fake_agent() -> FakeAgent:
    return FakeAgent()


def write_script(directory: Path, name: str, body: str) -> Path:
    """테스트용 실행 파일을 만들어요."""
    script = directory / name
    script.write_text(f"#!/bin/sh\n{body}\n", encoding="utf-8")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return script
