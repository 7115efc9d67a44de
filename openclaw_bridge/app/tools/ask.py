"""openclaw 세션에 메시지를 보내는 도구예요."""

from __future__ import annotations

from typing import Any

from openclaw_bridge.app.agent_client import OpenClawAgent
from openclaw_bridge.app.tools.base import BaseTool, ToolResult, require_text_argument
from libs.common.errors import AgentCommandError
from libs.common.logging import get_logger

logger = get_logger("openclaw_bridge.tools.ask")


class AskTool(BaseTool):
    def __init__(self, *, agent: OpenClawAgent, bot_name: str, timeout_seconds: int = 120) -> None:
        self._agent = agent
        self._bot_name = bot_name
        self._timeout_seconds = timeout_seconds

    @property
    def name(self) -> str:
        return "ask"

    @property
    def description(self) -> str:
        return (
            f"Send a question or message to {self._bot_name}. "
            "Use it to look up information or context, or to delegate specific tasks."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "message": {
                    "type": "string",
                    "description": f"The message or question to send to {self._bot_name}",
                },
            },
            "required": ["message"],
        }

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        message = require_text_argument(arguments, "message")
        if message is None:
            return ToolResult(ok=False, error="Missing 'message' argument")

        logger.info("ask_sending", message_chars=len(message), timeout_seconds=self._timeout_seconds)
        try:
            reply = await self._agent.send_message(message, timeout_seconds=self._timeout_seconds)
        except AgentCommandError as exc:
            return ToolResult(ok=False, error=exc.message, metadata={"retryable": exc.retryable})

        logger.info("ask_reply_received", reply_chars=len(reply))
        return ToolResult(ok=True, output=reply)
