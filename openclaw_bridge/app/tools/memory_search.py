"""MEMORY.md에서 대소문자 구분 없이 줄을 찾는 도구예요."""

from __future__ import annotations

from typing import Any

from openclaw_bridge.app.memory_store import MemoryDocument
from openclaw_bridge.app.tools.base import BaseTool, ToolResult, require_text_argument


class MemorySearchTool(BaseTool):
    def __init__(self, *, memory: MemoryDocument, bot_name: str) -> None:
        self._memory = memory
        self._bot_name = bot_name

    @property
    def name(self) -> str:
        return "memory_search"

    @property
    def description(self) -> str:
        return (
            f"Search {self._bot_name}'s long-term memory ({self._memory.path.name}). "
            "Useful for finding past decisions, project context, etc."
        )

    @property
    def input_schema(self) -> dict[str, Any]:
        return {
            "type": "object",
            "properties": {
                "query": {
                    "type": "string",
                    "description": "Term or phrase to search for in memory",
                },
            },
            "required": ["query"],
        }

    async def execute(self, arguments: dict[str, Any]) -> ToolResult:
        query = require_text_argument(arguments, "query")
        if query is None:
            return ToolResult(ok=False, error="Missing 'query' argument")

        # 파일이 없어도 실패가 아니라 안내 문구를 돌려줘요.
        if not self._memory.exists():
            return ToolResult(ok=True, output=self._memory.not_found_message, metadata={"found": False})

        result = self._memory.search(query)
        return ToolResult(
            ok=True,
            output=result.render(),
            metadata={"found": True, "match_count": result.total},
        )
