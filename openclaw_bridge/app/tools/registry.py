"""도구를 등록하고 조회하는 레지스트리예요."""

from __future__ import annotations

from typing import Any

from openclaw_bridge.app.mcp_protocol import McpTool
from openclaw_bridge.app.tools.base import BaseTool, ToolResult
from libs.common.logging import get_logger

logger = get_logger("openclaw_bridge.tools")


class ToolRegistry:
    """도구를 이름으로 관리하는 중앙 레지스트리예요.

    등록 순서가 곧 `tools/list` 응답 순서예요.

    사용법::

        registry = ToolRegistry()
        registry.register(MemorySearchTool(memory=MemoryDocument(path)))

        descriptors = registry.list_mcp_tools()
        result = await registry.call("memory_search", {"query": "deploy"})
    """

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """도구를 레지스트리에 등록해요. 같은 이름이면 덮어씌워요."""
        self._tools[tool.name] = tool

    def get(self, name: str) -> BaseTool | None:
        return self._tools.get(name)

    def list_names(self) -> list[str]:
        return list(self._tools.keys())

    def list_mcp_tools(self) -> list[McpTool]:
        return [tool.to_mcp_tool() for tool in self._tools.values()]

    async def call(self, name: str, arguments: dict[str, Any]) -> ToolResult:
        """이름으로 도구를 찾아 실행해요.

        알 수 없는 도구이거나 실행 중 예외가 나면 실패 `ToolResult`를 반환해요.
        예외를 호출자에게 올려보내지 않아요.
        """
        tool = self._tools.get(name)
        if tool is None:
            logger.warning("tool_unknown", tool=name)
            return ToolResult(ok=False, error=f"Unknown tool: {name}")
        try:
            result = await tool.execute(arguments)
        except Exception as exc:
            logger.warning("tool_failed", tool=name, error=str(exc), error_type=type(exc).__name__)
            return ToolResult(ok=False, error=str(exc))
        if not result.ok:
            logger.warning("tool_failed", tool=name, error=result.error)
        return result

    def __len__(self) -> int:
        return len(self._tools)

    def __contains__(self, name: str) -> bool:
        return name in self._tools
