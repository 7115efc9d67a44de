"""기본 도구 3종을 등록한 ToolRegistry를 생성하는 팩토리예요."""

from __future__ import annotations

from openclaw_bridge.app.agent_client import OpenClawAgent
from openclaw_bridge.app.memory_store import MemoryDocument
from openclaw_bridge.app.settings import Settings
from openclaw_bridge.app.tools.ask import AskTool
from openclaw_bridge.app.tools.memory_search import MemorySearchTool
from openclaw_bridge.app.tools.registry import ToolRegistry
from openclaw_bridge.app.tools.sessions_status import SessionsStatusTool


def build_default_tool_registry(settings: Settings, *, agent: OpenClawAgent) -> ToolRegistry:
    """`ask`, `memory_search`, `sessions_status`가 등록된 `ToolRegistry`를 생성해요.

    Args:
        settings: 표시 이름, 세션 라벨, 워크스페이스 경로를 담은 설정이에요.
        agent: `ask`와 `sessions_status`가 공유하는 openclaw 어댑터예요.

    Returns:
        `tools/list` 순서대로 3개 도구가 등록된 `ToolRegistry` 인스턴스예요.
    """
    memory = MemoryDocument(settings.memory_path, max_results=settings.memory_search_max_results)

    registry = ToolRegistry()
    registry.register(AskTool(agent=agent, bot_name=settings.bot_name, timeout_seconds=settings.ask_timeout_seconds))
    registry.register(MemorySearchTool(memory=memory, bot_name=settings.bot_name))
    registry.register(SessionsStatusTool(agent=agent, limit=settings.sessions_list_limit))
    return registry
