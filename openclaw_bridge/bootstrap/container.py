from __future__ import annotations

from dataclasses import dataclass

from openclaw_bridge.app.agent_client import OpenClawAgent
from openclaw_bridge.app.dispatcher import McpDispatcher
from openclaw_bridge.app.session_store import McpSessionStore
from openclaw_bridge.app.settings import Settings
from openclaw_bridge.app.tools.defaults import build_default_tool_registry
from openclaw_bridge.app.tools.registry import ToolRegistry


@dataclass(slots=True)
class RuntimeComponents:
    agent: OpenClawAgent
    tool_registry: ToolRegistry
    session_store: McpSessionStore
    dispatcher: McpDispatcher


def build_runtime_components(settings: Settings, *, agent: OpenClawAgent | None = None) -> RuntimeComponents:
    if agent is None:
        agent = OpenClawAgent(
            command=settings.agent_command,
            session_label=settings.session_label,
            max_output_bytes=settings.agent_max_output_bytes,
            timeout_grace_seconds=settings.timeout_grace_seconds,
        )

    tool_registry = build_default_tool_registry(settings, agent=agent)
    session_store = McpSessionStore(
        ttl_seconds=settings.session_ttl_seconds,
        max_entries=settings.session_max_entries,
    )
    dispatcher = McpDispatcher(
        registry=tool_registry,
        session_store=session_store,
        server_name=settings.server_slug,
    )

    return RuntimeComponents(
        agent=agent,
        tool_registry=tool_registry,
        session_store=session_store,
        dispatcher=dispatcher,
    )
