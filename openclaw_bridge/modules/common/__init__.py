from __future__ import annotations

from openclaw_bridge.modules.common.deps import (
    get_dispatcher,
    get_settings,
    get_tool_registry,
    require_auth,
)

__all__ = [
    "get_dispatcher",
    "get_settings",
    "get_tool_registry",
    "require_auth",
]
