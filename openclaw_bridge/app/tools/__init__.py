from openclaw_bridge.app.tools.base import BaseTool, ToolResult
from openclaw_bridge.app.tools.registry import ToolRegistry

__all__ = [
    "BaseTool",
    "ToolRegistry",
    "ToolResult",
]
