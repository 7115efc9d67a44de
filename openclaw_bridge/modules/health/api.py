from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Request

from openclaw_bridge.app.mcp_protocol import SERVER_VERSION
from openclaw_bridge.modules.common.deps import get_settings, get_tool_registry

router = APIRouter()


@router.get("/")
async def server_info(request: Request) -> dict[str, Any]:
    app_settings = get_settings(request)
    return {
        "name": f"{app_settings.bot_name} MCP Server",
        "version": SERVER_VERSION,
        "transport": "streamable-http",
        "endpoint": "/mcp",
        "authentication": "Bearer token required",
        "tools": get_tool_registry(request).list_names(),
    }


@router.get("/health")
async def health(request: Request) -> dict[str, str]:
    return {
        "status": "ok",
        "botName": get_settings(request).bot_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
