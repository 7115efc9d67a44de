from __future__ import annotations

from fastapi import APIRouter


def build_api_router() -> APIRouter:
    from openclaw_bridge.modules.health.api import router as health_router
    from openclaw_bridge.modules.mcp.api import router as mcp_router

    api_router = APIRouter()
    api_router.include_router(health_router)
    api_router.include_router(mcp_router)
    return api_router


__all__ = ["build_api_router"]
