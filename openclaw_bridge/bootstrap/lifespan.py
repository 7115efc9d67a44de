from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI

from openclaw_bridge.app.settings import Settings
from libs.common.logging import get_logger

logger = get_logger("openclaw_bridge.lifespan")


def create_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        logger.info(
            "server_ready",
            bot_name=settings.bot_name,
            endpoint="/mcp",
            bind_address=settings.bind_address,
            port=settings.port,
            session_label=settings.session_label,
            workspace=settings.workspace,
            tools=app.state.tool_registry.list_names(),
        )
        try:
            yield
        finally:
            logger.info("server_stopped", open_sessions=len(app.state.session_store))

    return lifespan
