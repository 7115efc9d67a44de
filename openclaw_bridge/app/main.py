from __future__ import annotations

from fastapi import FastAPI

from openclaw_bridge.app.agent_client import OpenClawAgent
from openclaw_bridge.app.settings import Settings, settings
from openclaw_bridge.bootstrap import build_runtime_components, create_lifespan
from openclaw_bridge.modules import build_api_router
from libs.common.http_handlers import register_exception_handlers
from libs.common.logging import configure_logging


def create_app(app_settings: Settings | None = None, *, agent: OpenClawAgent | None = None) -> FastAPI:
    """설정으로 런타임 구성요소를 만들고 FastAPI 앱에 연결해요.

    공유 비밀키가 비어 있으면 `ConfigurationError`를 던져요.
    """
    resolved = app_settings or settings
    resolved.require_api_key()
    configure_logging(resolved.log_level)

    runtime = build_runtime_components(resolved, agent=agent)

    app = FastAPI(title=f"{resolved.bot_name} MCP Server", lifespan=create_lifespan(resolved))
    app.state.settings = resolved
    app.state.tool_registry = runtime.tool_registry
    app.state.session_store = runtime.session_store
    app.state.dispatcher = runtime.dispatcher
    app.include_router(build_api_router())
    register_exception_handlers(app, "openclaw_bridge.errors")
    return app
