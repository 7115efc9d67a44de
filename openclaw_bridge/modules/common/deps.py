from __future__ import annotations

from fastapi import Header, Request

from openclaw_bridge.app.dispatcher import McpDispatcher
from openclaw_bridge.app.settings import Settings, settings
from openclaw_bridge.app.tools.registry import ToolRegistry
from libs.common.errors import AuthenticationError, ForbiddenError

_BEARER_PREFIX = "Bearer "


def get_settings(request: Request) -> Settings:
    configured = getattr(request.app.state, "settings", None)
    if isinstance(configured, Settings):
        return configured
    return settings


def require_auth(request: Request, authorization: str = Header(default="")) -> None:
    """``Authorization: Bearer <token>`` 헤더를 검사해요.

    헤더가 없거나 형식이 다르면 401, 토큰이 다르면 403이에요.
    """
    if not authorization.startswith(_BEARER_PREFIX):
        raise AuthenticationError()
    token = authorization[len(_BEARER_PREFIX) :]
    if token != get_settings(request).api_key:
        raise ForbiddenError()


def get_dispatcher(request: Request) -> McpDispatcher:
    return request.app.state.dispatcher  # type: ignore[no-any-return]


def get_tool_registry(request: Request) -> ToolRegistry:
    return request.app.state.tool_registry  # type: ignore[no-any-return]
