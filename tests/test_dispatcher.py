from __future__ import annotations

from typing import Any

import pytest
from pydantic import ValidationError
from openclaw_bridge.app.dispatcher import McpDispatcher
from openclaw_bridge.app.mcp_protocol import JsonRpcEnvelope
from openclaw_bridge.app.session_store import McpSessionStore
from openclaw_bridge.app.settings import Settings
from openclaw_bridge.app.tools.defaults import build_default_tool_registry

from libs.common.errors import InvalidRequestError
from tests.conftest import FakeAgent


def _dispatcher(app_settings: Settings, agent: FakeAgent) -> tuple[McpDispatcher, McpSessionStore]:
    store = McpSessionStore()
    dispatcher = McpDispatcher(
        registry=build_default_tool_registry(app_settings, agent=agent),
        session_store=store,
        server_name=app_settings.server_slug,
    )
    return dispatcher, store


def _envelope(payload: dict[str, Any]) -> JsonRpcEnvelope:
    return JsonRpcEnvelope.model_validate(payload)


@pytest.mark.asyncio
async def test_initialize_allocates_session(app_settings: Settings, fake_agent: FakeAgent) -> None:
    dispatcher, store = _dispatcher(app_settings, fake_agent)
    result = await dispatcher.dispatch(
        _envelope(
            {
                "jsonrpc": "2.0",
                "id": 1,
                "method": "initialize",
                "params": {"protocolVersion": "2025-03-26", "clientInfo": {"name": "inspector"}},
            }
        )
    )
    assert result.body is not None
    body = result.body["result"]
    assert result.body["id"] == 1
    assert body["protocolVersion"] == "2024-11-05"
    assert body["capabilities"] == {"tools": {}}
    assert body["serverInfo"] == {"name": "test-bot-mcp-server", "version": "1.0.0"}
    assert result.session_id == body["sessionId"]
    assert body["sessionId"] in store


@pytest.mark.asyncio
@pytest.mark.parametrize("method", ["initialized", "notifications/initialized", "notifications/cancelled"])
async def test_notifications_produce_no_body(app_settings: Settings, fake_agent: FakeAgent, method: str) -> None:
    dispatcher, _ = _dispatcher(app_settings, fake_agent)
    result = await dispatcher.dispatch(_envelope({"jsonrpc": "2.0", "method": method}))
    assert result.is_acknowledgement is True


@pytest.mark.asyncio
async def test_unknown_notification_is_silently_acknowledged(app_settings: Settings, fake_agent: FakeAgent) -> None:
    dispatcher, _ = _dispatcher(app_settings, fake_agent)
    result = await dispatcher.dispatch(_envelope({"jsonrpc": "2.0", "method": "no/such"}))
    assert result.body is None


@pytest.mark.asyncio
async def test_notification_method_with_id_is_answered_as_unknown(
    app_settings: Settings, fake_agent: FakeAgent
) -> None:
    dispatcher, _ = _dispatcher(app_settings, fake_agent)
    result = await dispatcher.dispatch(_envelope({"jsonrpc": "2.0", "id": 5, "method": "notifications/foo"}))
    assert result.body == {
        "jsonrpc": "2.0",
        "id": 5,
        "error": {"code": -32601, "message": "Method not found: notifications/foo"},
    }


@pytest.mark.asyncio
@pytest.mark.parametrize("request_id", [1.0, 2.5, "7", 0, None])
async def test_request_id_is_echoed_unchanged(
    app_settings: Settings, fake_agent: FakeAgent, request_id: Any
) -> None:
    dispatcher, _ = _dispatcher(app_settings, fake_agent)
    result = await dispatcher.dispatch(_envelope({"jsonrpc": "2.0", "id": request_id, "method": "ping"}))
    assert result.body is not None
    assert result.body["id"] == request_id
    assert type(result.body["id"]) is type(request_id)


def test_boolean_request_id_is_rejected() -> None:
    with pytest.raises(ValidationError):
        _envelope({"jsonrpc": "2.0", "id": True, "method": "ping"})


@pytest.mark.asyncio
async def test_unknown_method_returns_method_not_found(app_settings: Settings, fake_agent: FakeAgent) -> None:
    dispatcher, _ = _dispatcher(app_settings, fake_agent)
    result = await dispatcher.dispatch(_envelope({"jsonrpc": "2.0", "id": "abc", "method": "resources/list"}))
    assert result.body == {
        "jsonrpc": "2.0",
        "id": "abc",
        "error": {"code": -32601, "message": "Method not found: resources/list"},
    }


@pytest.mark.asyncio
async def test_ping_ignores_params(app_settings: Settings, fake_agent: FakeAgent) -> None:
    dispatcher, _ = _dispatcher(app_settings, fake_agent)
    result = await dispatcher.dispatch(
        _envelope({"jsonrpc": "2.0", "id": 7, "method": "ping", "params": {"anything": [1, 2]}})
    )
    assert result.body == {"jsonrpc": "2.0", "id": 7, "result": {}}


@pytest.mark.asyncio
async def test_tools_call_unknown_tool_is_tool_level_error(app_settings: Settings, fake_agent: FakeAgent) -> None:
    dispatcher, _ = _dispatcher(app_settings, fake_agent)
    result = await dispatcher.dispatch(
        _envelope({"jsonrpc": "2.0", "id": 2, "method": "tools/call", "params": {"name": "rm_rf", "arguments": {}}})
    )
    assert result.body is not None
    assert "error" not in result.body
    call_result = result.body["result"]
    assert call_result["isError"] is True
    assert "Unknown tool: rm_rf" in call_result["content"][0]["text"]


@pytest.mark.asyncio
async def test_tools_call_ask_delegates_to_agent(app_settings: Settings) -> None:
    agent = FakeAgent(reply="All systems nominal")
    dispatcher, _ = _dispatcher(app_settings, agent)
    result = await dispatcher.dispatch(
        _envelope(
            {
                "jsonrpc": "2.0",
                "id": 3,
                "method": "tools/call",
                "params": {"name": "ask", "arguments": {"message": "status?"}},
            }
        )
    )
    assert result.body == {
        "jsonrpc": "2.0",
        "id": 3,
        "result": {"content": [{"type": "text", "text": "All systems nominal"}]},
    }
    assert agent.sent == [("status?", 120)]


@pytest.mark.asyncio
async def test_tools_call_without_arguments_defaults_to_empty(app_settings: Settings, fake_agent: FakeAgent) -> None:
    dispatcher, _ = _dispatcher(app_settings, fake_agent)
    result = await dispatcher.dispatch(
        _envelope({"jsonrpc": "2.0", "id": 4, "method": "tools/call", "params": {"name": "sessions_status"}})
    )
    assert result.body is not None
    assert result.body["result"]["content"][0]["text"] == "pong"
    assert fake_agent.list_limits == [10]


@pytest.mark.asyncio
async def test_wrong_protocol_marker_is_rejected_before_dispatch(
    app_settings: Settings, fake_agent: FakeAgent
) -> None:
    dispatcher, store = _dispatcher(app_settings, fake_agent)
    with pytest.raises(InvalidRequestError) as exc_info:
        await dispatcher.dispatch(_envelope({"jsonrpc": "1.0", "id": 1, "method": "initialize"}))
    assert exc_info.value.message == "Invalid JSON-RPC version"
    assert len(store) == 0


@pytest.mark.asyncio
async def test_known_session_header_is_refreshed(app_settings: Settings, fake_agent: FakeAgent) -> None:
    dispatcher, store = _dispatcher(app_settings, fake_agent)
    initialized = await dispatcher.dispatch(_envelope({"jsonrpc": "2.0", "id": 1, "method": "initialize"}))
    assert initialized.session_id is not None

    result = await dispatcher.dispatch(
        _envelope({"jsonrpc": "2.0", "id": 2, "method": "ping"}),
        session_id=initialized.session_id,
    )
    assert result.body == {"jsonrpc": "2.0", "id": 2, "result": {}}
    assert initialized.session_id in store
