from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr

JSONRPC_VERSION = "2.0"
MCP_PROTOCOL_VERSION = "2024-11-05"
SERVER_VERSION = "1.0.0"
SESSION_HEADER = "Mcp-Session-Id"


class JsonRpcErrorCode(IntEnum):
    PARSE_ERROR = -32700
    INVALID_REQUEST = -32600
    METHOD_NOT_FOUND = -32601
    INVALID_PARAMS = -32602
    INTERNAL_ERROR = -32603


class JsonRpcEnvelope(BaseModel):
    """POST 본문 하나에 담긴 JSON-RPC 메시지예요.

    `id` 키가 아예 없으면 알림(notification)이고, 있으면 (값이 null이어도) 요청이에요.
    """

    model_config = ConfigDict(extra="allow")

    jsonrpc: Any = None
    method: Any = None
    params: Any = None
    # 받은 id를 형변환 없이 그대로 돌려줘야 해요.
    id: StrictInt | StrictFloat | StrictStr | None = None

    @property
    def is_notification(self) -> bool:
        return "id" not in self.model_fields_set

    @property
    def param_dict(self) -> dict[str, Any]:
        return self.params if isinstance(self.params, dict) else {}


@dataclass(slots=True, frozen=True)
class McpTool:
    name: str
    description: str
    input_schema: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema,
        }


@dataclass(slots=True)
class McpToolCallResult:
    text: str
    is_error: bool = False
    content_type: str = field(default="text")

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"content": [{"type": self.content_type, "text": self.text}]}
        if self.is_error:
            payload["isError"] = True
        return payload


def build_result(request_id: Any, result: dict[str, Any]) -> dict[str, Any]:
    return {"jsonrpc": JSONRPC_VERSION, "id": request_id, "result": result}


def build_error(request_id: Any, code: int, message: str) -> dict[str, Any]:
    return {
        "jsonrpc": JSONRPC_VERSION,
        "id": request_id,
        "error": {"code": int(code), "message": message},
    }
