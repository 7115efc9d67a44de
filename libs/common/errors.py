from __future__ import annotations

import uuid
from dataclasses import dataclass

JSONRPC_PARSE_ERROR = -32700
JSONRPC_INVALID_REQUEST = -32600
JSONRPC_INTERNAL_ERROR = -32603


@dataclass(slots=True)
class ErrorEnvelope:
    error_code: str
    message: str
    trace_id: str
    retryable: bool


class DomainError(Exception):
    status_code = 400
    rpc_code = JSONRPC_INVALID_REQUEST

    def __init__(self, error_code: str, message: str, retryable: bool = False) -> None:
        super().__init__(message)
        self.error_code = error_code
        self.message = message
        self.retryable = retryable


class AuthenticationError(DomainError):
    status_code = 401

    def __init__(self, message: str = "Missing or invalid authorization header") -> None:
        super().__init__("AUTH_FAILED", message, retryable=False)


class ForbiddenError(DomainError):
    status_code = 403

    def __init__(self, message: str = "Invalid API key") -> None:
        super().__init__("FORBIDDEN", message, retryable=False)


class InvalidRequestError(DomainError):
    def __init__(self, message: str = "Invalid Request") -> None:
        super().__init__("INVALID_REQUEST", message, retryable=False)


class ParseError(DomainError):
    rpc_code = JSONRPC_PARSE_ERROR

    def __init__(self, message: str = "Parse error") -> None:
        super().__init__("PARSE_ERROR", message, retryable=False)


class AgentCommandError(DomainError):
    """openclaw 프로세스 실행이 실패했을 때 발생해요."""

    def __init__(self, message: str, retryable: bool = False) -> None:
        super().__init__("AGENT_COMMAND_FAILED", message, retryable=retryable)


class ConfigurationError(DomainError):
    """서버를 띄울 수 없는 설정일 때 발생해요. HTTP 응답으로는 나가지 않아요."""

    def __init__(self, message: str) -> None:
        super().__init__("CONFIGURATION_ERROR", message, retryable=False)


def build_error_envelope(error_code: str, message: str, retryable: bool) -> ErrorEnvelope:
    return ErrorEnvelope(
        error_code=error_code,
        message=message,
        trace_id=str(uuid.uuid4()),
        retryable=retryable,
    )
