from __future__ import annotations

from typing import Any

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from libs.common.errors import JSONRPC_INTERNAL_ERROR, DomainError, build_error_envelope
from libs.common.logging import get_logger


def jsonrpc_error_body(
    code: int,
    message: str,
    *,
    request_id: Any = None,
    data: dict[str, Any] | None = None,
) -> dict[str, Any]:
    error: dict[str, Any] = {"code": code, "message": message}
    if data:
        error["data"] = data
    return {"jsonrpc": "2.0", "error": error, "id": request_id}


def register_exception_handlers(app: FastAPI, logger_name: str) -> None:
    logger = get_logger(logger_name)

    @app.exception_handler(DomainError)
    async def handle_domain_error(request: Request, exc: DomainError) -> JSONResponse:
        envelope = build_error_envelope(exc.error_code, exc.message, exc.retryable)
        logger.warning(
            "domain_error",
            path=request.url.path,
            method=request.method,
            trace_id=envelope.trace_id,
            error_code=envelope.error_code,
            message=envelope.message,
            retryable=envelope.retryable,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=jsonrpc_error_body(
                exc.rpc_code,
                envelope.message,
                data={"error_code": envelope.error_code, "trace_id": envelope.trace_id},
            ),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        envelope = build_error_envelope("INTERNAL_ERROR", str(exc), retryable=True)
        logger.exception(
            "unhandled_error",
            path=request.url.path,
            method=request.method,
            trace_id=envelope.trace_id,
            error=str(exc),
        )
        return JSONResponse(
            status_code=500,
            content=jsonrpc_error_body(
                JSONRPC_INTERNAL_ERROR,
                envelope.message,
                data={"error_code": envelope.error_code, "trace_id": envelope.trace_id},
            ),
        )
