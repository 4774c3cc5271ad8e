"""
Maps AccessGateError kinds to HTTP responses. Registered once in main.py.
"""
import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from accessgate.core.errors import AccessGateError, ErrorKind

logger = logging.getLogger(__name__)

STATUS_BY_KIND = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.IDENTIFIER_TOO_LONG: 400,
    ErrorKind.NOT_FOUND: 404,
    ErrorKind.TRANSACTION_NOT_FOUND: 400,
    ErrorKind.TRANSACTION_FAILED: 400,
    ErrorKind.WRONG_ASSET: 400,
    ErrorKind.NO_MATCHING_TRANSFER: 400,
    ErrorKind.AMOUNT_MISMATCH: 400,
    ErrorKind.NETWORK_TIMEOUT: 504,
    ErrorKind.CHAIN_UNAVAILABLE: 503,
    ErrorKind.STORE_ERROR: 503,
    ErrorKind.GATEWAY_EXHAUSTED: 502,
}


def status_for(kind: ErrorKind) -> int:
    return STATUS_BY_KIND.get(kind, 500)


async def access_gate_error_handler(request: Request, exc: AccessGateError) -> JSONResponse:
    status_code = status_for(exc.kind)
    log = logger.warning if status_code >= 500 else logger.info
    log(
        "request_failed",
        extra={"path": request.url.path, "kind": exc.kind.value, "status_code": status_code, "error": str(exc)},
    )
    return JSONResponse(status_code=status_code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={
            "error": ErrorKind.VALIDATION.value,
            "message": "Invalid request data",
            "detail": {"errors": exc.errors()},
        },
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AccessGateError, access_gate_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
