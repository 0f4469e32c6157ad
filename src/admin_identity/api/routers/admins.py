"""
admin_identity.api.routers.admins

RPC-style endpoint over the admin method table.

Responsibilities:
- Validate request bodies against the registered method's request model.
- Return `{"result": ...}` for request-response methods.
- Stream NDJSON lines for request-stream methods, ending with an error line on failure.
- Map identity errors onto HTTP statuses.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator
from typing import Any

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import StreamingResponse
from pydantic import ValidationError
from starlette.status import (
    HTTP_400_BAD_REQUEST,
    HTTP_401_UNAUTHORIZED,
    HTTP_404_NOT_FOUND,
    HTTP_409_CONFLICT,
)

from admin_identity.api.deps import admin_methods
from admin_identity.api.methods import MethodKind, MethodSpec
from admin_identity.errors import DuplicateKey, IdentityError, InvalidCredentials, NotFound
from admin_identity.observability.logging import get_logger

router = APIRouter(prefix="/v1/admins", tags=["admins"])

# Starlette renamed the 422 constant (ENTITY -> CONTENT); the bare code works on every version.
_HTTP_422_UNPROCESSABLE = 422

log = get_logger(__name__)

_STATUS_BY_ERROR: dict[type[IdentityError], int] = {
    NotFound: HTTP_404_NOT_FOUND,
    DuplicateKey: HTTP_409_CONFLICT,
    InvalidCredentials: HTTP_401_UNAUTHORIZED,
}


def _detail(code: str, message: str) -> dict[str, str]:
    return {"code": code, "message": message}


def _http_error(e: IdentityError) -> HTTPException:
    status = _STATUS_BY_ERROR.get(type(e), HTTP_400_BAD_REQUEST)
    return HTTPException(status_code=status, detail=_detail(e.code, e.message))


async def _parse_params(spec: MethodSpec, request: Request) -> Any:
    raw = await request.body()
    try:
        payload = json.loads(raw) if raw else {}
        return spec.request_model.model_validate(payload)
    except ValidationError as e:
        raise HTTPException(
            status_code=_HTTP_422_UNPROCESSABLE,
            detail=jsonable_encoder(e.errors(include_url=False, include_context=False)),
        ) from e
    except ValueError as e:
        # json.JSONDecodeError
        raise HTTPException(
            status_code=_HTTP_422_UNPROCESSABLE,
            detail=_detail("INVALID_JSON", str(e)),
        ) from e


def _ndjson_line(obj: dict[str, Any]) -> bytes:
    return (json.dumps(obj, separators=(",", ":")) + "\n").encode("utf-8")


async def _stream_lines(method: str, stream: AsyncIterator[Any]) -> AsyncIterator[bytes]:
    try:
        async for value in stream:
            yield _ndjson_line({"result": jsonable_encoder(value)})
    except IdentityError as e:
        # Headers are already sent; the failure travels as the final line.
        log.info("rpc_stream_failed", rpc_method=method, code=e.code)
        yield _ndjson_line({"error": _detail(e.code, e.message)})
    finally:
        # Client disconnects land here too; closing releases the store subscription.
        await stream.aclose()  # type: ignore[attr-defined]


@router.post("/rpc/{method}", response_model=None)
async def call_method(
    method: str,
    request: Request,
    methods: dict[str, MethodSpec] = Depends(admin_methods),
) -> Any:
    spec = methods.get(method)
    if spec is None:
        raise HTTPException(
            status_code=HTTP_404_NOT_FOUND,
            detail=_detail("UNKNOWN_METHOD", f"Unknown method '{method}'"),
        )

    structlog.contextvars.bind_contextvars(rpc_method=method)
    params = await _parse_params(spec, request)

    if spec.kind is MethodKind.request_stream:
        return StreamingResponse(
            _stream_lines(method, spec.handler(params)),
            media_type="application/x-ndjson",
        )

    try:
        result = await spec.handler(params)
    except IdentityError as e:
        raise _http_error(e) from e
    except ValueError as e:
        # Store-level validation (unknown or immutable fields).
        raise HTTPException(
            status_code=HTTP_400_BAD_REQUEST, detail=_detail("BAD_REQUEST", str(e))
        ) from e

    return {"result": jsonable_encoder(result)}


# --- Module Notes -----------------------------------------------------------
# `login` and `isAuthenticated` answer `{"result": null}` / `{"result": false}` for every
# failure cause, never an error status, so responses cannot be used as an email oracle.
