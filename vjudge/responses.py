"""Envelopes for the JSON bodies returned by the HTTP API."""

from __future__ import annotations

from typing import Any


def success_response(data: Any) -> dict[str, Any]:
    """Wrap *data* in a success envelope; no data becomes an empty list."""
    return {"code": "0", "msg": "success", "data": [] if data is None else data}


def success_response_with_total(data: Any, total: int) -> dict[str, Any]:
    """Wrap *data* in a success envelope that also carries *total*."""
    response: dict[str, Any] = {"code": "0", "msg": "success"}
    if data is None:
        response["data"] = []
    else:
        response["data"] = data
        response["total"] = total
    return response


def error_response(code: str, message: str) -> dict[str, Any]:
    """Build an error envelope with the given code and message."""
    return {"code": code, "msg": message}