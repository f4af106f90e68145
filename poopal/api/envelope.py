"""Response envelope shared by the JSON routers."""

from typing import Any

from fastapi.encoders import jsonable_encoder


def success(data: Any) -> dict:
    """Wrap a payload as ``{"status": "success", "data": ...}`` with camelCase keys."""
    return {"status": "success", "data": jsonable_encoder(data, by_alias=True)}
