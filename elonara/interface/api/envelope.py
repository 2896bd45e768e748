"""Response envelope shared by every JSON endpoint.

``{"success": bool, "message": str?, "data": {..., "nonce": str}?}``;
clients keep the ``nonce`` of each response for their next mutating call.
"""

from typing import Any

from pydantic import BaseModel


class Envelope(BaseModel):
    """Standard API response."""

    success: bool
    message: str | None = None
    data: dict[str, Any] | None = None


def ok(
    message: str | None = None,
    nonce: str | None = None,
    payload: BaseModel | dict[str, Any] | None = None,
) -> Envelope:
    """Successful response, with the rotated nonce merged into ``data``."""
    data: dict[str, Any] = {}
    if isinstance(payload, BaseModel):
        data.update(payload.model_dump(mode="json"))
    elif payload:
        data.update(payload)
    if nonce is not None:
        data["nonce"] = nonce
    return Envelope(success=True, message=message, data=data or None)


def fail(message: str, data: dict[str, Any] | None = None) -> Envelope:
    """Failed response."""
    return Envelope(success=False, message=message, data=data)
