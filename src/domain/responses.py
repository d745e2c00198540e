"""
Response shaping for protocol outcomes.

Two pure functions render the same Outcome for the JSON API and for the
web (link click / form) surface. They never change the result itself and
do not choose HTTP status codes.
"""

from typing import Any

from .outcome import Outcome


def _payload(outcome: Outcome) -> dict[str, Any]:
    if outcome.user is not None:
        return {"user": outcome.user}
    return {"email": outcome.email}


def to_api_shape(outcome: Outcome) -> dict[str, Any]:
    """
    Render an outcome for API clients.

    success -> {"status": "success", "message", "data": {...}}
    failure -> {"status": "error", "message", "error_code"}
    """
    if outcome.success:
        return {
            "status": "success",
            "message": outcome.message,
            "data": _payload(outcome),
        }
    return {
        "status": "error",
        "message": outcome.message,
        "error_code": outcome.error_code.value if outcome.error_code else None,
    }


def to_web_shape(outcome: Outcome, redirect_url: str | None = None) -> dict[str, Any]:
    """
    Render an outcome for the web surface.

    success -> {"success": True, "message", "error_code": None, "user"|"email",
                "redirect_url" (when given)}
    failure -> {"success": False, "message", "error_code", "errors": []}
    """
    if outcome.success:
        shaped: dict[str, Any] = {
            "success": True,
            "message": outcome.message,
            "error_code": None,
            **_payload(outcome),
        }
        if redirect_url is not None:
            shaped["redirect_url"] = redirect_url
        return shaped
    return {
        "success": False,
        "message": outcome.message,
        "error_code": outcome.error_code.value if outcome.error_code else None,
        "errors": [],
    }
