# =============================================================================
# core/responses.py  —  Tool Response Envelope
# =============================================================================
# Every tool returns a flat dict:
#
#     {"status": "success" | "error" | "info" | "warning",
#      "message": "<one sentence for the LLM>",
#      ...tool-specific fields}
#
# Keys whose value is None are dropped so the agent never sees empty noise.
# =============================================================================

from typing import Any, Literal, Optional

Status = Literal["success", "error", "info", "warning"]


def build_response(
    status: Status,
    message: str,
    extra: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    response: dict[str, Any] = {"status": status, "message": message}
    for key, value in (extra or {}).items():
        if value is not None:
            response[key] = value
    return response


def build_success(message: str, extra: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    return build_response("success", message, extra)


def build_error(message: str, extra: Optional[dict[str, Any]] = None) -> dict[str, Any]:
    return build_response("error", message, extra)
