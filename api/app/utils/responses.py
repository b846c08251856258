from typing import Any, Dict

from starlette.responses import JSONResponse


def err(
    code: int | str,
    message: str,
    details: Dict[str, Any] | None = None,
    hint: str | None = None,
) -> Dict[str, Any]:
    """Return an error envelope."""
    from ..middlewares.request_id import request_id_ctx

    error: Dict[str, Any] = {"code": code, "message": message}
    if hint:
        error["hint"] = hint
    if details:
        error["details"] = details

    return {"ok": False, "request_id": request_id_ctx.get(None), "error": error}


def error_response(status_code: int, message: str, **details: Any) -> JSONResponse:
    """Return ``err`` wrapped in a JSON response with ``status_code``."""
    return JSONResponse(err(status_code, message, details or None), status_code=status_code)
