from fastapi.responses import JSONResponse
from fastapi.encoders import jsonable_encoder
from typing import Any, Optional

def success_resp(message: str, data: Any = None, status_code: int = 200, count: Optional[int] = None):
    """
    Standardized Success Response
    """
    body = {
        "success": True,
        "message": message,
        "data": data if data is not None else {},
    }
    if count is not None:
        body["count"] = count
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))

def error_resp(message: str, status_code: int = 500, code: Optional[str] = None, details: Optional[str] = None):
    """
    Standardized Error Response. ``details`` is only passed in development mode.
    """
    body = {
        "success": False,
        "error": message,
    }
    if code:
        body["code"] = code
    if details:
        body["details"] = details
    return JSONResponse(status_code=status_code, content=jsonable_encoder(body))
