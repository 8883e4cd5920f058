from typing import Any, Optional
from pydantic import BaseModel

class ResponseModel(BaseModel):
    """Envelope shared by every catalog endpoint."""
    code: int = 200
    message: str = "success"
    data: Optional[Any] = None
    total: Optional[int] = None

    @staticmethod
    def success(data: Any = None, total: Optional[int] = None):
        body = {"code": 200, "message": "success", "data": data}
        if total is not None:
            body["total"] = total
        return body

    @staticmethod
    def fail(code: int = 400, message: str = "error", data: Any = None):
        return {"code": code, "message": message, "data": data}
