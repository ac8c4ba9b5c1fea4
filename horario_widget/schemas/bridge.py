from pydantic import BaseModel
from typing import Any, Optional

NOT_IMPLEMENTED = "NOT_IMPLEMENTED"

class BridgeResult(BaseModel):
    """Outcome of one bridge command: success with a value, or an error code and message"""
    ok: bool
    value: Any = None
    code: Optional[str] = None
    message: Optional[str] = None
    details: Optional[str] = None

    @classmethod
    def success(cls, value: Any = None) -> "BridgeResult":
        return cls(ok=True, value=value)

    @classmethod
    def error(cls, code: str, message: str, details: Optional[str] = None) -> "BridgeResult":
        return cls(ok=False, code=code, message=message, details=details)

    @classmethod
    def not_implemented(cls, method: str) -> "BridgeResult":
        return cls.error(NOT_IMPLEMENTED, f"Method {method!r} is not implemented")

    @property
    def is_not_implemented(self) -> bool:
        return not self.ok and self.code == NOT_IMPLEMENTED

class WidgetInfo(BaseModel):
    available: bool = True
    name: str
    version: str
