from typing import Any, Dict, Optional
from http import HTTPStatus

class WidgetServiceError(Exception):
    """Error carrying the HTTP status and payload the Flask layer reports"""
    def __init__(
        self,
        status_code: int,
        detail: str,
        error_type: str = "general_error",
        extra_data: Optional[Dict[str, Any]] = None
    ):
        super().__init__(detail)
        self.status_code = int(status_code)
        self.detail = detail
        self.error_type = error_type
        self.extra_data = extra_data or {}

class ValidationError(WidgetServiceError):
    """Malformed request input"""
    def __init__(self, message: str, field: str = None, value: Any = None):
        extra_data = {"field": field} if field else {}
        if value is not None:
            extra_data["value"] = str(value)
        super().__init__(HTTPStatus.UNPROCESSABLE_ENTITY, message, "validation_error", extra_data)

class InstanceNotFoundError(WidgetServiceError):
    """Widget instance not registered with the host"""
    def __init__(self, instance_id: Any):
        super().__init__(
            HTTPStatus.NOT_FOUND,
            f"Widget instance {instance_id} not found",
            "instance_not_found",
            {"instance_id": str(instance_id)}
        )

class PreferencesError(WidgetServiceError):
    """Snapshot store backend could not be read or written"""
    def __init__(self, message: str, backend: str = None):
        super().__init__(
            HTTPStatus.INTERNAL_SERVER_ERROR,
            message,
            "preferences_error",
            {"backend": backend} if backend else {}
        )
