"""
Error taxonomy shared by all modules.

Every error carries a stable code, a client-facing message and the HTTP
status the API answers with. Internal details stay in the logs.
"""

from typing import Any


class PdfRelayError(Exception):
    """Base error for pdfrelay."""

    code = "INTERNAL_ERROR"
    http_status = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            data["details"] = self.details
        return data


class BadRequestError(PdfRelayError):
    """Malformed request: wrong content type, bad JSON, missing file."""

    code = "BAD_REQUEST"
    http_status = 400


class InternalError(PdfRelayError):
    """Server-side failure whose details must not reach the client."""

    def __init__(self, message: str = "Internal server error"):
        super().__init__(message)


class RenderError(PdfRelayError):
    """The renderer could not be started or exited with an error."""

    code = "RENDER_FAILED"


class ShareError(PdfRelayError):
    """Upload to a file-sharing service failed."""

    code = "SHARE_FAILED"


class UnsupportedShareServiceError(ShareError):
    """Requested sharing service is not one we know."""

    code = "UNSUPPORTED_SHARE_SERVICE"

    def __init__(self, service: str):
        super().__init__(f"unsupported sharing service: {service}", {"service": service})
        self.service = service


class VersionProbeError(PdfRelayError):
    """Renderer version could not be determined."""

    code = "VERSION_UNAVAILABLE"
