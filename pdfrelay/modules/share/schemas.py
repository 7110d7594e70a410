"""Share module schemas."""

from pydantic import BaseModel


class ShareResult(BaseModel):
    """Normalized outcome of an upload to a sharing service."""

    success: bool
    link: str
    service: str
    filename: str | None = None
    message: str | None = None
