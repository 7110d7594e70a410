"""Share module - relay rendered PDFs to third-party file-sharing services."""

from .adapters import SHARE_ADAPTERS, ShareAdapter
from .schemas import ShareResult
from .service import ShareService

__all__ = ["SHARE_ADAPTERS", "ShareAdapter", "ShareResult", "ShareService"]
