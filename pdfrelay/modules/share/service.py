"""Share service - pick an adapter and upload."""

from pathlib import Path

from pdfrelay.config import Settings, get_settings
from pdfrelay.shared.errors import UnsupportedShareServiceError
from pdfrelay.shared.logging import get_logger

from .adapters import SHARE_ADAPTERS
from .schemas import ShareResult

logger = get_logger(__name__)


def resolve_share_service(value: str | None) -> str | None:
    """
    Map a client-supplied service name to a supported one.

    Unknown names mean "no sharing", matching how the API has always behaved.
    """
    name = (value or "").strip()
    if not name:
        return None
    if name not in SHARE_ADAPTERS:
        logger.warning(f"Ignoring unknown share service: {name}")
        return None
    return name


class ShareService:
    """Uploads rendered files to third-party sharing services."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def upload(self, file_path: Path, filename: str, service: str) -> ShareResult:
        """
        Upload one file. Attempted exactly once.

        Raises:
            UnsupportedShareServiceError: service is not a known name
            ShareError: the upload or the upstream response failed
        """
        adapter = SHARE_ADAPTERS.get(service)
        if adapter is None:
            raise UnsupportedShareServiceError(service)

        logger.info(f"Uploading {filename} to {service}")
        return adapter.upload(
            Path(file_path), filename, timeout=self.settings.share_timeout_seconds
        )
