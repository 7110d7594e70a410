"""
Sharing service adapters.

ShareAdapter owns the upload itself: one multipart POST with the PDF in the
"file" field. Subclasses only name their endpoint and turn the upstream
response into a download link.
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

import requests

from pdfrelay.shared.errors import ShareError
from pdfrelay.shared.logging import get_logger

from .schemas import ShareResult

logger = get_logger(__name__)


class ShareAdapter(ABC):
    """Base class for a file-sharing endpoint."""

    service: str
    url: str

    def upload(self, file_path: Path, filename: str, timeout: float = 30.0) -> ShareResult:
        """
        Upload file_path under filename and normalize the response.

        Raises:
            ShareError: network failure or an upstream answer we can't use
        """
        try:
            with open(file_path, "rb") as fh:
                response = requests.post(
                    self.url,
                    files={"file": (filename, fh, "application/pdf")},
                    headers={"Accept": "application/json"},
                    timeout=timeout,
                )
        except (OSError, requests.RequestException) as e:
            raise ShareError(f"failed to upload to {self.service}: {e}") from e

        logger.info(f"{self.service} responded {response.status_code}")
        link = self.extract_link(response)

        return ShareResult(success=True, link=link, service=self.service, filename=filename)

    @abstractmethod
    def extract_link(self, response: requests.Response) -> str:
        """Return the share link, or raise ShareError."""

    def _json(self, response: requests.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise ShareError(f"failed to parse response: {e}") from e


class FileIoAdapter(ShareAdapter):
    """https://file.io - JSON body with a success flag and a link."""

    service = "file.io"
    url = "https://file.io"

    def extract_link(self, response: requests.Response) -> str:
        data = self._json(response)
        if not isinstance(data, dict) or data.get("success") is not True:
            logger.warning(f"file.io rejected upload: {response.text[:200]}")
            raise ShareError("failed to upload to file.io")
        return str(data.get("link") or "")


class KiTcAdapter(ShareAdapter):
    """https://ki.tc - 201 Created, link in file.download_page."""

    service = "ki.tc"
    url = "https://ki.tc/file/u/"

    def extract_link(self, response: requests.Response) -> str:
        if response.status_code != 201:
            raise ShareError(
                f"failed to upload to ki.tc: {response.status_code} {response.reason}"
            )
        data = self._json(response)
        file_info = data.get("file") if isinstance(data, dict) else None
        link = file_info.get("download_page") if isinstance(file_info, dict) else None
        if not isinstance(link, str) or not link:
            raise ShareError("missing download page URL in response")
        return link


class CvShAdapter(ShareAdapter):
    """https://c-v.sh - 200 OK, the body is the URL."""

    service = "c-v.sh"
    url = "https://c-v.sh"

    def extract_link(self, response: requests.Response) -> str:
        if response.status_code != 200:
            raise ShareError(
                f"failed to upload to c-v.sh: {response.status_code} {response.reason}"
            )
        link = response.text.strip()
        if not link.startswith("http"):
            raise ShareError(f"invalid URL response: {link}")
        return link


SHARE_ADAPTERS: dict[str, ShareAdapter] = {
    adapter.service: adapter
    for adapter in (FileIoAdapter(), KiTcAdapter(), CvShAdapter())
}
