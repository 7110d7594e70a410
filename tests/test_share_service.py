"""Tests for the share relay adapters."""

from pathlib import Path
from unittest.mock import patch

import pytest
import requests

from pdfrelay.config import Settings
from pdfrelay.modules.share.service import ShareService, resolve_share_service
from pdfrelay.shared.errors import ShareError, UnsupportedShareServiceError


def make_response(status_code: int, body: str | bytes, reason: str = "OK") -> requests.Response:
    response = requests.Response()
    response.status_code = status_code
    response.reason = reason
    response._content = body.encode() if isinstance(body, str) else body
    response.encoding = "utf-8"
    return response


@pytest.fixture
def pdf_file(temp_dir: Path) -> Path:
    path = temp_dir / "out.pdf"
    path.write_bytes(b"%PDF-1.7 test")
    return path


@pytest.fixture
def service() -> ShareService:
    return ShareService(Settings(share_timeout_seconds=30))


class TestShareService:
    def test_file_io_success(self, service: ShareService, pdf_file: Path) -> None:
        body = '{"success": true, "key": "k1", "link": "https://file.io/k1", "expiry": "14 days"}'
        with patch("pdfrelay.modules.share.adapters.requests.post", return_value=make_response(200, body)) as post:
            result = service.upload(pdf_file, "report.pdf", "file.io")

        assert result.success is True
        assert result.link == "https://file.io/k1"
        assert result.service == "file.io"
        assert result.filename == "report.pdf"

        args, kwargs = post.call_args
        assert args == ("https://file.io",)
        assert kwargs["headers"] == {"Accept": "application/json"}
        assert kwargs["timeout"] == 30
        filename, _, content_type = kwargs["files"]["file"]
        assert filename == "report.pdf"
        assert content_type == "application/pdf"

    def test_file_io_unsuccessful(self, service: ShareService, pdf_file: Path) -> None:
        with patch("pdfrelay.modules.share.adapters.requests.post", return_value=make_response(200, '{"success": false}')):
            with pytest.raises(ShareError, match="failed to upload to file.io"):
                service.upload(pdf_file, "report.pdf", "file.io")

    def test_file_io_malformed_body(self, service: ShareService, pdf_file: Path) -> None:
        with patch("pdfrelay.modules.share.adapters.requests.post", return_value=make_response(502, "<html>Bad Gateway</html>")):
            with pytest.raises(ShareError, match="failed to parse response"):
                service.upload(pdf_file, "report.pdf", "file.io")

    def test_ki_tc_success(self, service: ShareService, pdf_file: Path) -> None:
        body = '{"file": {"download_page": "https://ki.tc/file/abc", "name": "report.pdf"}}'
        with patch("pdfrelay.modules.share.adapters.requests.post", return_value=make_response(201, body, "Created")) as post:
            result = service.upload(pdf_file, "report.pdf", "ki.tc")

        assert post.call_args.args == ("https://ki.tc/file/u/",)
        assert result.model_dump(exclude_none=True) == {
            "success": True,
            "link": "https://ki.tc/file/abc",
            "service": "ki.tc",
            "filename": "report.pdf",
        }

    def test_ki_tc_requires_created(self, service: ShareService, pdf_file: Path) -> None:
        body = '{"file": {"download_page": "https://ki.tc/file/abc"}}'
        with patch("pdfrelay.modules.share.adapters.requests.post", return_value=make_response(200, body)):
            with pytest.raises(ShareError, match="failed to upload to ki.tc: 200 OK"):
                service.upload(pdf_file, "report.pdf", "ki.tc")

    def test_ki_tc_missing_download_page(self, service: ShareService, pdf_file: Path) -> None:
        with patch("pdfrelay.modules.share.adapters.requests.post", return_value=make_response(201, '{"file": {}}')):
            with pytest.raises(ShareError, match="missing download page URL"):
                service.upload(pdf_file, "report.pdf", "ki.tc")

    def test_c_v_sh_success(self, service: ShareService, pdf_file: Path) -> None:
        with patch("pdfrelay.modules.share.adapters.requests.post", return_value=make_response(200, "https://c-v.sh/Xy9.pdf\n")) as post:
            result = service.upload(pdf_file, "report.pdf", "c-v.sh")

        assert post.call_args.args == ("https://c-v.sh",)
        assert result.link == "https://c-v.sh/Xy9.pdf"
        assert result.service == "c-v.sh"

    def test_c_v_sh_rejects_non_url_body(self, service: ShareService, pdf_file: Path) -> None:
        with patch("pdfrelay.modules.share.adapters.requests.post", return_value=make_response(200, "quota exceeded")):
            with pytest.raises(ShareError, match="invalid URL response: quota exceeded"):
                service.upload(pdf_file, "report.pdf", "c-v.sh")

    def test_network_error(self, service: ShareService, pdf_file: Path) -> None:
        with patch(
            "pdfrelay.modules.share.adapters.requests.post",
            side_effect=requests.ConnectionError("connection refused"),
        ) as post:
            with pytest.raises(ShareError, match="connection refused"):
                service.upload(pdf_file, "report.pdf", "c-v.sh")
        assert post.call_count == 1

    def test_unsupported_service(self, service: ShareService, pdf_file: Path) -> None:
        with patch("pdfrelay.modules.share.adapters.requests.post") as post:
            with pytest.raises(UnsupportedShareServiceError):
                service.upload(pdf_file, "report.pdf", "dropbox")
        post.assert_not_called()


def test_resolve_share_service() -> None:
    assert resolve_share_service(None) is None
    assert resolve_share_service("") is None
    assert resolve_share_service(" ki.tc ") == "ki.tc"
    assert resolve_share_service("file.io") == "file.io"
    assert resolve_share_service("dropbox") is None
