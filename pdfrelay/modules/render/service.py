"""
Render service - HTML to PDF using the WeasyPrint command line.

Two entry points share run_renderer():
- render_files(): an uploaded HTML file plus stylesheets and attachments
- render_html(): an HTML string, or an http(s) URL WeasyPrint fetches itself
"""

import json
import shutil
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path, PurePosixPath
from typing import BinaryIO
from urllib.parse import quote, urlparse

from starlette.datastructures import FormData, UploadFile

from pdfrelay.config import Settings, get_settings
from pdfrelay.shared.errors import BadRequestError
from pdfrelay.shared.logging import get_logger

from .args import build_render_args
from .invoker import run_renderer
from .options import validate_options
from .schemas import RenderJob, RenderOptions

logger = get_logger(__name__)

DEFAULT_FILENAME = "document.pdf"

DEMO_HTML = """
<!DOCTYPE html>
<html>
<head>
    <meta charset="UTF-8">
    <title>Test Document</title>
    <style>
        body { font-family: Arial, sans-serif; margin: 20px; }
        h1 { color: #333; }
    </style>
</head>
<body>
    <h1>Hello, World! 🌍</h1>
    <p>This is a test PDF document.</p>
</body>
</html>
"""


# =============================================================================
# HELPERS
# =============================================================================

def is_url(content: str) -> bool:
    """True when content is an http(s) URL rather than literal HTML."""
    if not content.startswith(("http://", "https://")):
        return False
    try:
        return bool(urlparse(content).netloc)
    except ValueError:
        return False


def normalize_filename(filename: str | None, default: str = DEFAULT_FILENAME) -> str:
    """Trim the requested download name and make sure it ends in .pdf."""
    name = (filename or "").strip()
    if not name:
        return default
    if not name.lower().endswith(".pdf"):
        name += ".pdf"
    return name


def content_disposition(filename: str) -> str:
    """
    Attachment header with a plain filename for old clients and an RFC 5987
    UTF-8 filename* for everyone else. Spaces are encoded as %20.

    Header values must be latin-1, so the plain form degrades non-ASCII
    characters to "?".
    """
    fallback = filename.encode("ascii", "replace").decode("ascii").replace('"', '\\"')
    encoded = quote(filename, safe="!#$&+^`|")
    return f"attachment; filename=\"{fallback}\"; filename*=UTF-8''{encoded}"


def _safe_upload_name(upload: UploadFile, field_name: str) -> str:
    """Strip any directory part a client put in the upload's filename."""
    raw = (upload.filename or "").replace("\\", "/")
    name = PurePosixPath(raw).name
    if name in ("", ".", ".."):
        name = PurePosixPath(field_name.replace("\\", "/")).name or "upload"
    return name


def _unique_path(directory: Path, name: str, taken: set[str]) -> Path:
    """directory/name, prefixed with a counter when name is already in use."""
    candidate = name
    counter = 1
    while candidate in taken:
        candidate = f"{counter}-{name}"
        counter += 1
    taken.add(candidate)
    return directory / candidate


@contextmanager
def request_temp_dir() -> Iterator[Path]:
    """Per-request scratch directory, removed on every exit path."""
    temp_dir = Path(tempfile.mkdtemp(prefix="pdfgen-"))
    logger.debug(f"Created temporary directory: {temp_dir}")
    try:
        yield temp_dir
    finally:
        shutil.rmtree(temp_dir, ignore_errors=True)
        logger.debug(f"Cleaned up temporary directory: {temp_dir}")


@contextmanager
def scoped_temp_file(suffix: str, prefix: str | None = None) -> Iterator[Path]:
    """Closed temporary file path, unlinked on every exit path."""
    handle = tempfile.NamedTemporaryFile(suffix=suffix, prefix=prefix, delete=False)
    handle.close()
    path = Path(handle.name)
    try:
        yield path
    finally:
        path.unlink(missing_ok=True)


# =============================================================================
# SERVICE
# =============================================================================

class RenderService:
    """Service for rendering HTML to PDF with WeasyPrint."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    def default_stylesheet(self) -> str:
        return (
            f"@page {{ size: {self.settings.default_page_size}; "
            f"margin: {self.settings.default_page_margin}; }}"
        )

    def collect_upload(self, form: FormData, temp_dir: Path) -> RenderJob:
        """
        Save multipart files into temp_dir and classify them by field name.

        Fields:
            html: the source document (required)
            css.*: stylesheets; a default page stylesheet is added when none
            asset.*: attachments embedded into the PDF
            options: JSON object of WeasyPrint options

        Raises:
            BadRequestError: missing HTML file or malformed options JSON
        """
        html_path: Path | None = None
        stylesheets: list[Path] = []
        attachments: list[Path] = []
        options = RenderOptions()
        taken: set[str] = set()

        for field_name, value in form.multi_items():
            if not isinstance(value, UploadFile):
                continue

            path = _unique_path(temp_dir, _safe_upload_name(value, field_name), taken)
            with path.open("wb") as dst:
                shutil.copyfileobj(value.file, dst)

            if field_name == "html":
                html_path = path
            elif field_name.startswith("css."):
                stylesheets.append(path)
            elif field_name.startswith("asset."):
                attachments.append(path)

        raw_options = form.get("options")
        if isinstance(raw_options, str):
            try:
                parsed = json.loads(raw_options)
            except ValueError as e:
                logger.warning(f"Failed to parse options: {e}")
                raise BadRequestError("invalid JSON format options") from e
            if not isinstance(parsed, dict):
                logger.warning(f"Options must be a JSON object, got {type(parsed).__name__}")
                raise BadRequestError("invalid JSON format options")
            options = validate_options(parsed)

        if html_path is None:
            raise BadRequestError("missing HTML file")

        if not stylesheets:
            default_css = _unique_path(temp_dir, "default.css", taken)
            default_css.write_text(self.default_stylesheet(), encoding="utf-8")
            stylesheets.append(default_css)

        return RenderJob(
            html_path=html_path,
            stylesheets=stylesheets,
            attachments=attachments,
            options=options,
        )

    async def render_files(
        self,
        destination: BinaryIO,
        job: RenderJob,
        timeout: float | None = None,
    ) -> None:
        """Render an uploaded HTML file with its stylesheets and attachments."""
        args = build_render_args(
            job.options,
            job.html_path,
            stylesheets=job.stylesheets,
            attachments=job.attachments,
        )
        await run_renderer(
            destination, args, binary=self.settings.weasyprint_bin, timeout=timeout
        )

    async def render_html(
        self,
        destination: BinaryIO,
        content: str,
        options: RenderOptions | None = None,
        timeout: float | None = None,
    ) -> None:
        """
        Render an HTML string, or let WeasyPrint fetch content that is a URL.

        Literal HTML goes through a temporary .html file that is always removed.
        """
        if is_url(content):
            logger.info(f"Detected URL: {content}")
            args = build_render_args(options, content)
            await run_renderer(
                destination, args, binary=self.settings.weasyprint_bin, timeout=timeout
            )
            return

        with scoped_temp_file(suffix=".html") as html_path:
            html_path.write_text(content, encoding="utf-8")
            args = build_render_args(options, html_path)
            await run_renderer(
                destination, args, binary=self.settings.weasyprint_bin, timeout=timeout
            )
