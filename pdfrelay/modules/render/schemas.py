"""Render module schemas."""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RenderOptions(BaseModel):
    """
    Sanitized WeasyPrint options.

    Only ever built by validate_options(); every field holds its zero value or
    a value that passed the field's validator. Field order is the order in
    which command-line flags are emitted.
    """

    model_config = ConfigDict(frozen=True)

    # Basic options
    encoding: str = ""
    media_type: str = "print"
    base_url: str = ""

    # PDF options
    pdf_identifier: str = ""
    pdf_variant: str = ""
    pdf_version: str = ""
    pdf_forms: bool = False

    # Output options
    uncompressed_pdf: bool = False
    custom_metadata: bool = False
    presentational_hints: bool = False
    srgb: bool = False
    optimize_images: bool = False
    full_fonts: bool = False
    hinting: bool = False

    # Quality and performance
    jpeg_quality: int = 0
    dpi: int = 0
    cache_folder: str = ""
    timeout: int = 0

    # Log level
    verbose: bool = False
    debug: bool = False
    quiet: bool = False


class HtmlRenderRequest(BaseModel):
    """JSON body for POST /api/v1/pdf/render/html."""

    html: str = Field(default="", description="HTML content or an http(s) URL")
    options: dict[str, Any] | None = Field(
        default=None, description="WeasyPrint options, sanitized server-side"
    )
    share_service: str | None = Field(
        default=None, description="Optional sharing service: file.io, ki.tc, c-v.sh"
    )


class RenderJob(BaseModel):
    """Files collected from a multipart upload, ready to render."""

    html_path: Path
    stylesheets: list[Path] = Field(default_factory=list)
    attachments: list[Path] = Field(default_factory=list)
    options: RenderOptions = Field(default_factory=RenderOptions)
    filename: str = "document.pdf"
    share_service: str | None = None
