"""
WeasyPrint command-line construction.

Flags are only emitted when they differ from WeasyPrint's own defaults, which
keeps invocations short and leaves the tool's defaults in charge.
"""

from collections.abc import Iterable
from pathlib import Path

from .schemas import RenderOptions

STDOUT_MARKER = "-"

# (field, flag, tool default). Order is the emission order.
OPTION_FLAGS: list[tuple[str, str, object]] = [
    ("encoding", "--encoding", ""),
    ("media_type", "--media-type", "print"),
    ("base_url", "--base-url", ""),
    ("pdf_identifier", "--pdf-identifier", ""),
    ("pdf_variant", "--pdf-variant", ""),
    ("pdf_version", "--pdf-version", ""),
    ("pdf_forms", "--pdf-forms", False),
    ("uncompressed_pdf", "--uncompressed-pdf", False),
    ("custom_metadata", "--custom-metadata", False),
    ("presentational_hints", "--presentational-hints", False),
    ("srgb", "--srgb", False),
    ("optimize_images", "--optimize-images", False),
    ("full_fonts", "--full-fonts", False),
    ("hinting", "--hinting", False),
    ("jpeg_quality", "--jpeg-quality", 80),
    ("dpi", "--dpi", 96),
    ("cache_folder", "--cache-folder", ""),
    ("timeout", "--timeout", 30),
    ("verbose", "--verbose", False),
    ("debug", "--debug", False),
    ("quiet", "--quiet", False),
]


def build_option_args(options: RenderOptions | None) -> list[str]:
    """Translate sanitized options into WeasyPrint flags."""
    args: list[str] = []
    if options is None:
        return args

    for field, flag, default in OPTION_FLAGS:
        value = getattr(options, field)

        if isinstance(value, bool):
            if value:
                args.append(flag)
        elif isinstance(value, int):
            if value > 0 and value != default:
                args.extend([flag, str(value)])
        elif value and value != default:
            args.extend([flag, value])

    return args


def build_render_args(
    options: RenderOptions | None,
    source: str | Path,
    stylesheets: Iterable[str | Path] = (),
    attachments: Iterable[str | Path] = (),
) -> list[str]:
    """
    Full argument list: option flags, stylesheets, attachments, then the
    positional source and the stdout marker.
    """
    args = build_option_args(options)

    for path in stylesheets:
        args.extend(["--stylesheet", str(path)])

    for path in attachments:
        args.extend(["--attachment", str(path)])

    args.extend([str(source), STDOUT_MARKER])
    return args
