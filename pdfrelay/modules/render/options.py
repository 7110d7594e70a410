"""
Option sanitization.

Clients send WeasyPrint options as an untyped JSON object. Only keys listed in
OPTION_VALIDATORS reach the renderer; each validator returns the accepted
value or None to leave the field at its default. Nothing here raises: bad
values degrade to defaults and are logged.
"""

import math
import re
from collections.abc import Callable, Mapping
from typing import Any

from pdfrelay.shared.logging import get_logger

from .schemas import RenderOptions

logger = get_logger(__name__)

PDF_VARIANTS = frozenset({
    "pdf/a-1b", "pdf/a-2b", "pdf/a-3b", "pdf/a-4b",
    "pdf/a-2u", "pdf/a-3u", "pdf/a-4u",
    "pdf/ua-1", "debug",
})

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")

Validator = Callable[[Any], Any | None]


def _string(value: Any) -> str | None:
    return value if isinstance(value, str) else None


def _boolean(value: Any) -> bool | None:
    return value if isinstance(value, bool) else None


def _pdf_variant(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    if value not in PDF_VARIANTS:
        logger.warning(f"Invalid PDF variant: {value}")
        return None
    return value


def parse_int(value: Any) -> int | None:
    """
    Coerce a JSON value to int.

    Accepts ints, floats (truncated toward zero) and strings holding a plain
    base-10 integer. Booleans are not numbers here.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if math.isnan(value) or math.isinf(value):
            return None
        return int(value)
    if isinstance(value, str) and _INT_PATTERN.fullmatch(value):
        return int(value)
    return None


def _ranged_int(low: int, high: int) -> Validator:
    def validate(value: Any) -> int | None:
        parsed = parse_int(value)
        if parsed is None:
            logger.warning(f"Unparsable integer value: {value!r}")
            return None
        if parsed < low or parsed > high:
            logger.warning(f"Integer value {parsed} out of range [{low}, {high}]")
            return None
        # 0 means "not provided"
        return parsed or None

    return validate


# The allow-list. cache_folder is deliberately absent: clients never choose
# filesystem paths for the renderer.
OPTION_VALIDATORS: dict[str, Validator] = {
    "encoding": _string,
    "media_type": _string,
    "base_url": _string,
    "pdf_identifier": _string,
    "pdf_variant": _pdf_variant,
    "pdf_version": _string,
    "pdf_forms": _boolean,
    "uncompressed_pdf": _boolean,
    "custom_metadata": _boolean,
    "presentational_hints": _boolean,
    "srgb": _boolean,
    "optimize_images": _boolean,
    "full_fonts": _boolean,
    "hinting": _boolean,
    "jpeg_quality": _ranged_int(0, 95),
    "dpi": _ranged_int(50, 600),
    "timeout": _ranged_int(1, 300),
    "verbose": _boolean,
    "debug": _boolean,
    "quiet": _boolean,
}


def validate_options(raw: Mapping[str, Any] | None) -> RenderOptions:
    """
    Build RenderOptions from client-supplied options.

    Unknown keys are dropped, as are values of the wrong type or out of range.
    """
    accepted: dict[str, Any] = {}

    for key, value in (raw or {}).items():
        validator = OPTION_VALIDATORS.get(key)
        if validator is None:
            logger.warning(f"Ignoring unsafe option: {key}")
            continue

        cleaned = validator(value)
        if cleaned is None:
            logger.debug(f"Dropping option {key}={value!r}")
            continue
        accepted[key] = cleaned

    return RenderOptions(**accepted)
