"""Render module - HTML to PDF rendering with the WeasyPrint CLI."""

from .args import build_option_args, build_render_args
from .options import validate_options
from .router import router
from .schemas import HtmlRenderRequest, RenderJob, RenderOptions
from .service import RenderService

__all__ = [
    "router",
    "RenderService",
    "RenderOptions",
    "RenderJob",
    "HtmlRenderRequest",
    "validate_options",
    "build_option_args",
    "build_render_args",
]
