"""Render module routes."""

import io
import time
from collections.abc import Awaitable, Callable
from typing import BinaryIO

from fastapi import APIRouter, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.concurrency import run_in_threadpool
from starlette.types import Message, Receive

from pdfrelay.config import get_settings
from pdfrelay.modules.share.service import ShareService, resolve_share_service
from pdfrelay.shared.errors import BadRequestError, InternalError, RenderError, ShareError
from pdfrelay.shared.logging import get_logger

from .options import validate_options
from .schemas import HtmlRenderRequest
from .service import (
    DEMO_HTML,
    RenderService,
    content_disposition,
    normalize_filename,
    request_temp_dir,
    scoped_temp_file,
)

logger = get_logger(__name__)
router = APIRouter(prefix="/api/v1/pdf", tags=["render"])

RenderFn = Callable[[BinaryIO, float | None], Awaitable[None]]

BODY_TOO_LARGE = "Form parsing failed: request body too large"


def _limit_body(receive: Receive, limit: int) -> Receive:
    """Wrap an ASGI receive callable so the body it yields stops at limit bytes."""
    received = 0

    async def receive_limited() -> Message:
        nonlocal received
        message = await receive()
        if message["type"] == "http.request":
            received += len(message.get("body", b""))
            if received > limit:
                logger.warning(f"Upload exceeded {limit} bytes")
                raise BadRequestError(BODY_TOO_LARGE)
        return message

    return receive_limited


def _remaining(request: Request) -> float | None:
    """Seconds left before the request deadline set by the middleware."""
    deadline = getattr(request.state, "deadline", None)
    if deadline is None:
        return None
    return max(deadline - time.monotonic(), 0.0)


async def _render(render: RenderFn, destination: BinaryIO, timeout: float | None) -> None:
    try:
        await render(destination, timeout)
    except RenderError as e:
        logger.error(f"PDF generation failed: {e}")
        raise InternalError("PDF generation failed") from e


async def _deliver(
    request: Request,
    filename: str,
    share_service: str | None,
    render: RenderFn,
) -> Response:
    """Return the PDF itself, or upload it and return the share result."""
    timeout = _remaining(request)

    if share_service is None:
        buffer = io.BytesIO()
        await _render(render, buffer, timeout)
        return Response(
            content=buffer.getvalue(),
            media_type="application/pdf",
            headers={"Content-Disposition": content_disposition(filename)},
        )

    try:
        with scoped_temp_file(suffix=".pdf", prefix="pdfshare-") as pdf_path:
            with pdf_path.open("wb") as fh:
                await _render(render, fh, timeout)

            result = await run_in_threadpool(
                ShareService().upload, pdf_path, filename, share_service
            )
    except OSError as e:
        logger.error(f"Failed to create temporary PDF file: {e}")
        raise InternalError() from e
    except ShareError as e:
        logger.error(f"Failed to upload to sharing service: {e}")
        raise ShareError(f"Failed to upload to sharing service: {e.message}") from e

    return JSONResponse(content=result.model_dump(exclude_none=True))


@router.post("/render/file")
async def render_file(
    request: Request,
    filename: str | None = None,
    share_service: str | None = None,
) -> Response:
    """
    Render an uploaded HTML file.

    Multipart fields: html (required), css.* stylesheets, asset.* attachments
    and an optional options JSON object.
    """
    if not request.headers.get("content-type", "").startswith("multipart/form-data"):
        raise BadRequestError("multipart/form-data request required")

    limit = get_settings().max_upload_size
    content_length = request.headers.get("content-length", "")
    if content_length.isdigit() and int(content_length) > limit:
        raise BadRequestError(BODY_TOO_LARGE)

    # Chunked bodies carry no Content-Length; count what actually arrives.
    upload = Request(request.scope, _limit_body(request.receive, limit))

    service = RenderService()
    name = normalize_filename(filename)
    share = resolve_share_service(share_service)

    async with upload.form() as form:
        try:
            with request_temp_dir() as temp_dir:
                job = await run_in_threadpool(service.collect_upload, form, temp_dir)
                return await _deliver(
                    request,
                    name,
                    share,
                    lambda dst, timeout: service.render_files(dst, job, timeout=timeout),
                )
        except OSError as e:
            logger.error(f"Failed to store uploaded files: {e}")
            raise InternalError() from e


@router.post("/render/html")
async def render_html(
    request: Request,
    filename: str | None = None,
    share_service: str | None = None,
) -> Response:
    """
    Render an HTML string (or a URL) from a JSON body.

    share_service in the body wins over the query parameter.
    """
    try:
        body = await request.json()
    except ValueError as e:
        raise BadRequestError(f"JSON format error: {e}") from e

    try:
        payload = HtmlRenderRequest.model_validate(body)
    except ValidationError as e:
        first = e.errors()[0]
        location = ".".join(str(part) for part in first["loc"]) or "body"
        raise BadRequestError(f"JSON format error: {location}: {first['msg']}") from e

    service = RenderService()
    options = validate_options(payload.options)
    share = resolve_share_service(payload.share_service or share_service)

    return await _deliver(
        request,
        normalize_filename(filename),
        share,
        lambda dst, timeout: service.render_html(dst, payload.html, options, timeout=timeout),
    )


@router.get("/render/html")
async def render_demo(
    request: Request,
    filename: str | None = None,
    share_service: str | None = None,
) -> Response:
    """Render a built-in test document. Handy as a smoke test."""
    service = RenderService()
    options = validate_options(None)

    return await _deliver(
        request,
        normalize_filename(filename, default="test.pdf"),
        resolve_share_service(share_service),
        lambda dst, timeout: service.render_html(dst, DEMO_HTML, options, timeout=timeout),
    )
