"""
WeasyPrint subprocess execution.

The renderer writes the PDF to stdout, which is copied into the caller's sink.
stderr is inherited so renderer diagnostics land in the service's own stderr.
"""

import asyncio
from typing import BinaryIO

from pdfrelay.shared.errors import RenderError
from pdfrelay.shared.logging import get_logger

logger = get_logger(__name__)

CHUNK_SIZE = 64 * 1024


async def _copy_stdout(stream: asyncio.StreamReader, destination: BinaryIO) -> None:
    while True:
        chunk = await stream.read(CHUNK_SIZE)
        if not chunk:
            break
        destination.write(chunk)


def _kill(proc: asyncio.subprocess.Process) -> None:
    if proc.returncode is None:
        proc.kill()


async def _drain(proc: asyncio.subprocess.Process, destination: BinaryIO) -> int:
    assert proc.stdout is not None
    await _copy_stdout(proc.stdout, destination)
    return await proc.wait()


async def run_renderer(
    destination: BinaryIO,
    args: list[str],
    *,
    binary: str = "weasyprint",
    timeout: float | None = None,
) -> None:
    """
    Run the renderer once and stream its output into destination.

    Args:
        destination: Binary sink receiving the PDF bytes
        args: Renderer arguments (see build_render_args)
        binary: Renderer executable
        timeout: Seconds left before the request deadline; None waits forever

    Raises:
        RenderError: spawn failure, non-zero exit or deadline expiry
    """
    logger.info(f"Executing weasyprint command: {[binary, *args]}")

    try:
        proc = await asyncio.create_subprocess_exec(
            binary,
            *args,
            stdin=asyncio.subprocess.DEVNULL,
            stdout=asyncio.subprocess.PIPE,
        )
    except OSError as e:
        raise RenderError(f"weasyprint execution failed: {e}") from e

    try:
        returncode = await asyncio.wait_for(_drain(proc, destination), timeout)
    except asyncio.TimeoutError as e:
        _kill(proc)
        await proc.wait()
        raise RenderError(f"weasyprint execution failed: timed out after {timeout:.1f}s") from e
    except BaseException:
        # Cancelled by the request (client gone, middleware deadline)
        _kill(proc)
        raise

    if returncode != 0:
        raise RenderError(f"weasyprint execution failed: exit status {returncode}")
