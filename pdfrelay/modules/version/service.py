"""
Renderer version probe.

The WeasyPrint version is asked for once per process. Whatever the first probe
produces, a version string or an error, is what every later caller gets; a
failed probe is not retried until the process restarts.
"""

import subprocess
import threading

from pdfrelay.config import get_settings
from pdfrelay.shared.errors import VersionProbeError
from pdfrelay.shared.logging import get_logger

logger = get_logger(__name__)


class RendererVersionProbe:
    """Run `<binary> --version` at most once and cache the outcome."""

    def __init__(self, binary: str = "weasyprint", timeout: float = 30.0) -> None:
        self.binary = binary
        self.timeout = timeout
        self._lock = threading.Lock()
        self._done = False
        self._version: str | None = None
        self._error: str | None = None
        self._cause: BaseException | None = None

    def get(self) -> str:
        """
        Return the renderer's version string.

        Raises:
            VersionProbeError: the first probe failed (a fresh error each call)
        """
        with self._lock:
            if not self._done:
                self._probe()
                self._done = True

        if self._error is not None:
            raise VersionProbeError(self._error) from self._cause
        assert self._version is not None
        return self._version

    def _probe(self) -> None:
        try:
            output = subprocess.run(
                [self.binary, "--version"],
                capture_output=True,
                check=True,
                timeout=self.timeout,
            ).stdout
        except (OSError, subprocess.SubprocessError) as e:
            logger.error(f"weasyprint version probe failed: {e}")
            self._error = f"failed to get weasyprint version: {e}"
            self._cause = e
            return

        self._version = output.decode("utf-8", errors="replace").strip()
        logger.info(f"weasyprint version: {self._version}")


_probe: RendererVersionProbe | None = None
_probe_lock = threading.Lock()


def get_version_probe() -> RendererVersionProbe:
    """Process-wide probe, created on first use with the configured binary."""
    global _probe
    with _probe_lock:
        if _probe is None:
            _probe = RendererVersionProbe(binary=get_settings().weasyprint_bin)
        return _probe
