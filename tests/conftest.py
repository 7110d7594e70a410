"""Shared test fixtures."""

import asyncio
from collections.abc import Iterator
from pathlib import Path
from typing import BinaryIO

import pytest
from fastapi.testclient import TestClient

from pdfrelay.app import build_app
from pdfrelay.config import Settings, init_settings, reset_settings

FAKE_PDF = b"%PDF-1.7\n% fake renderer output\n%%EOF\n"


class FakeRenderer:
    """
    Stand-in for run_renderer().

    Records every argument list, and the content of the files it names while
    they still exist (request temp files are gone once the response is sent).
    """

    def __init__(self, output: bytes = FAKE_PDF, error: Exception | None = None) -> None:
        self.output = output
        self.error = error
        self.calls: list[list[str]] = []
        self.binaries: list[str] = []
        self.timeouts: list[float | None] = []
        self.stylesheets: list[str] = []
        self.source_text: str | None = None
        self.delay = 0.0

    async def __call__(
        self,
        destination: BinaryIO,
        args: list[str],
        *,
        binary: str = "weasyprint",
        timeout: float | None = None,
    ) -> None:
        self.calls.append(list(args))
        self.binaries.append(binary)
        self.timeouts.append(timeout)

        for flag, value in zip(args, args[1:]):
            if flag == "--stylesheet":
                self.stylesheets.append(Path(value).read_text(encoding="utf-8"))

        source = Path(args[-2])
        if source.is_file():
            self.source_text = source.read_text(encoding="utf-8")

        if self.delay:
            await asyncio.sleep(self.delay)

        if self.error is not None:
            raise self.error
        destination.write(self.output)

    @property
    def last_args(self) -> list[str]:
        return self.calls[-1]


@pytest.fixture
def settings() -> Iterator[Settings]:
    """Fresh settings installed as the process-wide instance."""
    reset_settings()
    test_settings = Settings(request_timeout_seconds=30, weasyprint_bin="weasyprint")
    init_settings(test_settings)
    yield test_settings
    reset_settings()


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    app = build_app(settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def temp_dir(tmp_path: Path) -> Path:
    return tmp_path


@pytest.fixture
def fake_renderer(monkeypatch: pytest.MonkeyPatch) -> FakeRenderer:
    """Replace the WeasyPrint subprocess with FakeRenderer."""
    renderer = FakeRenderer()
    monkeypatch.setattr("pdfrelay.modules.render.service.run_renderer", renderer)
    return renderer
