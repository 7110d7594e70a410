"""Tests for WeasyPrint argument construction."""

from pathlib import Path

from pdfrelay.modules.render.args import build_option_args, build_render_args
from pdfrelay.modules.render.options import validate_options
from pdfrelay.modules.render.schemas import RenderOptions


class TestBuildOptionArgs:
    """Flag emission rules."""

    def test_none_and_defaults_emit_nothing(self) -> None:
        assert build_option_args(None) == []
        assert build_option_args(RenderOptions()) == []
        assert build_option_args(validate_options({})) == []

    def test_tool_defaults_are_suppressed(self) -> None:
        opts = RenderOptions(media_type="print", jpeg_quality=80, dpi=96, timeout=30)
        assert build_option_args(opts) == []

    def test_jpeg_quality_80_from_string_is_omitted(self) -> None:
        opts = validate_options({"jpeg_quality": "80"})
        assert opts.jpeg_quality == 80
        assert "--jpeg-quality" not in build_option_args(opts)

    def test_out_of_range_dpi_emits_no_flag(self) -> None:
        assert build_option_args(validate_options({"dpi": 700})) == []

    def test_media_type_other_than_print(self) -> None:
        assert build_option_args(RenderOptions(media_type="screen")) == ["--media-type", "screen"]
        assert build_option_args(RenderOptions(media_type="")) == []

    def test_booleans_only_when_true(self) -> None:
        opts = RenderOptions(pdf_forms=True, srgb=False, quiet=True)
        assert build_option_args(opts) == ["--pdf-forms", "--quiet"]

    def test_cache_folder_is_emitted_when_set_server_side(self) -> None:
        opts = RenderOptions(cache_folder="/var/cache/weasyprint")
        assert build_option_args(opts) == ["--cache-folder", "/var/cache/weasyprint"]

    def test_all_flags_in_field_order(self) -> None:
        opts = RenderOptions(
            encoding="utf-8",
            media_type="screen",
            base_url="https://example.com/",
            pdf_identifier="id-1",
            pdf_variant="pdf/a-3b",
            pdf_version="1.7",
            pdf_forms=True,
            uncompressed_pdf=True,
            custom_metadata=True,
            presentational_hints=True,
            srgb=True,
            optimize_images=True,
            full_fonts=True,
            hinting=True,
            jpeg_quality=60,
            dpi=300,
            cache_folder="/cache",
            timeout=120,
            verbose=True,
            debug=True,
            quiet=True,
        )
        assert build_option_args(opts) == [
            "--encoding", "utf-8",
            "--media-type", "screen",
            "--base-url", "https://example.com/",
            "--pdf-identifier", "id-1",
            "--pdf-variant", "pdf/a-3b",
            "--pdf-version", "1.7",
            "--pdf-forms",
            "--uncompressed-pdf",
            "--custom-metadata",
            "--presentational-hints",
            "--srgb",
            "--optimize-images",
            "--full-fonts",
            "--hinting",
            "--jpeg-quality", "60",
            "--dpi", "300",
            "--cache-folder", "/cache",
            "--timeout", "120",
            "--verbose",
            "--debug",
            "--quiet",
        ]

    def test_deterministic(self) -> None:
        raw = {"timeout": "90", "pdf_variant": "pdf/ua-1", "dpi": 150.0, "verbose": True}
        first = build_option_args(validate_options(raw))
        second = build_option_args(validate_options(dict(reversed(list(raw.items())))))
        assert first == second == [
            "--pdf-variant", "pdf/ua-1", "--dpi", "150", "--timeout", "90", "--verbose",
        ]


class TestBuildRenderArgs:
    def test_positional_order(self) -> None:
        args = build_render_args(
            RenderOptions(dpi=300),
            Path("/tmp/in/index.html"),
            stylesheets=[Path("/tmp/in/a.css"), Path("/tmp/in/b.css")],
            attachments=["/tmp/in/data.csv"],
        )
        assert args == [
            "--dpi", "300",
            "--stylesheet", "/tmp/in/a.css",
            "--stylesheet", "/tmp/in/b.css",
            "--attachment", "/tmp/in/data.csv",
            "/tmp/in/index.html",
            "-",
        ]

    def test_url_source(self) -> None:
        assert build_render_args(None, "https://example.com/page") == ["https://example.com/page", "-"]
