"""
pdfrelay entrypoint - serves the API with uvicorn on the configured port.
"""

import uvicorn

from pdfrelay.app import build_app
from pdfrelay.config import get_settings
from pdfrelay.shared.logging import setup_logging


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level)

    print(
        f"pdfrelay listening on http://{settings.host}:{settings.port} "
        f"(renderer: {settings.weasyprint_bin}, "
        f"request timeout: {settings.request_timeout_seconds}s)"
    )

    uvicorn.run(
        build_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
