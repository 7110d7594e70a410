"""Version module routes."""

from fastapi import APIRouter, Depends

from pdfrelay import __version__
from pdfrelay.config import Settings, get_settings

from .service import RendererVersionProbe, get_version_probe

router = APIRouter(prefix="/api/v1/pdf", tags=["version"])


@router.get("/version")
def get_version(
    settings: Settings = Depends(get_settings),
    probe: RendererVersionProbe = Depends(get_version_probe),
) -> dict[str, str]:
    """Build information plus the WeasyPrint version (probed once)."""
    weasyprint_version = probe.get()

    return {
        "apiVersion": __version__,
        "buildDate": settings.build_date,
        "builtBy": settings.built_by,
        # Key kept for existing clients; reports the Python build
        "builtWithGoVersion": settings.built_with,
        "commit": settings.commit,
        "repoUrl": settings.repo_url,
        "weasyprintVersion": weasyprint_version,
    }
