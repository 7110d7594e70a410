"""Version module - build metadata and renderer version."""

from .router import router
from .service import RendererVersionProbe, get_version_probe

__all__ = ["router", "RendererVersionProbe", "get_version_probe"]
