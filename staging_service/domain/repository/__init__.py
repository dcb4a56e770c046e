"""Domain Repository Interfaces"""

from .artifact_store import RESULTS, UPLOADS, ArtifactStore, extension_for
from .generation_client import GenerationClient, time_left
from .identity_resolver import IdentityResolver
from .style_catalog import StyleCatalog

__all__ = [
    "ArtifactStore",
    "GenerationClient",
    "IdentityResolver",
    "RESULTS",
    "StyleCatalog",
    "UPLOADS",
    "extension_for",
    "time_left",
]
