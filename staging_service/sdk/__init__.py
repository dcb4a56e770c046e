"""Staging Python SDK

Client for the staging HTTP API.
"""

from .client import StagingAPIError, StagingClient
from .types import StagedImage, StageImage, StageResult, StyleInfo, Variation

__all__ = [
    "StageImage",
    "StageResult",
    "StagedImage",
    "StagingAPIError",
    "StagingClient",
    "StyleInfo",
    "Variation",
]
