"""Application Use Cases"""

from .stage_images import StageImagesUseCase

__all__ = ["StageImagesUseCase"]
