"""Domain Entities"""

from .errors import (
    AuthenticationError,
    ErrorKind,
    InternalError,
    StagingError,
    StorageError,
    UpstreamEmptyResponseError,
    UpstreamError,
    UpstreamMalformedResponseError,
    UpstreamNoImageError,
    UpstreamRejectedError,
    UpstreamTimeoutError,
    ValidationError,
)
from .staging import (
    BatchResult,
    CallerIdentity,
    Failure,
    GeneratedImage,
    GenerationRequest,
    GenerationTask,
    ImageResult,
    StyleDefinition,
    Success,
    TaskOutcome,
    UploadedImage,
    VariationResult,
)

__all__ = [
    "AuthenticationError",
    "BatchResult",
    "CallerIdentity",
    "ErrorKind",
    "Failure",
    "GeneratedImage",
    "GenerationRequest",
    "GenerationTask",
    "ImageResult",
    "InternalError",
    "StagingError",
    "StorageError",
    "StyleDefinition",
    "Success",
    "TaskOutcome",
    "UploadedImage",
    "UpstreamEmptyResponseError",
    "UpstreamError",
    "UpstreamMalformedResponseError",
    "UpstreamNoImageError",
    "UpstreamRejectedError",
    "UpstreamTimeoutError",
    "ValidationError",
    "VariationResult",
]
