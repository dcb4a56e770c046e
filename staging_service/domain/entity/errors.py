"""Staging Errors - Domain Layer"""

from enum import Enum


class ErrorKind(str, Enum):
    """错误类型 (同时作为 API 中的 errorKind 值)"""

    VALIDATION = "ValidationError"
    UPSTREAM_EMPTY_RESPONSE = "UpstreamEmptyResponse"
    UPSTREAM_MALFORMED_RESPONSE = "UpstreamMalformedResponse"
    UPSTREAM_NO_IMAGE = "UpstreamNoImage"
    UPSTREAM_TIMEOUT = "UpstreamTimeout"
    UPSTREAM_REJECTED = "UpstreamRejected"
    TIMEOUT = "Timeout"
    STORAGE = "StorageError"
    INTERNAL = "InternalError"
    AUTHENTICATION = "AuthenticationError"


class StagingError(Exception):
    """Base class for every error the staging service raises on purpose."""

    kind: ErrorKind = ErrorKind.INTERNAL

    def __init__(self, message: str = ""):
        super().__init__(message or self.kind.value)
        self.message = message or self.kind.value


class ValidationError(StagingError):
    """请求无效 (在任何任务创建之前抛出)"""

    kind = ErrorKind.VALIDATION


class AuthenticationError(StagingError):
    """调用方身份无效"""

    kind = ErrorKind.AUTHENTICATION


class UpstreamError(StagingError):
    """上游生成服务错误 (仅影响单个任务)"""

    kind = ErrorKind.UPSTREAM_REJECTED


class UpstreamEmptyResponseError(UpstreamError):
    kind = ErrorKind.UPSTREAM_EMPTY_RESPONSE


class UpstreamMalformedResponseError(UpstreamError):
    kind = ErrorKind.UPSTREAM_MALFORMED_RESPONSE


class UpstreamNoImageError(UpstreamError):
    kind = ErrorKind.UPSTREAM_NO_IMAGE


class UpstreamTimeoutError(UpstreamError):
    kind = ErrorKind.UPSTREAM_TIMEOUT


class UpstreamRejectedError(UpstreamError):
    """The service answered with an error, or could not be reached.

    ``transient`` marks failures worth another attempt (rate limits, 5xx).
    """

    kind = ErrorKind.UPSTREAM_REJECTED

    def __init__(self, message: str = "", transient: bool = False):
        super().__init__(message)
        self.transient = transient


class StorageError(StagingError):
    """产物存储失败"""

    kind = ErrorKind.STORAGE


class InternalError(StagingError):
    kind = ErrorKind.INTERNAL
