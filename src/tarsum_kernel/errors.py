"""
Error codes and exception types for tarsum-kernel.

Error codes are part of the public contract: callers match on them to
decide whether a checksum is merely in an unknown format (recoverable)
or was produced under a rule this build does not know (hard failure).
"""

from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """
    TarSum error codes.
    """
    NOT_VERSION = "NOT_VERSION"
    VERSION_NOT_IMPLEMENTED = "VERSION_NOT_IMPLEMENTED"
    UNSUPPORTED_HASH = "UNSUPPORTED_HASH"


class TarSumError(Exception):
    """
    Base class for tarsum-kernel errors, with typed code and details.
    """
    code: ErrorCode

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class UnrecognizedVersionLabel(TarSumError, ValueError):
    """The string does not include a known TarSum version label."""
    code = ErrorCode.NOT_VERSION


class UnimplementedVersion(TarSumError, NotImplementedError):
    """The TarSum version has no registered header selector."""
    code = ErrorCode.VERSION_NOT_IMPLEMENTED


class UnsupportedHash(TarSumError, ValueError):
    code = ErrorCode.UNSUPPORTED_HASH
