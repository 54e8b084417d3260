"""Error codes surfaced when a build code cannot be turned into a build.

Every failure inside the decode pipeline is raised as a ``BuildCodeError``
carrying one of the ``ErrorCode`` values below. The public operations in
``pob_advisor.service.operations`` translate it into the structured
``{"success": False, "error": {...}}`` payload.
"""

from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    INVALID_ENCODING = "InvalidEncoding"
    DECOMPRESSION_FAILED = "DecompressionFailed"
    MALFORMED_STRUCTURE = "MalformedStructure"
    UNSUPPORTED_VERSION = "UnsupportedVersion"
    MISSING_REQUIRED_FIELD = "MissingRequiredField"


class BuildCodeError(ValueError):
    """A build code (or a build payload) was rejected."""

    def __init__(self, code: ErrorCode, message: str, details: str = "") -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {
            "code": str(self.code),
            "message": self.message,
            "details": self.details,
        }
