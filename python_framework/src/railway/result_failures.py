"""
Convenience factory methods for the decode failure taxonomy.

Eliminates boilerplate for the most frequent error kinds.

Usage:
    from railway.result_failures import ResultFailures

    # Instead of:
    Result.failure(ErrorCode.SCHEMA_VIOLATION, "vaccination entry is missing 'dn'")

    # Write:
    ResultFailures.schema_violation("vaccination entry is missing 'dn'")
"""

from __future__ import annotations

from railway.failure import ErrorCode
from railway.result import Result


class ResultFailures:
    """Factory methods, one per ErrorCode produced by the decoder."""

    @staticmethod
    def invalid_base45(message: str, exception: BaseException | None = None) -> Result:
        """Character outside the alphabet or a disallowed group."""
        return Result.failure(ErrorCode.INVALID_BASE45, message, exception)

    @staticmethod
    def inflate_error(message: str, exception: BaseException | None = None) -> Result:
        """Corrupt, truncated, or oversized compressed stream."""
        return Result.failure(ErrorCode.INFLATE_ERROR, message, exception)

    @staticmethod
    def cbor_truncated(message: str, exception: BaseException | None = None) -> Result:
        """An item runs past the end of the buffer."""
        return Result.failure(ErrorCode.CBOR_TRUNCATED, message, exception)

    @staticmethod
    def cbor_malformed(message: str, exception: BaseException | None = None) -> Result:
        """Bytes that are not a valid CBOR item."""
        return Result.failure(ErrorCode.CBOR_MALFORMED, message, exception)

    @staticmethod
    def unexpected_type(what: str, expected: str, actual: object) -> Result:
        """A decoded value does not have the shape the caller requires."""
        return Result.failure(
            ErrorCode.CBOR_UNEXPECTED_TYPE,
            f"{what}: expected {expected}, got {describe_type(actual)}",
        )

    @staticmethod
    def missing_claim(message: str) -> Result:
        """A required claim is absent."""
        return Result.failure(ErrorCode.MISSING_CLAIM, message)

    @staticmethod
    def schema_violation(message: str, exception: BaseException | None = None) -> Result:
        """A present claim or entry has the wrong shape or lacks a field."""
        return Result.failure(ErrorCode.SCHEMA_VIOLATION, message, exception)


def describe_type(value: object) -> str:
    """Short, CBOR-flavoured name of a decoded value's type for messages."""
    match value:
        case None:
            return "null"
        case bool():
            return "boolean"
        case int():
            return "integer"
        case float():
            return "float"
        case bytes():
            return f"byte string ({len(value)} bytes)"
        case str():
            return "text string"
        case list() | tuple():
            return f"array ({len(value)} items)"
        case dict():
            return f"map ({len(value)} entries)"
        case _:
            return type(value).__name__
