"""
Failure description — structured error information for the failure track.

Each decode stage reports failures with one ErrorCode from a closed
taxonomy, so callers can tell exactly which kind of problem stopped
a decode without parsing messages.

Enum + frozen dataclass gives us __eq__, __hash__ and __repr__ for free,
and Enum members are singleton-comparable with `is`.
"""

from __future__ import annotations

import traceback
from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from enum import Enum, unique
from typing import Optional


@unique
class ErrorCode(Enum):
    """
    Structured error codes for the failure track.

    Organized by the decode stage that produces them:
    - Text and compression: INVALID_BASE45, INFLATE_ERROR
    - CBOR structure: CBOR_TRUNCATED, CBOR_MALFORMED, CBOR_UNEXPECTED_TYPE
    - Claims and schema: MISSING_CLAIM, SCHEMA_VIOLATION
    - Outside the decoder (CLI only): INPUT_ERROR, CONFIGURATION_ERROR
    """

    INVALID_BASE45 = "INVALID_BASE45"
    """Character outside the Base45 alphabet, or a dangling/out-of-range group."""

    INFLATE_ERROR = "INFLATE_ERROR"
    """Compressed stream truncated, corrupt, or larger than the output cap."""

    CBOR_TRUNCATED = "CBOR_TRUNCATED"
    """An item claims more bytes than remain in the buffer."""

    CBOR_MALFORMED = "CBOR_MALFORMED"
    """Bytes that do not form a valid CBOR item."""

    CBOR_UNEXPECTED_TYPE = "CBOR_UNEXPECTED_TYPE"
    """Valid CBOR whose shape is not what the consuming stage requires."""

    MISSING_CLAIM = "MISSING_CLAIM"
    """A required CWT or HCERT claim is absent."""

    SCHEMA_VIOLATION = "SCHEMA_VIOLATION"
    """A claim or entry is present but has the wrong shape or lacks a field."""

    INPUT_ERROR = "INPUT_ERROR"
    """Input could not be read or is not text."""

    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    """Invalid settings."""

    @property
    def is_cbor_error(self) -> bool:
        return self in (
            ErrorCode.CBOR_TRUNCATED,
            ErrorCode.CBOR_MALFORMED,
            ErrorCode.CBOR_UNEXPECTED_TYPE,
        )


@dataclass(frozen=True, slots=True)
class FailureDescription:
    """
    Immutable failure descriptor carrying error code, message, optional exception,
    the name of the stage that failed, and a timestamp.

    >>> desc = FailureDescription(ErrorCode.MISSING_CLAIM, "issued-at (6) is missing")
    >>> desc.code
    <ErrorCode.MISSING_CLAIM: 'MISSING_CLAIM'>
    >>> desc.message
    'issued-at (6) is missing'
    """

    code: ErrorCode
    message: str
    exception: Optional[BaseException] = field(default=None, repr=False)
    stage: Optional[str] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC), repr=False)

    @staticmethod
    def create(
        code: ErrorCode,
        message: str,
        exception: Optional[BaseException] = None,
    ) -> FailureDescription:
        """Factory method for the common code + message (+ cause) case."""
        return FailureDescription(code=code, message=message, exception=exception)

    def at_stage(self, stage: str) -> FailureDescription:
        """
        Return a copy attributed to `stage`.

        A failure already attributed to an earlier stage keeps its stage.
        """
        if self.stage is not None:
            return self
        return replace(self, stage=stage)

    def full_stack_trace(self) -> str:
        """Full stack trace string including the message and exception chain."""
        if self.exception is None:
            return self.message
        tb = "".join(traceback.format_exception(type(self.exception), self.exception, self.exception.__traceback__))
        return f"{self.message}\n{tb}"
