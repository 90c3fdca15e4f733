"""
Railway-Oriented Programming (ROP) for the greenpass decoder.

Explicit, composable, functional error handling — no exceptions in decode logic.

    from railway import Result, ErrorCode

    def require_text(value: object, what: str) -> Result[str]:
        if not isinstance(value, str):
            return Result.failure(ErrorCode.SCHEMA_VIOLATION, f"{what} must be text")
        return Result.success(value)

    result = (
        Result.success({"dob": "1998-02-26"})
        .flat_map(lambda d: require_text(d["dob"], "date of birth"))
        .map(str.strip)
    )
"""

from railway.result import Result, Success, Failure
from railway.failure import ErrorCode, FailureDescription
from railway.result_failures import ResultFailures, describe_type
from railway.assertions import ResultAssertions

__all__ = [
    "Result",
    "Success",
    "Failure",
    "ErrorCode",
    "FailureDescription",
    "ResultFailures",
    "describe_type",
    "ResultAssertions",
]

__version__ = "1.0.0"
