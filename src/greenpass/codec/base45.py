"""
Base45 decoding stage — QR alphanumeric text → raw bytes.

Stage layer — uses the `base45` library for the group arithmetic and
adds the checks that give precise failure messages:

  - every character must belong to the 45-symbol alphabet
    (0-9, A-Z, space and $ % * + - . / :)
  - the text splits into 3-character groups (2 bytes each) plus at most
    one trailing 2-character group (1 byte); a dangling single character
    is invalid
  - a 3-character group must not exceed 65535, a 2-character group 255

Decoding is whole-input: any violation fails the entire string.
"""

from __future__ import annotations

import base45
import structlog
from railway.result import Result
from railway.result_failures import ResultFailures

log = structlog.get_logger()

ALPHABET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ $%*+-./:"

_ALPHABET_SET = frozenset(ALPHABET)


def _first_invalid_character(text: str) -> int | None:
    """Index of the first character outside the alphabet, or None."""
    for index, char in enumerate(text):
        if char not in _ALPHABET_SET:
            return index
    return None


def decode_base45(text: str) -> Result[bytes]:
    """
    Decode Base45 `text` into bytes.

    Returns Result[bytes] on success.
    Returns Result.failure(INVALID_BASE45, ...) when a character is outside
    the alphabet, the final group has length 1, or a group's value is out
    of range.
    """
    bad = _first_invalid_character(text)
    if bad is not None:
        return ResultFailures.invalid_base45(
            f"character {text[bad]!r} at position {bad} is not in the Base45 alphabet"
        )
    if len(text) % 3 == 1:
        return ResultFailures.invalid_base45(
            f"dangling single character at the end of {len(text)}-character input"
        )
    try:
        raw = base45.b45decode(text)
    except ValueError as e:
        return ResultFailures.invalid_base45("a Base45 group encodes a value out of range", e)

    log.debug("base45.decoded", chars=len(text), size=len(raw))
    return Result.success(raw)
