"""
Text source adapter — reads the Base45 QR content from a file or stdin.

Adapter layer — implements the TextSource port. I/O and UTF-8 errors are
captured into INPUT_ERROR failures; nothing leaks as an exception.
"""

from __future__ import annotations

import sys
from pathlib import Path
from typing import BinaryIO

import structlog
from railway import ErrorCode
from railway.result import Result

log = structlog.get_logger()

STDIN = "-"


class FileTextSource:
    """
    Read QR text from a path, or from stdin when the path is "-".

    Implements the TextSource port.
    """

    def __init__(self, path: str, stdin: BinaryIO | None = None) -> None:
        self._path = path
        self._stdin = stdin

    def read_text(self) -> Result[str]:
        """
        Read and UTF-8-decode the whole input.

        Returns Result[str] on success.
        Returns Result.failure(INPUT_ERROR, ...) if the input cannot be read
        or is not valid UTF-8.
        """
        return Result.from_computation(
            self._read_bytes,
            ErrorCode.INPUT_ERROR,
            f"Cannot read input {self._describe()}",
        ).flat_map(self._to_text)

    def _read_bytes(self) -> bytes:
        if self._path == STDIN:
            stream = self._stdin if self._stdin is not None else sys.stdin.buffer
            data = stream.read()
        else:
            data = Path(self._path).read_bytes()
        log.debug("input.read", source=self._describe(), size=len(data))
        return data

    def _to_text(self, data: bytes) -> Result[str]:
        return Result.from_computation(
            lambda: data.decode("utf-8"),
            ErrorCode.INPUT_ERROR,
            f"Input {self._describe()} is not valid UTF-8",
        )

    def _describe(self) -> str:
        return "<stdin>" if self._path == STDIN else repr(self._path)
