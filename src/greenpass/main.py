"""
Command-line entry point — wires the collaborators around the decoder.

Composition root: loads settings, configures logging, and connects

  FileTextSource → strip prefix → decode() → HealthCertReportRenderer

This is the ONLY place where concrete adapters are instantiated and the
only place a decode failure is logged or printed.

Usage:
  greenpass [FILE]        FILE defaults to "-" (stdin)

Exit status: 0 on success, 1 on a decode/input failure, 2 on bad settings.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import TextIO

import structlog
from pydantic import ValidationError
from railway.failure import FailureDescription

from greenpass import __version__
from greenpass.adapters.text_source import STDIN, FileTextSource
from greenpass.config import AppSettings
from greenpass.domain.ports import ReportRenderer, TextSource
from greenpass.pipeline import decode
from greenpass.report import HealthCertReportRenderer

EXIT_OK = 0
EXIT_DECODE_FAILED = 1
EXIT_BAD_CONFIG = 2


def configure_structlog(log_level: str = "WARNING") -> None:
    """
    Configure structlog for human-readable console logging on stderr.

    stdout is reserved for the report, so log lines never mix with it.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.dev.set_exc_info,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, log_level.upper(), logging.WARNING)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=False,
    )


def strip_prefix(text: str, prefixes: list[str]) -> str:
    """Remove the first matching scheme prefix (e.g. "HC1:"), if any."""
    for prefix in prefixes:
        if text.startswith(prefix):
            return text[len(prefix):]
    return text


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="greenpass",
        description="Decode an EU Digital Green Certificate from its QR text. "
        "The signature is NOT verified.",
    )
    parser.add_argument(
        "file",
        nargs="?",
        default=STDIN,
        help="file holding the QR text; omit or use '-' for stdin",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def run(
    source: TextSource,
    renderer: ReportRenderer,
    settings: AppSettings,
    out: TextIO,
    err: TextIO,
) -> int:
    """Read, decode and render one certificate. Returns the exit status."""
    log = structlog.get_logger()

    def on_success(report: str) -> int:
        out.write(report)
        return EXIT_OK

    def on_failure(error: FailureDescription) -> int:
        log.info(
            "decode.failed",
            code=error.code.value,
            stage=error.stage,
            message=error.message,
        )
        where = f"{error.stage}: " if error.stage else ""
        err.write(f"error: {where}{error.message}\n")
        return EXIT_DECODE_FAILED

    return (
        source.read_text()
        .map(lambda text: strip_prefix(text.rstrip("\r\n"), settings.decoder.prefixes))
        .flat_map(lambda text: decode(text, settings.decoder.max_inflated_bytes))
        .map(renderer.render)
        .either(on_success, on_failure)
    )


def main(argv: list[str] | None = None) -> None:
    """Parse arguments, wire dependencies and exit with the run's status."""
    args = _build_parser().parse_args(argv)

    try:
        settings = AppSettings()
    except ValidationError as e:
        print(f"FATAL: Configuration error — {e}", file=sys.stderr)  # noqa: T201
        sys.exit(EXIT_BAD_CONFIG)

    configure_structlog(settings.log_level)
    structlog.get_logger().debug("app.starting", version=__version__, file=args.file)

    source = FileTextSource(args.file)
    renderer = HealthCertReportRenderer(settings.report.show_value_set_names)
    sys.exit(run(source, renderer, settings, sys.stdout, sys.stderr))


if __name__ == "__main__":
    main()
