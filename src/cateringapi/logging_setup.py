"""Logging configuration for the CLI and the web app."""

from __future__ import annotations

import logging
import re

_BEARER_RE = re.compile(r"(Bearer\s+)\S+", re.IGNORECASE)
_SECRET_PAIR_RE = re.compile(
    r"""(['"]?(?:password|token|access_token|refresh_token|secret)['"]?\s*[:=]\s*)(['"]?)[^'",\s}]+\2""",
    re.IGNORECASE,
)


def redact(text: str) -> str:
    """Mask bearer tokens and password/token values in a log line."""
    text = _BEARER_RE.sub(r"\1[REDACTED]", text)
    return _SECRET_PAIR_RE.sub(r"\1\2[REDACTED]\2", text)


class RedactingFilter(logging.Filter):
    """Rewrite records so credentials never reach the log output."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        cleaned = redact(message)
        if cleaned != message:
            record.msg = cleaned
            record.args = None
        return True


def configure_logging(level: str = "INFO", verbose: bool = False):
    if verbose:
        logging.basicConfig(level=logging.DEBUG)
    else:
        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )

    root = logging.getLogger()
    for handler in root.handlers:
        if not any(isinstance(f, RedactingFilter) for f in handler.filters):
            handler.addFilter(RedactingFilter())
