"""
Logging configuration for the application.

``setup_logging`` configures the root logger once per process with a
console handler and, when ``LOG_FILE`` is set, a file handler.  Both
handlers carry ``SensitiveDataFilter`` so that reCAPTCHA secrets,
passwords and reset tokens that end up in URLs or messages (httpx logs
every request URL at INFO) are masked before they are written.
"""

import logging
import re
from pathlib import Path
from typing import Optional


class SensitiveDataFilter(logging.Filter):
    """Redact credentials from log records."""

    SENSITIVE_PATTERNS = [
        (re.compile(r'([?&]secret=)[^&\s"]+', re.IGNORECASE), r"\1[REDACTED]"),
        (re.compile(r'([?&]password=)[^&\s"]+', re.IGNORECASE), r"\1[REDACTED]"),
        (re.compile(r'([?&]token=)[^&\s"]+', re.IGNORECASE), r"\1[REDACTED]"),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        if record.msg:
            msg = str(record.msg)
            for pattern, replacement in self.SENSITIVE_PATTERNS:
                msg = pattern.sub(replacement, msg)
            record.msg = msg
        return True


def setup_logging(level: str = "INFO", logfile: Optional[str] = None) -> None:
    """Configure root logger.

    Parameters
    ----------
    level : str
        Logging level name (e.g. ``"DEBUG"``, ``"INFO"``).  Case
        insensitive; unknown names fall back to INFO.
    logfile : Optional[str]
        Path of an additional log file.  Resolved relative to the
        current working directory.
    """
    logger = logging.getLogger()
    if logger.handlers:
        return

    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    formatter = logging.Formatter(
        fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    redactor = SensitiveDataFilter()

    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if logfile:
        handlers.append(logging.FileHandler(Path(logfile).resolve(), encoding="utf-8"))
    for handler in handlers:
        handler.setFormatter(formatter)
        handler.addFilter(redactor)
        logger.addHandler(handler)

    # httpx logs each outgoing request (reCAPTCHA verification) at INFO.
    logging.getLogger("httpx").setLevel(logging.WARNING)
