"""Secure logging configuration for collected-notes.

Provides logging setup with API token masking. The Authorization header
carries ``<email> <token>``; the token part never reaches log output.
"""

import logging
import re


class TokenMaskingFilter(logging.Filter):
    """Logging filter that masks API tokens.

    Token values are replaced with [MASKED] to prevent credential leakage
    in logs. The email part of the Authorization header is kept.
    """

    TOKEN_PATTERNS = [
        # Authorization: user@example.com TOKEN
        re.compile(r"(Authorization[\"']?\s*[=:]\s*[\"']?\S+@\S+\s+)([^\s\"',}]+)", re.IGNORECASE),
        # token=VALUE, "token": "VALUE"
        re.compile(r"([\"']?token[\"']?\s*[=:]\s*[\"']?)([^\s;,}\"']+)", re.IGNORECASE),
    ]

    def filter(self, record: logging.LogRecord) -> bool:
        """Mask token values in log records.

        Returns:
            Always True (record is always passed through, just modified)
        """
        if record.msg:
            record.msg = self._mask_tokens(str(record.msg))
        if record.args and isinstance(record.args, tuple):
            record.args = tuple(self._mask_tokens(arg) if isinstance(arg, str) else arg for arg in record.args)
        return True

    def _mask_tokens(self, text: str) -> str:
        result = text
        for pattern in self.TOKEN_PATTERNS:
            result = pattern.sub(lambda m: m.group(1) + "[MASKED]", result)
        return result


def setup_logging(level: int = logging.INFO, name: str | None = None) -> logging.Logger:
    """Set up logging with token masking.

    Args:
        level: Logging level (default: INFO)
        name: Logger name (default: "collected_notes")

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name or "collected_notes")
    logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)

    handler = logging.StreamHandler()
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    handler.addFilter(TokenMaskingFilter())

    logger.addHandler(handler)
    return logger


def get_logger(name: str | None = None) -> logging.Logger:
    """Get a logger under the collected_notes namespace.

    Args:
        name: Logger name suffix (e.g., "api" for "collected_notes.api")
    """
    if name:
        return logging.getLogger(f"collected_notes.{name}")
    return logging.getLogger("collected_notes")
