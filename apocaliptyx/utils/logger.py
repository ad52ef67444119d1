"""Secure logging utilities for the duplicate detector.

Log context is serialized to JSON and scrubbed of Supabase credentials,
request URLs and row identifiers before it reaches a handler.
"""
import json
import logging
import re
from typing import Any, Dict, Optional

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    datefmt='%Y-%m-%d %H:%M:%S'
)

logger = logging.getLogger('apocaliptyx')

# Ordered: JWTs before the generic token rule, which would otherwise eat their segments.
_REDACTIONS = [
    (re.compile(r'eyJ[a-zA-Z0-9_-]+\.[a-zA-Z0-9_-]+\.[a-zA-Z0-9_-]+'), '<jwt>'),
    (re.compile(r'sb_(?:publishable|secret)_[a-zA-Z0-9_-]{16,}'), '<api-key>'),
    (re.compile(r'[a-zA-Z0-9]{32,}'), '<token>'),
    (re.compile(r'https?://[^\s"]+'), '<url>'),
    (re.compile(r'[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}', re.IGNORECASE), '<uuid>'),
]


def configure_logging(level: str = "INFO", fmt: Optional[str] = None) -> None:
    """Apply level and format from configuration to the package logger."""
    logger.setLevel(level.upper())
    if fmt:
        formatter = logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S')
        for handler in logging.getLogger().handlers:
            handler.setFormatter(formatter)


def sanitize_text(text: str) -> str:
    """Mask API keys, JWTs, URLs and UUIDs in *text*."""
    if not text:
        return text
    for pattern, replacement in _REDACTIONS:
        text = pattern.sub(replacement, text)
    return text


def safe_json(obj: Any, max_length: int = 1000) -> str:
    """Serialize *obj* for a log line, sanitized and truncated to *max_length*."""
    try:
        rendered = json.dumps(obj, indent=2, ensure_ascii=False, default=str)
    except (TypeError, ValueError):
        return "<unable to serialize>"

    sanitized = sanitize_text(rendered)
    if len(sanitized) > max_length:
        sanitized = sanitized[:max_length] + "... [truncated]"
    return sanitized


def _log(level: int, message: str, context: Dict[str, Any]) -> None:
    if context:
        logger.log(level, f"{message} | Context: {safe_json(context)}")
    else:
        logger.log(level, message)


def log_info(message: str, **kwargs) -> None:
    _log(logging.INFO, message, kwargs)


def log_warning(message: str, **kwargs) -> None:
    _log(logging.WARNING, message, kwargs)


def log_error(message: str, **kwargs) -> None:
    _log(logging.ERROR, message, kwargs)


def log_debug(message: str, **kwargs) -> None:
    _log(logging.DEBUG, message, kwargs)


def log_api_response(operation: str, status_code: int) -> None:
    log_debug(f"API {operation} completed", status_code=status_code)


def log_duplicate_detection(score: int, existing_id: str, exact: bool = False, **kwargs) -> None:
    """Log duplicate detection results.

    Args:
        score: Similarity percentage of the best match
        existing_id: Id of the scenario the candidate duplicates
        exact: Whether the match came from the content hash
        **kwargs: Additional context
    """
    log_warning("Duplicate scenario detected",
               similarity=score,
               existing_scenario=existing_id,
               exact_match=exact,
               **kwargs)


def log_repository_failure(operation: str, error: BaseException, **kwargs) -> None:
    """Log a failed repository call that is being degraded instead of raised."""
    log_error(f"Scenario repository {operation} failed",
              error=str(error) or type(error).__name__,
              error_type=type(error).__name__,
              **kwargs)
