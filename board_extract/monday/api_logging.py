"""Request/response capture for GraphQL traffic.

When enabled via BOARD_EXTRACT_LOG_API=1, each POST to the board API and its
response are written to separate files with incrementing numbers, which is
handy for debugging and for recording test fixtures.

Files are saved to ~/.board-extract/api_logs/ by default, or to
BOARD_EXTRACT_LOG_API_DIR.

File naming:
- Request:  {sequence:04d}_request.json
- Response: {sequence:04d}_response.json
"""

import json
import logging
import os
import threading
from datetime import UTC, datetime
from pathlib import Path

import httpx

logger = logging.getLogger(__name__)

_sequence_lock = threading.Lock()
_sequence_counter = 0

SENSITIVE_HEADERS = {"authorization"}


def _get_next_sequence() -> int:
    global _sequence_counter
    with _sequence_lock:
        _sequence_counter += 1
        return _sequence_counter


def _reset_sequence() -> None:
    """Reset sequence counter (for testing)."""
    global _sequence_counter
    with _sequence_lock:
        _sequence_counter = 0


def is_api_logging_enabled() -> bool:
    """True if BOARD_EXTRACT_LOG_API is "1", "true", "yes" or "on"."""
    value = os.environ.get("BOARD_EXTRACT_LOG_API", "").lower()
    return value in ("1", "true", "yes", "on")


def get_log_directory() -> Path:
    """Directory for captured traffic (default: ~/.board-extract/api_logs/)."""
    custom_dir = os.environ.get("BOARD_EXTRACT_LOG_API_DIR")
    if custom_dir:
        return Path(custom_dir)

    return Path.home() / ".board-extract" / "api_logs"


def _sanitize_headers(headers: httpx.Headers | dict) -> dict:
    """Mask credential headers.

    monday.com tokens are sent without a scheme, so a bare value is fully
    redacted while "Scheme token" keeps the scheme visible.
    """
    result = dict(headers)

    for key in list(result.keys()):
        if key.lower() in SENSITIVE_HEADERS:
            value = result[key]
            if isinstance(value, str):
                parts = value.split(" ", 1)
                if len(parts) == 2:
                    result[key] = f"{parts[0]} [REDACTED]"
                else:
                    result[key] = "[REDACTED]"
    return result


def _write_entry(seq: int, kind: str, data: dict) -> Path:
    log_dir = get_log_directory()
    log_dir.mkdir(parents=True, exist_ok=True)

    filepath = log_dir / f"{seq:04d}_{kind}.json"
    with open(filepath, "w") as f:
        json.dump(data, f, indent=2, default=str)
    return filepath


def _timestamp() -> str:
    return datetime.now(UTC).isoformat().replace("+00:00", "Z")


def log_request(request: httpx.Request) -> None:
    """Write a request to the log directory if capture is enabled."""
    if not is_api_logging_enabled():
        return

    try:
        seq = _get_next_sequence()
        # Correlates the response with this request
        request.extensions["log_sequence"] = seq

        body = None
        if request.content:
            try:
                body = json.loads(request.content)
            except (json.JSONDecodeError, UnicodeDecodeError):
                body = request.content.decode("utf-8", errors="replace")

        filepath = _write_entry(
            seq,
            "request",
            {
                "sequence": seq,
                "timestamp": _timestamp(),
                "method": request.method,
                "url": str(request.url),
                "headers": _sanitize_headers(request.headers),
                "body": body,
            },
        )
        logger.debug("Logged API request to %s", filepath)

    except Exception as e:
        logger.warning("Failed to log API request: %s", e)


def log_response(response: httpx.Response) -> None:
    """Write a response to the log directory if capture is enabled."""
    if not is_api_logging_enabled():
        return

    try:
        seq = response.request.extensions.get("log_sequence")
        if seq is None:
            seq = _get_next_sequence()

        try:
            body = response.json()
        except (json.JSONDecodeError, ValueError):
            body = response.text

        filepath = _write_entry(
            seq,
            "response",
            {
                "sequence": seq,
                "timestamp": _timestamp(),
                "status_code": response.status_code,
                "url": str(response.url),
                "headers": dict(response.headers),
                "body": body,
            },
        )
        logger.debug("Logged API response to %s", filepath)

    except Exception as e:
        logger.warning("Failed to log API response: %s", e)


class LoggingTransport(httpx.BaseTransport):
    """Transport wrapper that captures every request and response."""

    def __init__(self, transport: httpx.BaseTransport | None = None):
        self._transport = transport or httpx.HTTPTransport()

    def handle_request(self, request: httpx.Request) -> httpx.Response:
        log_request(request)

        response = self._transport.handle_request(request)

        # httpx streams by default; the body must be read before logging it
        response.read()
        log_response(response)

        return response

    def close(self) -> None:
        self._transport.close()


def create_logging_client(
    headers: dict | None = None,
    timeout: float = 30.0,
    transport: httpx.BaseTransport | None = None,
    **kwargs,
) -> httpx.Client:
    """Create an httpx Client, wrapping its transport when capture is enabled.

    Args:
        headers: Default request headers
        timeout: Request timeout in seconds
        transport: Underlying transport (tests pass an httpx.MockTransport)
        **kwargs: Additional arguments passed to httpx.Client

    Returns:
        Configured httpx.Client
    """
    if is_api_logging_enabled():
        transport = LoggingTransport(transport)

    if transport is not None:
        kwargs["transport"] = transport

    return httpx.Client(headers=headers, timeout=timeout, **kwargs)


def clear_logs() -> int:
    """Delete all captured files and return how many were removed."""
    log_dir = get_log_directory()
    if not log_dir.exists():
        return 0

    count = 0
    for f in log_dir.glob("*.json"):
        try:
            f.unlink()
            count += 1
        except OSError as e:
            logger.warning("Failed to delete %s: %s", f, e)

    _reset_sequence()
    return count
