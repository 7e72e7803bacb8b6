"""CORS header policy applied to every dispatcher response."""

from __future__ import annotations

ALLOW_ORIGIN = "*"
ALLOW_METHODS = "GET, POST, OPTIONS"
ALLOW_HEADERS = "Content-Type, Authorization"


def cors_headers(preflight: bool = False) -> dict[str, str]:
    """Return a fresh CORS header mapping.

    Every response gets the allow-origin header. Preflight answers also
    advertise the allowed methods and request headers.
    """
    headers = {"Access-Control-Allow-Origin": ALLOW_ORIGIN}
    if preflight:
        headers["Access-Control-Allow-Methods"] = ALLOW_METHODS
        headers["Access-Control-Allow-Headers"] = ALLOW_HEADERS
    return headers
