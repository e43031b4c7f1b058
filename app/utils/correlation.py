"""Correlation identifiers used to trace a request across the proxy and the vendor."""

from __future__ import annotations

import uuid

CORRELATION_HEADER = "X-Correlation-ID"


def generate_correlation_id() -> str:
    """Return a fresh 32 character hex identifier."""
    return uuid.uuid4().hex


__all__ = ["CORRELATION_HEADER", "generate_correlation_id"]
