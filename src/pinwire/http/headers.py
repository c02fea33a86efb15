# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Header lookup and redaction utilities.

HTTP header field names are case-insensitive (RFC 9110), but request
descriptors keep keys exactly as the caller stored them. Reads that need
HTTP semantics go through these helpers instead of plain dict access.
"""

from __future__ import annotations

from collections.abc import Mapping

REDACTED = "<redacted>"
SENSITIVE_HEADERS = frozenset({"authorization", "proxy-authorization", "cookie", "set-cookie"})


def header_value(headers: Mapping[str, str] | None, name: str, default: str = "") -> str:
    """
    Return a header value using case-insensitive key matching.

    Fast-paths common key casings before falling back to a full scan.
    """
    if not headers or not name:
        return default

    lower = name.lower()
    for key in (name, lower, lower.title()):
        if key in headers:
            value = headers.get(key)
            return default if value is None else str(value).strip()

    for key, value in headers.items():
        if key is None:
            continue
        if str(key).lower() == lower:
            return default if value is None else str(value).strip()

    return default


def redact_headers(headers: Mapping[str, str] | None) -> dict[str, str]:
    """Copy of `headers` with credential-bearing values masked, for logging."""
    if not headers:
        return {}
    return {key: (REDACTED if str(key).lower() in SENSITIVE_HEADERS else value) for key, value in headers.items()}


__all__ = ["REDACTED", "SENSITIVE_HEADERS", "header_value", "redact_headers"]
