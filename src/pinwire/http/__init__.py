# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP transport exports."""

from .adapters import StubTransport
from .headers import header_value, redact_headers
from .models import Headers, HttpMethod, NetworkRequest, NetworkResponse
from .pinning import PinningHTTPTransport, PinningNetworkBackend
from .transport import HttpxTransport, Transport, create_default_transport, ensure_success

__all__ = [
    "Headers",
    "HttpMethod",
    "HttpxTransport",
    "NetworkRequest",
    "NetworkResponse",
    "PinningHTTPTransport",
    "PinningNetworkBackend",
    "StubTransport",
    "Transport",
    "create_default_transport",
    "ensure_success",
    "header_value",
    "redact_headers",
]
