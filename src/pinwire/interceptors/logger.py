# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Network log sinks used by LoggingInterceptor."""

from __future__ import annotations

import logging
from typing import Protocol

from ..http.headers import redact_headers
from ..http.models import NetworkRequest, NetworkResponse

BODY_LOG_LIMIT = 4096


class NetworkLogger(Protocol):
    """Side-effect-only sink; implementations must not raise."""

    def log_request(self, request: NetworkRequest) -> None: ...

    def log_response(self, response: NetworkResponse, request: NetworkRequest) -> None: ...


def _body_for_log(data: bytes | None) -> str | None:
    if not data:
        return None
    text = data[:BODY_LOG_LIMIT].decode("utf-8", errors="replace")
    if len(data) > BODY_LOG_LIMIT:
        text += "...[truncated]"
    return text


class DefaultNetworkLogger:
    """Writes exchanges to the standard logging tree (summary at INFO, detail at DEBUG)."""

    def __init__(self, logger: logging.Logger | None = None):
        self._logger = logger or logging.getLogger("pinwire.network")

    def log_request(self, request: NetworkRequest) -> None:
        self._logger.info("Request: %s %s", request.method.value, request.url)
        if request.headers:
            self._logger.debug("Headers: %s", redact_headers(request.headers))
        body = _body_for_log(request.body)
        if body is not None:
            self._logger.debug("Body: %s", body)

    def log_response(self, response: NetworkResponse, request: NetworkRequest) -> None:
        outcome = "ok" if response.is_successful else "failed"
        self._logger.info("Response: %s (%s) for %s", response.status_code, outcome, request.url)
        if response.headers:
            self._logger.debug("Headers: %s", redact_headers(response.headers))
        body = _body_for_log(response.data)
        if body is not None:
            self._logger.debug("Body: %s", body)


class NoOpNetworkLogger:
    def log_request(self, request: NetworkRequest) -> None:
        return None

    def log_response(self, response: NetworkResponse, request: NetworkRequest) -> None:
        return None


__all__ = ["DefaultNetworkLogger", "NetworkLogger", "NoOpNetworkLogger"]
