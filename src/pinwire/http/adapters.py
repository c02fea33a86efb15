# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""In-process transports for tests and offline use."""

from __future__ import annotations

from ..errors import ConnectionFailedError
from .models import NetworkRequest, NetworkResponse
from .transport import Transport, ensure_success


class StubTransport(Transport):
    """Deterministic, programmable Transport for tests."""

    def __init__(self, responses: dict[str, NetworkResponse | BaseException] | None = None):
        self._responses: dict[str, NetworkResponse | BaseException] = dict(responses or {})
        self.requests: list[NetworkRequest] = []
        self.closed = False

    def add(self, url: str, response: NetworkResponse) -> None:
        self._responses[url] = response

    def add_error(self, url: str, error: BaseException) -> None:
        """Make requests to `url` fail with `error`, as a real transport would raise it."""
        self._responses[url] = error

    @property
    def call_count(self) -> int:
        return len(self.requests)

    async def perform(self, request: NetworkRequest) -> NetworkResponse:
        self.requests.append(request)
        outcome = self._responses.get(request.url)
        if outcome is None:
            raise ConnectionFailedError(f"No stubbed response configured for {request.url}")
        if isinstance(outcome, BaseException):
            raise outcome
        return ensure_success(outcome)

    async def aclose(self) -> None:
        self.closed = True


__all__ = ["StubTransport"]
