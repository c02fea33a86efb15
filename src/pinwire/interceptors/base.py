# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Interceptor protocols.

Request and response interception are separate, one-method protocols. A
component that needs both (logging, for example) implements both.
Interceptor instances live as long as the client and may be invoked by
several exchanges at once.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from ..http.models import NetworkRequest, NetworkResponse


@runtime_checkable
class RequestInterceptor(Protocol):
    async def intercept_request(self, request: NetworkRequest) -> NetworkRequest: ...


@runtime_checkable
class ResponseInterceptor(Protocol):
    async def intercept_response(self, response: NetworkResponse, request: NetworkRequest) -> NetworkResponse: ...


__all__ = ["RequestInterceptor", "ResponseInterceptor"]
