# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Stock interceptors: logging, bearer authentication and User-Agent stamping."""

from __future__ import annotations

import inspect
from collections.abc import Awaitable, Callable

from ..http.models import NetworkRequest, NetworkResponse
from .logger import DefaultNetworkLogger, NetworkLogger

TokenProvider = Callable[[], "str | None | Awaitable[str | None]"]


class LoggingInterceptor:
    """Logs every request and successful response; never alters either."""

    def __init__(self, logger: NetworkLogger | None = None):
        self._logger = logger or DefaultNetworkLogger()

    async def intercept_request(self, request: NetworkRequest) -> NetworkRequest:
        self._logger.log_request(request)
        return request

    async def intercept_response(self, response: NetworkResponse, request: NetworkRequest) -> NetworkResponse:
        self._logger.log_response(response, request)
        return response


class AuthenticationInterceptor:
    """
    Adds `Authorization: Bearer <token>` when the provider yields a token.

    The provider may be a plain or async callable. When it returns None the
    request passes through untouched; when it raises, the error reaches the
    caller as is.
    """

    def __init__(self, token_provider: TokenProvider):
        self._token_provider = token_provider

    async def intercept_request(self, request: NetworkRequest) -> NetworkRequest:
        token = self._token_provider()
        if inspect.isawaitable(token):
            token = await token
        if not token:
            return request
        return request.with_header("Authorization", f"Bearer {token}")


class UserAgentInterceptor:
    def __init__(self, user_agent: str):
        self._user_agent = user_agent

    async def intercept_request(self, request: NetworkRequest) -> NetworkRequest:
        return request.with_header("User-Agent", self._user_agent)


__all__ = ["AuthenticationInterceptor", "LoggingInterceptor", "TokenProvider", "UserAgentInterceptor"]
