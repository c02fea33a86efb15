# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Transport abstraction and the httpx-backed implementation."""

from __future__ import annotations

import asyncio
import logging
from typing import Protocol

import httpcore
import httpx

from ..config import NetworkSettings, load_network_settings
from ..errors import HTTPStatusError, NetworkError, RequestCancelledError, classify_exception
from ..trust.gate import ChallengeHandler
from .models import NetworkRequest, NetworkResponse
from .pinning import PinningHTTPTransport

logger = logging.getLogger(__name__)


class Transport(Protocol):
    """
    Sends one request and returns a 2xx response.

    Every failure, including a non-2xx status, is raised as a NetworkError
    subclass, classified once at this boundary.
    """

    async def perform(self, request: NetworkRequest) -> NetworkResponse: ...

    async def aclose(self) -> None:  # pragma: no cover - optional for adapters
        ...


def ensure_success(response: NetworkResponse) -> NetworkResponse:
    """Raise HTTPStatusError unless the status is in 200..299."""
    if not response.is_successful:
        raise HTTPStatusError(
            response.status_code,
            body=response.data,
            headers=response.headers,
            url=response.url,
        )
    return response


class HttpxTransport(Transport):
    """
    Asynchronous httpx client wrapper with per-handshake certificate checks.

    A `challenge_handler` only applies to a client built here from `settings`;
    passing one together with an injected `client` is a ValueError.
    """

    def __init__(
        self,
        challenge_handler: ChallengeHandler | None = None,
        settings: NetworkSettings | None = None,
        client: httpx.AsyncClient | None = None,
        network_backend: httpcore.AsyncNetworkBackend | None = None,
    ):
        self.settings = settings or load_network_settings()
        if client is not None and challenge_handler is not None:
            raise ValueError("challenge_handler cannot be applied to an injected client; pass one or the other")
        if client is None:
            limits = httpx.Limits(
                max_connections=self.settings.max_connections,
                max_keepalive_connections=self.settings.max_keepalive_connections,
            )
            if challenge_handler is not None:
                transport: httpx.AsyncBaseTransport = PinningHTTPTransport(
                    challenge_handler,
                    verify=self.settings.verify_ssl,
                    limits=limits,
                    network_backend=network_backend,
                )
            else:
                transport = httpx.AsyncHTTPTransport(verify=self.settings.verify_ssl, limits=limits)
            client = httpx.AsyncClient(
                transport=transport,
                follow_redirects=self.settings.allow_redirects,
                timeout=self.settings.timeout,
            )
        self._client = client

    async def perform(self, request: NetworkRequest) -> NetworkResponse:
        try:
            resp = await self._client.request(
                request.method.value,
                request.url,
                headers=dict(request.headers),
                content=request.body,
                timeout=request.timeout,
            )
        except NetworkError as exc:
            logger.debug("%s %s failed: %s", request.method.value, request.url, exc)
            raise
        except asyncio.CancelledError as exc:
            raise RequestCancelledError(cause=exc) from exc
        except Exception as exc:  # noqa: BLE001
            error = classify_exception(exc)
            logger.debug("%s %s failed (%s): %s", request.method.value, request.url, error.kind.value, exc)
            raise error from exc

        response = NetworkResponse(
            status_code=resp.status_code,
            data=resp.content,
            headers=dict(resp.headers),
            url=str(resp.url),
        )
        return ensure_success(response)

    async def aclose(self) -> None:
        await self._client.aclose()


def create_default_transport(
    challenge_handler: ChallengeHandler | None = None,
    settings: NetworkSettings | None = None,
) -> Transport:
    """Factory for the default httpx-backed transport."""
    return HttpxTransport(challenge_handler, settings or load_network_settings())


__all__ = ["HttpxTransport", "Transport", "create_default_transport", "ensure_success"]
