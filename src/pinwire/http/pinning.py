# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""httpx transport that consults a challenge handler once per TLS handshake.

The hook sits in httpcore's network backend: `start_tls` is only called when a
new connection is opened, so pooled connections are not re-evaluated per
request.
"""

from __future__ import annotations

import _ssl
import logging
import ssl
import typing

import httpcore
import httpx

from ..errors import CertificatePinningError
from ..trust.gate import ChallengeDisposition, ChallengeHandler
from ..trust.models import CertificateChain

logger = logging.getLogger(__name__)

DEFAULT_LIMITS = httpx.Limits(max_connections=100, max_keepalive_connections=20, keepalive_expiry=5.0)


def _der(cert: typing.Any) -> bytes:
    if isinstance(cert, (bytes, bytearray, memoryview)):
        return bytes(cert)
    return cert.public_bytes(_ssl.ENCODING_DER)


def peer_certificate_chain(ssl_object: typing.Any) -> CertificateChain | None:
    """
    DER chain presented by the peer, leaf first.

    The verified chain is preferred, then the chain as sent; with verification
    off (`CERT_NONE`) the chain as sent comes first. `SSLObject` only exposes
    both from 3.13; on 3.10-3.12 they are read from the underlying `_ssl`
    object. The bare leaf certificate is the last resort.
    """
    if ssl_object is None:
        return None
    accessors = ("get_verified_chain", "get_unverified_chain")
    context = getattr(ssl_object, "context", None)
    if getattr(context, "verify_mode", None) == ssl.CERT_NONE:
        accessors = accessors[::-1]
    sources = (ssl_object, getattr(ssl_object, "_sslobj", None))
    for accessor in accessors:
        for source in sources:
            getter = getattr(source, accessor, None)
            if getter is None:
                continue
            chain = getter()
            if chain:
                return tuple(_der(cert) for cert in chain)
    getpeercert = getattr(ssl_object, "getpeercert", None)
    if getpeercert is None:
        return None
    leaf = getpeercert(binary_form=True)
    return (leaf,) if leaf else None


class _PinningStream(httpcore.AsyncNetworkStream):
    def __init__(self, stream: httpcore.AsyncNetworkStream, challenge_handler: ChallengeHandler):
        self._stream = stream
        self._challenge_handler = challenge_handler

    async def read(self, max_bytes: int, timeout: float | None = None) -> bytes:
        return await self._stream.read(max_bytes, timeout=timeout)

    async def write(self, buffer: bytes, timeout: float | None = None) -> None:
        await self._stream.write(buffer, timeout=timeout)

    async def aclose(self) -> None:
        await self._stream.aclose()

    async def start_tls(
        self,
        ssl_context: ssl.SSLContext,
        server_hostname: str | None = None,
        timeout: float | None = None,
    ) -> httpcore.AsyncNetworkStream:
        tls_stream = await self._stream.start_tls(ssl_context, server_hostname=server_hostname, timeout=timeout)
        try:
            chain = peer_certificate_chain(tls_stream.get_extra_info("ssl_object"))
            result = self._challenge_handler(chain, server_hostname)
        except BaseException:
            await tls_stream.aclose()
            raise
        if result.disposition is ChallengeDisposition.CANCEL:
            await tls_stream.aclose()
            raise CertificatePinningError(server_hostname)
        return tls_stream

    def get_extra_info(self, info: str) -> typing.Any:
        return self._stream.get_extra_info(info)


class PinningNetworkBackend(httpcore.AsyncNetworkBackend):
    """Wraps another httpcore backend so every TLS upgrade passes the challenge handler."""

    def __init__(self, challenge_handler: ChallengeHandler, backend: httpcore.AsyncNetworkBackend | None = None):
        self._challenge_handler = challenge_handler
        self._backend = backend or httpcore.AnyIOBackend()

    async def connect_tcp(
        self,
        host: str,
        port: int,
        timeout: float | None = None,
        local_address: str | None = None,
        socket_options: typing.Iterable[typing.Any] | None = None,
    ) -> httpcore.AsyncNetworkStream:
        stream = await self._backend.connect_tcp(
            host,
            port,
            timeout=timeout,
            local_address=local_address,
            socket_options=socket_options,
        )
        return _PinningStream(stream, self._challenge_handler)

    async def connect_unix_socket(
        self,
        path: str,
        timeout: float | None = None,
        socket_options: typing.Iterable[typing.Any] | None = None,
    ) -> httpcore.AsyncNetworkStream:
        stream = await self._backend.connect_unix_socket(path, timeout=timeout, socket_options=socket_options)
        return _PinningStream(stream, self._challenge_handler)

    async def sleep(self, seconds: float) -> None:
        await self._backend.sleep(seconds)


class PinningHTTPTransport(httpx.AsyncHTTPTransport):
    """AsyncHTTPTransport whose connection pool runs on a PinningNetworkBackend."""

    def __init__(
        self,
        challenge_handler: ChallengeHandler,
        *,
        verify: bool = True,
        limits: httpx.Limits = DEFAULT_LIMITS,
        network_backend: httpcore.AsyncNetworkBackend | None = None,
    ):
        ssl_context = httpx.create_ssl_context(verify=verify)
        super().__init__(verify=ssl_context, limits=limits)
        # Swap the pool httpx built for one using our backend; request and
        # exception mapping stay with AsyncHTTPTransport.
        self._pool = httpcore.AsyncConnectionPool(
            ssl_context=ssl_context,
            max_connections=limits.max_connections,
            max_keepalive_connections=limits.max_keepalive_connections,
            keepalive_expiry=limits.keepalive_expiry,
            http1=True,
            http2=False,
            network_backend=PinningNetworkBackend(challenge_handler, network_backend),
        )


__all__ = ["DEFAULT_LIMITS", "PinningHTTPTransport", "PinningNetworkBackend", "peer_certificate_chain"]
