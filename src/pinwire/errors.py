# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Error taxonomy and exception helpers."""

from __future__ import annotations

import asyncio
import socket
import ssl
from collections.abc import Mapping
from enum import Enum

import httpx


class NetworkErrorKind(str, Enum):
    INVALID_URL = "INVALID_URL"
    DECODING_FAILED = "DECODING_FAILED"
    ENCODING_FAILED = "ENCODING_FAILED"
    HTTP_STATUS = "HTTP_STATUS"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    TIMEOUT = "TIMEOUT"
    CANCELLED = "CANCELLED"
    CERTIFICATE_PINNING_FAILED = "CERTIFICATE_PINNING_FAILED"
    UNKNOWN = "UNKNOWN"


class NetworkError(Exception):
    """Base class for every failure the client classifies."""

    kind: NetworkErrorKind = NetworkErrorKind.UNKNOWN

    def __init__(self, message: str | None = None, *, cause: BaseException | None = None):
        self.cause = cause
        super().__init__(message or error_kind_to_reason(self.kind))


class InvalidURLError(NetworkError):
    kind = NetworkErrorKind.INVALID_URL

    def __init__(self, url: str, *, cause: BaseException | None = None):
        self.url = url
        super().__init__(f"The URL is invalid: {url!r}", cause=cause)


class DecodingError(NetworkError):
    kind = NetworkErrorKind.DECODING_FAILED

    def __init__(self, cause: BaseException):
        super().__init__(f"Failed to decode response: {cause}", cause=cause)


class EncodingError(NetworkError):
    kind = NetworkErrorKind.ENCODING_FAILED

    def __init__(self, cause: BaseException):
        super().__init__(f"Failed to encode request: {cause}", cause=cause)


class HTTPStatusError(NetworkError):
    """The server answered, but with a status outside 200..299."""

    kind = NetworkErrorKind.HTTP_STATUS

    def __init__(
        self,
        status_code: int,
        body: bytes = b"",
        headers: Mapping[str, str] | None = None,
        url: str | None = None,
    ):
        self.status_code = status_code
        self.body = body
        self.headers = dict(headers or {})
        self.url = url
        super().__init__(f"HTTP error with status code: {status_code}")

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code <= 499

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code <= 599

    @property
    def is_unauthorized(self) -> bool:
        return self.status_code == 401

    @property
    def is_forbidden(self) -> bool:
        return self.status_code == 403

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


class ConnectionFailedError(NetworkError):
    kind = NetworkErrorKind.CONNECTION_ERROR

    def __init__(self, message: str | None = None, *, cause: BaseException | None = None):
        if message is None and cause is not None:
            message = f"Connection error: {cause}"
        super().__init__(message, cause=cause)


class RequestTimeoutError(NetworkError):
    kind = NetworkErrorKind.TIMEOUT


class RequestCancelledError(NetworkError, asyncio.CancelledError):
    """
    The exchange was cancelled.

    Also a CancelledError, so a cancelled task still ends up cancelled.
    """

    kind = NetworkErrorKind.CANCELLED


class CertificatePinningError(NetworkError):
    kind = NetworkErrorKind.CERTIFICATE_PINNING_FAILED

    def __init__(self, hostname: str | None = None):
        self.hostname = hostname
        message = error_kind_to_reason(self.kind)
        if hostname:
            message = f"{message} for {hostname}"
        super().__init__(message)


class UnknownNetworkError(NetworkError):
    kind = NetworkErrorKind.UNKNOWN

    def __init__(self, cause: BaseException):
        super().__init__(f"Unknown error: {cause}", cause=cause)


def classify_exception(exc: BaseException) -> NetworkError:
    """
    Map a transport-level exception (httpx, ssl, socket) onto the error taxonomy.

    Already-classified errors are returned unchanged.
    """
    if isinstance(exc, NetworkError):
        return exc

    if isinstance(exc, asyncio.CancelledError):
        return RequestCancelledError(cause=exc)

    if isinstance(exc, httpx.TimeoutException):
        return RequestTimeoutError(cause=exc)

    if isinstance(exc, (httpx.InvalidURL, httpx.UnsupportedProtocol)):
        request_url = ""
        try:
            request_url = str(exc.request.url)  # type: ignore[union-attr]
        except (AttributeError, RuntimeError):
            # InvalidURL carries no request; other errors raise when unset.
            pass
        return InvalidURLError(request_url, cause=exc)

    if isinstance(exc, httpx.TransportError):
        return ConnectionFailedError(cause=exc)

    if isinstance(exc, TimeoutError):
        return RequestTimeoutError(cause=exc)

    if isinstance(exc, (ssl.SSLError, ssl.CertificateError, socket.gaierror, socket.herror, ConnectionError)):
        return ConnectionFailedError(cause=exc)

    return UnknownNetworkError(exc)


def error_kind_to_reason(kind: NetworkErrorKind | None) -> str:
    """User-facing reason string."""
    mapping = {
        NetworkErrorKind.INVALID_URL: "The URL is invalid",
        NetworkErrorKind.DECODING_FAILED: "Failed to decode response",
        NetworkErrorKind.ENCODING_FAILED: "Failed to encode request",
        NetworkErrorKind.HTTP_STATUS: "The server returned an error status",
        NetworkErrorKind.CONNECTION_ERROR: "Network connectivity issue",
        NetworkErrorKind.TIMEOUT: "Request timed out",
        NetworkErrorKind.CANCELLED: "Request was cancelled",
        NetworkErrorKind.CERTIFICATE_PINNING_FAILED: "Certificate pinning validation failed",
        NetworkErrorKind.UNKNOWN: "Unknown network error",
        None: "",
    }
    return mapping.get(kind, "Request failed due to network error")


__all__ = [
    "CertificatePinningError",
    "ConnectionFailedError",
    "DecodingError",
    "EncodingError",
    "HTTPStatusError",
    "InvalidURLError",
    "NetworkError",
    "NetworkErrorKind",
    "RequestCancelledError",
    "RequestTimeoutError",
    "UnknownNetworkError",
    "classify_exception",
    "error_kind_to_reason",
]
