# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Typed client facade over the interceptor pipeline and the pinned transport."""

from __future__ import annotations

import json as jsonlib
from collections.abc import Sequence
from typing import Any, TypeVar
from urllib.parse import urlsplit

from .config import NetworkingEnvironment, NetworkSettings, load_network_settings
from .decoding import Decoder, decode_payload
from .errors import EncodingError, InvalidURLError
from .http.models import DEFAULT_TIMEOUT, Headers, HttpMethod, NetworkRequest, NetworkResponse
from .http.transport import HttpxTransport, Transport
from .interceptors.base import RequestInterceptor, ResponseInterceptor
from .interceptors.pipeline import InterceptorPipeline
from .trust.evaluator import TrustEvaluator
from .trust.gate import CertificateValidationGate

T = TypeVar("T")

JSON_CONTENT_TYPE = "application/json"
_ALLOWED_SCHEMES = {"http", "https"}
_BODY_METHODS = {HttpMethod.POST, HttpMethod.PUT, HttpMethod.PATCH}


class NetworkingClient:
    """
    Async HTTP client for one NetworkingEnvironment.

    Construction wires everything up front: the trust evaluator is configured
    from the environment's pins, the validation gate wraps it, and the
    transport consults the gate on every new TLS connection. Interceptor lists
    are fixed here and never change afterwards. `certificate_pinning_enabled`
    defaults to the value in `settings`.
    """

    def __init__(
        self,
        environment: NetworkingEnvironment,
        *,
        request_interceptors: Sequence[RequestInterceptor] = (),
        response_interceptors: Sequence[ResponseInterceptor] = (),
        decoder: Decoder = jsonlib.loads,
        certificate_pinning_enabled: bool | None = None,
        settings: NetworkSettings | None = None,
        transport: Transport | None = None,
    ):
        self._environment = environment
        self._decoder = decoder
        self.settings = settings or load_network_settings()
        self._trust_evaluator = TrustEvaluator(environment.pinning_configuration())
        self._validation_gate = CertificateValidationGate(
            self._trust_evaluator,
            pinning_enabled=(
                self.settings.certificate_pinning_enabled
                if certificate_pinning_enabled is None
                else certificate_pinning_enabled
            ),
        )
        self._pipeline = InterceptorPipeline(request_interceptors, response_interceptors)
        self._transport = transport or HttpxTransport(self._validation_gate, self.settings)

    @property
    def environment(self) -> NetworkingEnvironment:
        return self._environment

    @property
    def trust_evaluator(self) -> TrustEvaluator:
        return self._trust_evaluator

    @property
    def validation_gate(self) -> CertificateValidationGate:
        return self._validation_gate

    @property
    def pipeline(self) -> InterceptorPipeline:
        return self._pipeline

    @property
    def transport(self) -> Transport:
        return self._transport

    async def __aenter__(self) -> NetworkingClient:
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001
        await self.aclose()

    async def aclose(self) -> None:
        await self._transport.aclose()

    def resolve_url(self, url: str) -> str:
        """
        Absolute http(s) URLs are used as given. Other `scheme://` URLs are
        rejected; anything else, `users:search` included, is a path appended to
        the environment's base URL.
        """
        raw = str(url or "").strip()
        if not raw or raw.startswith("//"):
            raise InvalidURLError(raw)
        try:
            parts = urlsplit(raw)
        except ValueError as exc:
            raise InvalidURLError(raw, cause=exc) from exc
        if parts.scheme.lower() in _ALLOWED_SCHEMES:
            if not parts.netloc:
                raise InvalidURLError(raw)
            return raw
        if parts.scheme and raw[len(parts.scheme) :].startswith("://"):
            raise InvalidURLError(raw)
        return self._environment.url_for(raw)

    async def perform(self, request: NetworkRequest) -> NetworkResponse:
        return await self._pipeline.execute(request, self._transport)

    def _build_request(
        self,
        method: HttpMethod,
        url: str,
        headers: Headers | None,
        body: bytes | None = None,
        json: Any = None,
    ) -> NetworkRequest:
        if body is not None and json is not None:
            raise ValueError("body and json are mutually exclusive")
        if json is not None:
            try:
                body = jsonlib.dumps(json).encode("utf-8")
            except (TypeError, ValueError) as exc:
                raise EncodingError(exc) from exc

        request_headers = dict(headers or {})
        # Exact-key check: a differently cased content-type does not count.
        if method in _BODY_METHODS and body is not None and "Content-Type" not in request_headers:
            request_headers["Content-Type"] = JSON_CONTENT_TYPE

        timeout = self.settings.timeout if self.settings.timeout > 0 else DEFAULT_TIMEOUT
        return NetworkRequest(
            url=self.resolve_url(url),
            method=method,
            headers=request_headers,
            body=body,
            timeout=timeout,
        )

    async def request(
        self,
        method: HttpMethod,
        url: str,
        body: bytes | None = None,
        headers: Headers | None = None,
        *,
        json: Any = None,
    ) -> NetworkResponse:
        """Build a request the way the verb helpers do and return the raw response."""
        return await self.perform(self._build_request(method, url, headers, body, json))

    async def _send_and_decode(self, request: NetworkRequest, type_: type[T] | None) -> T | Any:
        response = await self.perform(request)
        return decode_payload(response.data, type_, self._decoder)

    async def get(self, type_: type[T] | None, url: str, headers: Headers | None = None) -> T:
        request = self._build_request(HttpMethod.GET, url, headers)
        return await self._send_and_decode(request, type_)

    async def post(
        self,
        type_: type[T] | None,
        url: str,
        body: bytes | None = None,
        headers: Headers | None = None,
        *,
        json: Any = None,
    ) -> T:
        request = self._build_request(HttpMethod.POST, url, headers, body, json)
        return await self._send_and_decode(request, type_)

    async def put(
        self,
        type_: type[T] | None,
        url: str,
        body: bytes | None = None,
        headers: Headers | None = None,
        *,
        json: Any = None,
    ) -> T:
        request = self._build_request(HttpMethod.PUT, url, headers, body, json)
        return await self._send_and_decode(request, type_)

    async def patch(
        self,
        type_: type[T] | None,
        url: str,
        body: bytes | None = None,
        headers: Headers | None = None,
        *,
        json: Any = None,
    ) -> T:
        request = self._build_request(HttpMethod.PATCH, url, headers, body, json)
        return await self._send_and_decode(request, type_)

    async def delete(self, url: str, headers: Headers | None = None) -> NetworkResponse:
        request = self._build_request(HttpMethod.DELETE, url, headers)
        return await self.perform(request)


__all__ = ["JSON_CONTENT_TYPE", "NetworkingClient"]
