# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Ordered request/response interception around a single transport call."""

from __future__ import annotations

from collections.abc import Sequence

from ..http.models import NetworkRequest, NetworkResponse
from ..http.transport import Transport
from .base import RequestInterceptor, ResponseInterceptor


class InterceptorPipeline:
    """
    Runs interceptor chains around one exchange.

    Both chains fold left in list order, each step receiving the previous
    step's output. Response steps receive the request as the caller built it,
    before any request interceptor ran. The first failure in either chain
    stops it and propagates unchanged. The response chain only sees
    successful responses: transport errors skip it entirely.
    """

    def __init__(
        self,
        request_interceptors: Sequence[RequestInterceptor] = (),
        response_interceptors: Sequence[ResponseInterceptor] = (),
    ):
        self._request_interceptors = tuple(request_interceptors)
        self._response_interceptors = tuple(response_interceptors)

    @property
    def request_interceptors(self) -> tuple[RequestInterceptor, ...]:
        return self._request_interceptors

    @property
    def response_interceptors(self) -> tuple[ResponseInterceptor, ...]:
        return self._response_interceptors

    async def run_request_chain(
        self,
        initial: NetworkRequest,
        chain: Sequence[RequestInterceptor] | None = None,
    ) -> NetworkRequest:
        request = initial
        for interceptor in self._request_interceptors if chain is None else chain:
            request = await interceptor.intercept_request(request)
        return request

    async def run_response_chain(
        self,
        initial: NetworkResponse,
        originating_request: NetworkRequest,
        chain: Sequence[ResponseInterceptor] | None = None,
    ) -> NetworkResponse:
        response = initial
        for interceptor in self._response_interceptors if chain is None else chain:
            response = await interceptor.intercept_response(response, originating_request)
        return response

    async def execute(self, request: NetworkRequest, transport: Transport) -> NetworkResponse:
        prepared = await self.run_request_chain(request)
        response = await transport.perform(prepared)
        return await self.run_response_chain(response, request)


__all__ = ["InterceptorPipeline"]
