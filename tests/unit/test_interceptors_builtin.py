# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import logging

import pytest

from pinwire.http.models import NetworkRequest, NetworkResponse
from pinwire.interceptors import (
    AuthenticationInterceptor,
    DefaultNetworkLogger,
    LoggingInterceptor,
    NoOpNetworkLogger,
    UserAgentInterceptor,
)
from pinwire.interceptors.logger import BODY_LOG_LIMIT

URL = "https://api.example.com/items"


class RecordingLogger:
    def __init__(self):
        self.requests = []
        self.responses = []

    def log_request(self, request):
        self.requests.append(request)

    def log_response(self, response, request):
        self.responses.append((response, request))


@pytest.mark.asyncio
async def test_logging_interceptor_passes_values_through():
    sink = RecordingLogger()
    interceptor = LoggingInterceptor(sink)
    request = NetworkRequest.get(URL)
    response = NetworkResponse(status_code=200, data=b"ok")

    assert await interceptor.intercept_request(request) is request
    assert await interceptor.intercept_response(response, request) is response
    assert sink.requests == [request]
    assert sink.responses == [(response, request)]


@pytest.mark.asyncio
async def test_authentication_interceptor_sync_and_async_providers():
    request = NetworkRequest.get(URL, headers={"Accept": "application/json"})

    stamped = await AuthenticationInterceptor(lambda: "abc").intercept_request(request)
    assert stamped.headers["Authorization"] == "Bearer abc"
    assert stamped.headers["Accept"] == "application/json"
    assert "Authorization" not in request.headers

    async def provider():
        return "xyz"

    stamped = await AuthenticationInterceptor(provider).intercept_request(request)
    assert stamped.headers["Authorization"] == "Bearer xyz"


@pytest.mark.asyncio
async def test_authentication_interceptor_without_token_is_noop():
    request = NetworkRequest.get(URL)
    assert await AuthenticationInterceptor(lambda: None).intercept_request(request) is request


@pytest.mark.asyncio
async def test_authentication_interceptor_propagates_provider_errors():
    def provider():
        raise LookupError("token store unavailable")

    with pytest.raises(LookupError):
        await AuthenticationInterceptor(provider).intercept_request(NetworkRequest.get(URL))


@pytest.mark.asyncio
async def test_user_agent_interceptor_overrides_header():
    request = NetworkRequest.get(URL, headers={"User-Agent": "old"})
    stamped = await UserAgentInterceptor("pinwire-test/1.0").intercept_request(request)
    assert stamped.headers["User-Agent"] == "pinwire-test/1.0"


def test_default_logger_redacts_credentials(caplog):
    logger = DefaultNetworkLogger()
    request = NetworkRequest.post(URL, headers={"Authorization": "Bearer secret"}, body=b"x" * (BODY_LOG_LIMIT + 10))

    with caplog.at_level(logging.DEBUG, logger="pinwire.network"):
        logger.log_request(request)
        logger.log_response(NetworkResponse(status_code=201, data=b"done"), request)

    text = caplog.text
    assert "Request: POST https://api.example.com/items" in text
    assert "Response: 201 (ok)" in text
    assert "secret" not in text
    assert "...[truncated]" in text


def test_noop_logger_emits_nothing(caplog):
    with caplog.at_level(logging.DEBUG):
        NoOpNetworkLogger().log_request(NetworkRequest.get(URL))
        NoOpNetworkLogger().log_response(NetworkResponse(status_code=200), NetworkRequest.get(URL))
    assert caplog.records == []
