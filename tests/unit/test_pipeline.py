# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

import pytest

from pinwire.errors import ConnectionFailedError, HTTPStatusError
from pinwire.http.adapters import StubTransport
from pinwire.http.models import NetworkRequest, NetworkResponse
from pinwire.interceptors import InterceptorPipeline, RequestInterceptor, ResponseInterceptor

URL = "https://api.example.com/items"


class TagRequest:
    def __init__(self, name, log):
        self.name = name
        self.log = log

    async def intercept_request(self, request):
        self.log.append(self.name)
        seen = request.headers.get("X-Chain", "")
        return request.with_header("X-Chain", f"{seen}{self.name}")


class TagResponse:
    def __init__(self, name, log):
        self.name = name
        self.log = log
        self.requests = []

    async def intercept_response(self, response, request):
        self.log.append(self.name)
        self.requests.append(request)
        seen = response.headers.get("X-Chain", "")
        return NetworkResponse(
            status_code=response.status_code,
            data=response.data,
            headers={**response.headers, "X-Chain": f"{seen}{self.name}"},
            url=response.url,
        )


class FailingRequest:
    async def intercept_request(self, request):
        raise PermissionError("no token")


class ReplaceResponse:
    async def intercept_response(self, response, request):
        return NetworkResponse(status_code=200, data=b"replaced")


def _transport():
    transport = StubTransport()
    transport.add(URL, NetworkResponse(status_code=200, data=b"ok", url=URL))
    return transport


def test_interceptors_satisfy_protocols():
    assert isinstance(TagRequest("a", []), RequestInterceptor)
    assert isinstance(TagResponse("a", []), ResponseInterceptor)
    assert not isinstance(TagRequest("a", []), ResponseInterceptor)


@pytest.mark.asyncio
async def test_chains_run_in_order_and_thread_values():
    log = []
    first, second = TagResponse("x", log), TagResponse("y", log)
    pipeline = InterceptorPipeline([TagRequest("a", log), TagRequest("b", log)], [first, second])
    transport = _transport()

    response = await pipeline.execute(NetworkRequest.get(URL), transport)

    assert log == ["a", "b", "x", "y"]
    assert transport.requests[0].headers["X-Chain"] == "ab"
    assert response.headers["X-Chain"] == "xy"
    assert response.data == b"ok"


@pytest.mark.asyncio
async def test_response_interceptors_see_the_original_request():
    log = []
    observer = TagResponse("x", log)
    pipeline = InterceptorPipeline([TagRequest("a", log)], [observer])
    original = NetworkRequest.get(URL)

    await pipeline.execute(original, _transport())

    assert observer.requests == [original]
    assert "X-Chain" not in observer.requests[0].headers


@pytest.mark.asyncio
async def test_empty_pipeline_passes_through():
    transport = _transport()
    request = NetworkRequest.get(URL)
    response = await InterceptorPipeline().execute(request, transport)
    assert transport.requests == [request]
    assert response.data == b"ok"


@pytest.mark.asyncio
async def test_response_interceptor_can_replace_response():
    pipeline = InterceptorPipeline(response_interceptors=[ReplaceResponse()])
    response = await pipeline.execute(NetworkRequest.get(URL), _transport())
    assert response.data == b"replaced"


@pytest.mark.asyncio
async def test_request_interceptor_failure_skips_transport():
    log = []
    transport = _transport()
    pipeline = InterceptorPipeline([FailingRequest(), TagRequest("never", log)], [TagResponse("x", log)])

    with pytest.raises(PermissionError):
        await pipeline.execute(NetworkRequest.get(URL), transport)

    assert transport.call_count == 0
    assert log == []


@pytest.mark.asyncio
async def test_transport_errors_skip_response_chain():
    log = []
    transport = StubTransport()
    transport.add(URL, NetworkResponse(status_code=404, data=b"nope", url=URL))
    transport.add_error("https://api.example.com/down", ConnectionFailedError("down"))
    pipeline = InterceptorPipeline(response_interceptors=[TagResponse("x", log)])

    with pytest.raises(HTTPStatusError) as excinfo:
        await pipeline.execute(NetworkRequest.get(URL), transport)
    assert excinfo.value.status_code == 404
    assert excinfo.value.body == b"nope"

    with pytest.raises(ConnectionFailedError):
        await pipeline.execute(NetworkRequest.get("https://api.example.com/down"), transport)

    assert log == []


@pytest.mark.asyncio
async def test_explicit_chain_overrides_configured_interceptors():
    log = []
    pipeline = InterceptorPipeline([TagRequest("configured", log)])
    result = await pipeline.run_request_chain(NetworkRequest.get(URL), chain=[TagRequest("override", log)])
    assert result.headers["X-Chain"] == "override"
    assert log == ["override"]
    assert await pipeline.run_request_chain(NetworkRequest.get(URL), chain=[]) == NetworkRequest.get(URL)
