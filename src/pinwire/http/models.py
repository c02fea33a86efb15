# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""HTTP request/response value types passed through the interceptor pipeline."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from enum import Enum
from types import MappingProxyType
from typing import Any

from .headers import header_value

Headers = Mapping[str, str]

DEFAULT_TIMEOUT = 60.0


def _freeze_headers(headers: Mapping[str, str] | None) -> Headers:
    return MappingProxyType(dict(headers or {}))


class HttpMethod(str, Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"


@dataclass(frozen=True)
class NetworkRequest:
    """
    Immutable request descriptor.

    Construction never validates anything; an unusable URL is reported when the
    request is sent. `body=None` means "no payload", which is not the same as
    an empty payload.
    """

    url: str
    method: HttpMethod = HttpMethod.GET
    headers: Headers = field(default_factory=dict)
    body: bytes | None = None
    timeout: float = DEFAULT_TIMEOUT

    def __post_init__(self) -> None:
        # Copy so later mutation of the caller's dict cannot leak in.
        object.__setattr__(self, "headers", _freeze_headers(self.headers))

    @classmethod
    def get(cls, url: str, headers: Headers | None = None, timeout: float = DEFAULT_TIMEOUT) -> NetworkRequest:
        return cls(url=url, method=HttpMethod.GET, headers=headers or {}, timeout=timeout)

    @classmethod
    def post(
        cls,
        url: str,
        headers: Headers | None = None,
        body: bytes | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> NetworkRequest:
        return cls(url=url, method=HttpMethod.POST, headers=headers or {}, body=body, timeout=timeout)

    @classmethod
    def put(
        cls,
        url: str,
        headers: Headers | None = None,
        body: bytes | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ) -> NetworkRequest:
        return cls(url=url, method=HttpMethod.PUT, headers=headers or {}, body=body, timeout=timeout)

    @classmethod
    def delete(cls, url: str, headers: Headers | None = None, timeout: float = DEFAULT_TIMEOUT) -> NetworkRequest:
        return cls(url=url, method=HttpMethod.DELETE, headers=headers or {}, timeout=timeout)

    def with_headers(self, headers: Headers) -> NetworkRequest:
        """Return a copy with `headers` merged over the current ones."""
        merged = dict(self.headers)
        merged.update(headers)
        return replace(self, headers=merged)

    def with_header(self, name: str, value: str) -> NetworkRequest:
        return self.with_headers({name: value})

    def with_url(self, url: str) -> NetworkRequest:
        return replace(self, url=url)

    def with_body(self, body: bytes | None) -> NetworkRequest:
        return replace(self, body=body)


@dataclass(frozen=True)
class NetworkResponse:
    """Immutable response descriptor; `data` is always bytes, possibly empty."""

    status_code: int
    data: bytes = b""
    headers: Headers = field(default_factory=dict)
    url: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "headers", _freeze_headers(self.headers))
        if self.data is None:
            object.__setattr__(self, "data", b"")

    @property
    def is_successful(self) -> bool:
        return 200 <= self.status_code <= 299

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.status_code <= 499

    @property
    def is_server_error(self) -> bool:
        return 500 <= self.status_code <= 599

    @property
    def text(self) -> str | None:
        try:
            return self.data.decode("utf-8")
        except UnicodeDecodeError:
            return None

    def json(self) -> Any | None:
        """Parsed JSON payload, or None when the body is not JSON."""
        try:
            return json.loads(self.data)
        except ValueError:
            return None

    def header(self, name: str, default: str = "") -> str:
        return header_value(self.headers, name, default)


__all__ = ["DEFAULT_TIMEOUT", "Headers", "HttpMethod", "NetworkRequest", "NetworkResponse"]
