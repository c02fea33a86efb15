# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""
pinwire package entrypoint.

pinwire is an asynchronous HTTP client layer that runs every exchange through
ordered request/response interceptor chains and checks server keys against
configured certificate pins once per TLS handshake. Transport behaviour is
abstracted behind an injectable Transport protocol, and requests, responses
and pinning configuration are modeled as frozen dataclasses.
"""

from .client import NetworkingClient
from .config import (
    Environment,
    NetworkingEnvironment,
    NetworkSettings,
    load_environment,
    load_network_settings,
)
from .errors import (
    CertificatePinningError,
    ConnectionFailedError,
    DecodingError,
    EncodingError,
    HTTPStatusError,
    InvalidURLError,
    NetworkError,
    NetworkErrorKind,
    RequestCancelledError,
    RequestTimeoutError,
    UnknownNetworkError,
)
from .http import (
    HttpMethod,
    HttpxTransport,
    NetworkRequest,
    NetworkResponse,
    StubTransport,
    Transport,
)
from .interceptors import (
    AuthenticationInterceptor,
    InterceptorPipeline,
    LoggingInterceptor,
    RequestInterceptor,
    ResponseInterceptor,
    UserAgentInterceptor,
)
from .log import setup_logging
from .trust import (
    CertificateValidationGate,
    PinningConfiguration,
    TrustDecision,
    TrustEvaluator,
)
from .version import __version__

__all__ = [
    "AuthenticationInterceptor",
    "CertificatePinningError",
    "CertificateValidationGate",
    "ConnectionFailedError",
    "DecodingError",
    "EncodingError",
    "Environment",
    "HTTPStatusError",
    "HttpMethod",
    "HttpxTransport",
    "InterceptorPipeline",
    "InvalidURLError",
    "LoggingInterceptor",
    "NetworkError",
    "NetworkErrorKind",
    "NetworkRequest",
    "NetworkResponse",
    "NetworkSettings",
    "NetworkingClient",
    "NetworkingEnvironment",
    "PinningConfiguration",
    "RequestCancelledError",
    "RequestInterceptor",
    "RequestTimeoutError",
    "ResponseInterceptor",
    "StubTransport",
    "Transport",
    "TrustDecision",
    "TrustEvaluator",
    "UnknownNetworkError",
    "UserAgentInterceptor",
    "load_environment",
    "load_network_settings",
    "setup_logging",
    "__version__",
]
