# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Interceptor protocols, pipeline and stock interceptors."""

from .base import RequestInterceptor, ResponseInterceptor
from .builtin import AuthenticationInterceptor, LoggingInterceptor, UserAgentInterceptor
from .logger import DefaultNetworkLogger, NetworkLogger, NoOpNetworkLogger
from .pipeline import InterceptorPipeline

__all__ = [
    "AuthenticationInterceptor",
    "DefaultNetworkLogger",
    "InterceptorPipeline",
    "LoggingInterceptor",
    "NetworkLogger",
    "NoOpNetworkLogger",
    "RequestInterceptor",
    "ResponseInterceptor",
    "UserAgentInterceptor",
]
