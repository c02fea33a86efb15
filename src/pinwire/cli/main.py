# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""pinwire CLI: send one request through a pinned, intercepted client."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from ..client import NetworkingClient
from ..config import Environment, NetworkSettings, load_environment, load_network_settings
from ..errors import HTTPStatusError, NetworkError
from ..http.models import HttpMethod, NetworkResponse
from ..interceptors.builtin import LoggingInterceptor, UserAgentInterceptor
from ..log import setup_logging

CLI_TEXT_TRUNCATION_BYTES = 4096
_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Send one request through a certificate-pinned pinwire client")
    parser.add_argument("path", help="Path relative to the environment base URL, or an absolute http(s) URL")
    parser.add_argument(
        "--environment",
        choices=[member.value for member in Environment],
        default=None,
        help="Environment preset (defaults to PINWIRE_ENVIRONMENT, then production)",
    )
    parser.add_argument("--method", choices=_METHODS, default="GET")
    parser.add_argument(
        "-H",
        "--header",
        action="append",
        default=[],
        metavar="NAME:VALUE",
        help="Extra request header (repeatable)",
    )
    parser.add_argument("--data", default=None, help="Request body (sent as-is)")
    parser.add_argument(
        "--no-pinning",
        action="store_true",
        help="Disable certificate pinning and rely on standard CA validation only",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output a JSON summary instead of the raw body",
    )
    parser.add_argument("--log-level", default=None, help="Logging level (default from PINWIRE_LOG_LEVEL)")
    return parser


def parse_headers(values: list[str]) -> dict[str, str]:
    headers: dict[str, str] = {}
    for raw in values:
        name, sep, value = raw.partition(":")
        if not sep or not name.strip():
            raise ValueError(f"Invalid header {raw!r}; expected NAME:VALUE")
        headers[name.strip()] = value.strip()
    return headers


def _truncate_text_bytes(text: str, max_bytes: int) -> str:
    raw = text.encode("utf-8")
    if len(raw) <= max_bytes:
        return text
    suffix = "...[truncated]"
    keep = max_bytes - len(suffix.encode("utf-8"))
    if keep <= 0:
        return suffix.encode("utf-8")[:max_bytes].decode("utf-8", errors="ignore")
    return raw[:keep].decode("utf-8", errors="ignore") + suffix


def _summary(method: str, response: NetworkResponse) -> dict[str, Any]:
    body = response.json()
    if body is None:
        body = _truncate_text_bytes(response.data.decode("utf-8", errors="replace"), CLI_TEXT_TRUNCATION_BYTES)
    return {
        "method": method,
        "url": response.url,
        "status_code": response.status_code,
        "headers": dict(response.headers),
        "body": body,
    }


async def _run(args: argparse.Namespace, settings: NetworkSettings) -> NetworkResponse:
    environment = load_environment(args.environment)
    headers = parse_headers(args.header)
    body = args.data.encode("utf-8") if args.data is not None else None
    pinning = settings.certificate_pinning_enabled and not args.no_pinning

    async with NetworkingClient(
        environment,
        request_interceptors=[UserAgentInterceptor(settings.user_agent), LoggingInterceptor()],
        response_interceptors=[LoggingInterceptor()],
        certificate_pinning_enabled=pinning,
        settings=settings,
    ) as client:
        return await client.request(HttpMethod(args.method), args.path, body=body, headers=headers)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level)

    settings = load_network_settings()
    try:
        response = asyncio.run(_run(args, settings))
    except ValueError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2
    except HTTPStatusError as exc:
        print(f"error: {exc}", file=sys.stderr)
        if exc.body:
            print(_truncate_text_bytes(exc.body.decode("utf-8", errors="replace"), CLI_TEXT_TRUNCATION_BYTES), file=sys.stderr)
        return 1
    except NetworkError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    if args.json:
        json.dump(_summary(args.method, response), sys.stdout, indent=2, sort_keys=True)
        sys.stdout.write("\n")
    else:
        print(f"{response.status_code} {response.url or ''}".rstrip())
        print(_truncate_text_bytes(response.data.decode("utf-8", errors="replace"), CLI_TEXT_TRUNCATION_BYTES))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
