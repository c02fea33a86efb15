# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Typed decoding of response payloads."""

from __future__ import annotations

import dataclasses
import json
from collections.abc import Callable
from typing import Any, TypeVar

from .errors import DecodingError

T = TypeVar("T")

Decoder = Callable[[bytes], Any]

_CHECKED_TYPES = (dict, list, int, float, bool)


def _build(payload: Any, type_: type[T]) -> T:
    if dataclasses.is_dataclass(type_):
        if not isinstance(payload, dict):
            raise TypeError(f"expected a JSON object for {type_.__name__}, got {type(payload).__name__}")
        field_names = {f.name for f in dataclasses.fields(type_) if f.init}
        return type_(**{key: value for key, value in payload.items() if key in field_names})

    from_mapping = getattr(type_, "from_mapping", None)
    if callable(from_mapping):
        return from_mapping(payload)

    if type_ in _CHECKED_TYPES:
        # bool is an int subclass; do not let True pass as 1 or vice versa.
        if type_ is int and isinstance(payload, bool):
            raise TypeError("expected int, got bool")
        if type_ is float and isinstance(payload, int) and not isinstance(payload, bool):
            return float(payload)  # type: ignore[return-value]
        if not isinstance(payload, type_):
            raise TypeError(f"expected {type_.__name__}, got {type(payload).__name__}")
        return payload

    return type_(payload)  # type: ignore[call-arg]


def decode_payload(data: bytes, type_: type[T] | None = None, decoder: Decoder = json.loads) -> T | Any:
    """
    Decode `data` into `type_`.

    Dataclasses are built from a JSON object (unknown keys are ignored,
    missing required keys fail). Types exposing `from_mapping` use it.
    `bytes` and `str` skip the decoder. Every failure is a DecodingError.
    """
    if type_ is bytes:
        return data
    try:
        if type_ is str:
            return data.decode("utf-8")
        payload = decoder(data)
        if type_ is None:
            return payload
        return _build(payload, type_)
    except Exception as exc:  # noqa: BLE001
        raise DecodingError(exc) from exc


__all__ = ["Decoder", "decode_payload"]
