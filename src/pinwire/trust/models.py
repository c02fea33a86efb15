# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Pinning configuration and trust decision types."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType

# DER-encoded certificates, leaf first.
CertificateChain = tuple[bytes, ...]


def normalize_hostname(hostname: str) -> str:
    return str(hostname or "").strip().rstrip(".").lower()


class TrustDecision(str, Enum):
    """
    Outcome of evaluating a chain against the pin set.

    DOMAIN_NOT_PINNED and DEFER_TO_DEFAULT_HANDLING lead to the same behaviour
    (system trust handling); they differ only in what gets logged.
    """

    ALLOW = "allow"
    BLOCK = "block"
    DOMAIN_NOT_PINNED = "domain_not_pinned"
    DEFER_TO_DEFAULT_HANDLING = "defer_to_default_handling"

    @property
    def uses_default_handling(self) -> bool:
        return self in (TrustDecision.DOMAIN_NOT_PINNED, TrustDecision.DEFER_TO_DEFAULT_HANDLING)


class PinValidationResult(str, Enum):
    """Raw answers a pin validator can give."""

    SHOULD_ALLOW_CONNECTION = "should_allow_connection"
    SHOULD_BLOCK_CONNECTION = "should_block_connection"
    DOMAIN_NOT_PINNED = "domain_not_pinned"


@dataclass(frozen=True)
class DomainPins:
    pins: tuple[str, ...] = ()
    enforce_validation: bool = True
    include_subdomains: bool = False

    def __post_init__(self) -> None:
        # Ordered set: keep first occurrence, drop blanks and repeats.
        cleaned = tuple(dict.fromkeys(str(pin).strip() for pin in self.pins if pin and str(pin).strip()))
        object.__setattr__(self, "pins", cleaned)


@dataclass(frozen=True)
class PinningConfiguration:
    pinned_domains: Mapping[str, DomainPins] = field(default_factory=dict)

    def __post_init__(self) -> None:
        normalized = {normalize_hostname(host): pins for host, pins in self.pinned_domains.items() if normalize_hostname(host)}
        object.__setattr__(self, "pinned_domains", MappingProxyType(normalized))

    @classmethod
    def from_pins(
        cls,
        pins_by_host: Mapping[str, Iterable[str]],
        *,
        enforce_validation: bool = True,
        include_subdomains: bool = False,
    ) -> PinningConfiguration:
        return cls(
            pinned_domains={
                host: DomainPins(
                    pins=tuple(pins),
                    enforce_validation=enforce_validation,
                    include_subdomains=include_subdomains,
                )
                for host, pins in pins_by_host.items()
            }
        )

    def policy_for(self, hostname: str) -> DomainPins | None:
        """Pins governing `hostname`: exact entry first, then subdomain-inclusive parents."""
        host = normalize_hostname(hostname)
        if not host:
            return None
        exact = self.pinned_domains.get(host)
        if exact is not None:
            return exact
        labels = host.split(".")
        for index in range(1, len(labels) - 1):
            parent = ".".join(labels[index:])
            policy = self.pinned_domains.get(parent)
            if policy is not None and policy.include_subdomains:
                return policy
        return None

    @property
    def is_empty(self) -> bool:
        return not self.pinned_domains


__all__ = [
    "CertificateChain",
    "DomainPins",
    "PinValidationResult",
    "PinningConfiguration",
    "TrustDecision",
    "normalize_hostname",
]
