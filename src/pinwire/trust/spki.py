# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""SPKI pin validator: matches a presented chain against base64 SHA-256 key pins."""

from __future__ import annotations

import base64
import hashlib
import logging

from cryptography import x509
from cryptography.exceptions import UnsupportedAlgorithm
from cryptography.hazmat.primitives import serialization

from .models import CertificateChain, PinningConfiguration, PinValidationResult

logger = logging.getLogger(__name__)


def spki_pin(der_certificate: bytes) -> str:
    """Base64 SHA-256 digest of the certificate's SubjectPublicKeyInfo."""
    cert = x509.load_der_x509_certificate(der_certificate)
    spki = cert.public_key().public_bytes(
        encoding=serialization.Encoding.DER,
        format=serialization.PublicFormat.SubjectPublicKeyInfo,
    )
    return base64.b64encode(hashlib.sha256(spki).digest()).decode("ascii")


def _chain_pins(chain: CertificateChain) -> list[str]:
    pins: list[str] = []
    for der in chain:
        try:
            pins.append(spki_pin(der))
        except (ValueError, UnsupportedAlgorithm):
            # Unparsable entries and unsupported key types cannot match a pin.
            logger.debug("Skipping unusable certificate in presented chain")
    return pins


class SpkiPinValidator:
    """Pin-matching engine configured once from a PinningConfiguration."""

    def __init__(self, configuration: PinningConfiguration):
        self._configuration = configuration

    def evaluate_trust(self, chain: CertificateChain, hostname: str) -> PinValidationResult:
        policy = self._configuration.policy_for(hostname)
        if policy is None or not policy.pins:
            return PinValidationResult.DOMAIN_NOT_PINNED

        expected = set(policy.pins)
        if any(pin in expected for pin in _chain_pins(chain)):
            return PinValidationResult.SHOULD_ALLOW_CONNECTION

        if policy.enforce_validation:
            return PinValidationResult.SHOULD_BLOCK_CONNECTION

        logger.warning("Certificate pin mismatch for %s ignored: pin enforcement is disabled for this environment", hostname)
        return PinValidationResult.SHOULD_ALLOW_CONNECTION


__all__ = ["SpkiPinValidator", "spki_pin"]
