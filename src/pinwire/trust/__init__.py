# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Certificate pinning: configuration, evaluation and handshake gating."""

from .evaluator import PinValidator, TrustEvaluator
from .gate import CertificateValidationGate, ChallengeDisposition, ChallengeHandler, ChallengeResult
from .models import CertificateChain, DomainPins, PinningConfiguration, PinValidationResult, TrustDecision
from .spki import SpkiPinValidator, spki_pin

__all__ = [
    "CertificateChain",
    "CertificateValidationGate",
    "ChallengeDisposition",
    "ChallengeHandler",
    "ChallengeResult",
    "DomainPins",
    "PinValidationResult",
    "PinValidator",
    "PinningConfiguration",
    "SpkiPinValidator",
    "TrustDecision",
    "TrustEvaluator",
    "spki_pin",
]
