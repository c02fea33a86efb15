# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Per-handshake challenge handling that bridges the transport to the TrustEvaluator."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from .evaluator import TrustEvaluator
from .models import CertificateChain, TrustDecision

logger = logging.getLogger(__name__)


class ChallengeDisposition(str, Enum):
    USE_CREDENTIAL = "use_credential"
    CANCEL = "cancel"
    PERFORM_DEFAULT_HANDLING = "perform_default_handling"


@dataclass(frozen=True)
class ChallengeResult:
    disposition: ChallengeDisposition
    credential: CertificateChain | None = None

    @classmethod
    def default_handling(cls) -> ChallengeResult:
        return cls(ChallengeDisposition.PERFORM_DEFAULT_HANDLING)

    @classmethod
    def cancel(cls) -> ChallengeResult:
        return cls(ChallengeDisposition.CANCEL)

    @classmethod
    def use_credential(cls, chain: CertificateChain) -> ChallengeResult:
        return cls(ChallengeDisposition.USE_CREDENTIAL, credential=chain)


# What a transport needs from us: (chain, hostname) -> result.
ChallengeHandler = Callable[[CertificateChain | None, str | None], ChallengeResult]


class CertificateValidationGate:
    """
    Challenge handler consulted once per TLS handshake.

    Missing inputs fail open (default handling); a pin mismatch on a pinned
    host fails closed (cancel). Holds no per-call state.
    """

    def __init__(self, evaluator: TrustEvaluator, pinning_enabled: bool = True):
        self._evaluator = evaluator
        self._pinning_enabled = pinning_enabled

    @property
    def pinning_enabled(self) -> bool:
        return self._pinning_enabled

    @property
    def evaluator(self) -> TrustEvaluator:
        return self._evaluator

    def __call__(self, chain: CertificateChain | None, hostname: str | None) -> ChallengeResult:
        if not self._pinning_enabled:
            return ChallengeResult.default_handling()
        if not chain or not hostname:
            return ChallengeResult.default_handling()

        decision = self._evaluator.evaluate(chain, hostname)
        if decision is TrustDecision.ALLOW:
            return ChallengeResult.use_credential(chain)
        if decision is TrustDecision.BLOCK:
            logger.warning("Rejecting connection to %s: certificate does not match configured pins", hostname)
            return ChallengeResult.cancel()
        return ChallengeResult.default_handling()


__all__ = [
    "CertificateValidationGate",
    "ChallengeDisposition",
    "ChallengeHandler",
    "ChallengeResult",
]
