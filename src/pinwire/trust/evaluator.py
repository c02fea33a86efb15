# SPDX-FileCopyrightText: 2025 Theori Inc.
# SPDX-License-Identifier: AGPL-3.0-or-later

"""Trust evaluation over a statically configured pin set."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Protocol

from .models import CertificateChain, PinningConfiguration, PinValidationResult, TrustDecision
from .spki import SpkiPinValidator

logger = logging.getLogger(__name__)


class PinValidator(Protocol):
    """Minimal protocol for a pin-matching library."""

    def evaluate_trust(self, chain: CertificateChain, hostname: str) -> PinValidationResult: ...


PinValidatorFactory = Callable[[PinningConfiguration], PinValidator]

_DECISIONS: dict[PinValidationResult, TrustDecision] = {
    PinValidationResult.SHOULD_ALLOW_CONNECTION: TrustDecision.ALLOW,
    PinValidationResult.SHOULD_BLOCK_CONNECTION: TrustDecision.BLOCK,
    PinValidationResult.DOMAIN_NOT_PINNED: TrustDecision.DOMAIN_NOT_PINNED,
}


class TrustEvaluator:
    """
    Decides whether a presented chain may be trusted for a hostname.

    The validator is built once, here, from the configuration; there is no
    later initialisation step, so every evaluation sees a fully configured
    validator. After construction the evaluator is read-only and may be
    shared by any number of concurrent handshakes.
    """

    def __init__(
        self,
        configuration: PinningConfiguration,
        validator_factory: PinValidatorFactory = SpkiPinValidator,
    ):
        self._configuration = configuration
        self._validator = validator_factory(configuration)

    @property
    def configuration(self) -> PinningConfiguration:
        return self._configuration

    def evaluate(self, chain: CertificateChain, hostname: str) -> TrustDecision:
        result = self._validator.evaluate_trust(chain, hostname)
        try:
            decision = _DECISIONS.get(result, TrustDecision.DEFER_TO_DEFAULT_HANDLING)
        except TypeError:
            # Unhashable result from a foreign validator.
            decision = TrustDecision.DEFER_TO_DEFAULT_HANDLING
        logger.debug("Trust decision for %s: %s", hostname, decision.value)
        return decision


__all__ = ["PinValidator", "PinValidatorFactory", "TrustEvaluator"]
