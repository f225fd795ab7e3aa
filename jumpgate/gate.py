# -*- coding: utf-8 -*-

# JumpinAI Studio Gate
# Copyright (C) 2025 JumpinAI
#
# This program is free software: you can redistribute it and/or modify
# it under the terms of the GNU Affero General Public License as published by
# the Free Software Foundation, either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU Affero General Public License for more details.
#
# You should have received a copy of the GNU Affero General Public License
# along with this program. If not, see <https://www.gnu.org/licenses/>.

"""
Studio submission gate.

Runs the two checks in a fixed order:
  1. Input validation - local, fails fast, no network call
  2. Turnstile verification - only when the form carries a token

Both failure kinds are resolved into a GateDecision; nothing escapes to the
caller as an exception.
"""

from dataclasses import dataclass, field
from typing import Any, List, Optional

from loguru import logger

from jumpgate.gate_errors import FieldError, StudioFormValidationError
from jumpgate.turnstile import TurnstileVerifier
from jumpgate.validators import StudioFormData, validate_studio_form

# GateDecision.rejection values
REJECTED_VALIDATION = "validation"
REJECTED_VERIFICATION = "verification"


@dataclass
class GateDecision:
    """
    Outcome of running a submission through the gate.

    Attributes:
        accepted: True when the submission may proceed to generation
        form: Validated form (set whenever validation passed)
        errors: Field errors when validation failed
        rejection: REJECTED_VALIDATION, REJECTED_VERIFICATION or None
    """

    accepted: bool
    form: Optional[StudioFormData] = None
    errors: List[FieldError] = field(default_factory=list)
    rejection: Optional[str] = None


class StudioGate:
    """
    Validation-then-verification gate in front of Jump generation.

    Args:
        verifier: Turnstile verifier with its secret already injected
        require_token: Reject submissions that carry no token
    """

    def __init__(self, verifier: TurnstileVerifier, require_token: bool = False):
        self._verifier = verifier
        self._require_token = require_token

    async def check(self, payload: Any, remote_ip: Optional[str]) -> GateDecision:
        try:
            form = validate_studio_form(payload)
        except StudioFormValidationError as exc:
            logger.info(
                "[StudioGate] Rejected by validation: {}",
                ", ".join(exc.fields()),
            )
            return GateDecision(
                accepted=False, errors=exc.errors, rejection=REJECTED_VALIDATION
            )

        if not form.has_token():
            if self._require_token:
                logger.warning("[StudioGate] Rejected: missing Turnstile token")
                return GateDecision(
                    accepted=False, form=form, rejection=REJECTED_VERIFICATION
                )
            return GateDecision(accepted=True, form=form)

        if not await self._verifier.verify(form.turnstile_token, remote_ip):
            logger.info("[StudioGate] Rejected by bot check (ip={})", remote_ip)
            return GateDecision(
                accepted=False, form=form, rejection=REJECTED_VERIFICATION
            )

        return GateDecision(accepted=True, form=form)
