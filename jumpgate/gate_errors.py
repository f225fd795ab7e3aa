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
Gate error types and operator-facing descriptions.

Architecture:
- FieldError: One failing form field and its user-facing message
- StudioFormValidationError: Raised by the Input Validator, carries every FieldError
- TurnstileRejectionInfo: Structured description of a Turnstile rejection (logs only)
- describe_turnstile_error_codes(): Maps Turnstile error-codes to a description

End users never see TurnstileRejectionInfo. They get the generic
VERIFICATION_FAILED_MESSAGE from config.

Example:
    >>> info = describe_turnstile_error_codes(["timeout-or-duplicate"])
    >>> print(info.description)
    "Token expired or was already redeemed."
"""

from dataclasses import dataclass, field
from typing import Iterable, List


@dataclass
class FieldError:
    """
    A single failing form field.

    Attributes:
        field: Wire name of the field (e.g. "goals")
        message: Human-readable message safe to show in the form
    """

    field: str
    message: str


class StudioFormValidationError(Exception):
    """
    Raised when a Studio form submission fails validation.

    Always recoverable: the caller turns it into a field-level form error.
    """

    def __init__(self, errors: List[FieldError]):
        self.errors = list(errors)
        super().__init__(self.first_message)

    @property
    def first_message(self) -> str:
        if not self.errors:
            return "Invalid form data"
        return self.errors[0].message

    def fields(self) -> List[str]:
        return [error.field for error in self.errors]


@dataclass
class TurnstileRejectionInfo:
    """
    Operator-facing description of why Turnstile rejected a token.

    Attributes:
        error_codes: Raw error-codes from the siteverify response
        description: Short explanation for logs
        misconfigured: True when the cause is on our side (bad/missing secret,
                       malformed request), as opposed to a suspicious client
    """

    error_codes: List[str] = field(default_factory=list)
    description: str = ""
    misconfigured: bool = False


# Documented siteverify error codes
_ERROR_CODE_DESCRIPTIONS = {
    "missing-input-secret": ("Secret key was not sent.", True),
    "invalid-input-secret": ("Secret key is invalid or does not exist.", True),
    "missing-input-response": ("Token was not sent.", False),
    "invalid-input-response": ("Token is invalid or malformed.", False),
    "bad-request": ("Verification request was rejected as malformed.", True),
    "timeout-or-duplicate": ("Token expired or was already redeemed.", False),
    "internal-error": ("Turnstile reported an internal error.", False),
}


def describe_turnstile_error_codes(error_codes: Iterable[str]) -> TurnstileRejectionInfo:
    """
    Describes a Turnstile rejection for operational triage.

    Args:
        error_codes: Value of the "error-codes" field from siteverify.
                     Unknown codes are kept as-is.

    Returns:
        TurnstileRejectionInfo with a joined description. An empty list yields
        "Token rejected without error codes."
    """
    codes = [str(code) for code in (error_codes or [])]
    if not codes:
        return TurnstileRejectionInfo(
            error_codes=[], description="Token rejected without error codes."
        )

    descriptions: List[str] = []
    misconfigured = False
    for code in codes:
        known = _ERROR_CODE_DESCRIPTIONS.get(code)
        if known is None:
            descriptions.append(f"Unknown error code: {code}.")
            continue
        text, is_config_issue = known
        descriptions.append(text)
        misconfigured = misconfigured or is_config_issue

    return TurnstileRejectionInfo(
        error_codes=codes,
        description=" ".join(descriptions),
        misconfigured=misconfigured,
    )
