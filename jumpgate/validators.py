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
Studio form validation.

Rejects malformed or abusive free-text input before it reaches any paid
generation step. Both text fields are trimmed first, then length-checked.

Errors are aggregated (fail-complete): every failing field is reported in a
single StudioFormValidationError. A valid field never produces an error.
"""

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, ValidationError
from pydantic import ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

from jumpgate.config import STUDIO_FIELD_MAX_CHARS, STUDIO_FIELD_MIN_CHARS
from jumpgate.gate_errors import FieldError, StudioFormValidationError

# Field label used in user-facing messages
_FIELD_LABELS: Dict[str, str] = {
    "goals": "Goals",
    "challenges": "Challenges",
}

# Field name used when the payload itself is not an object
FORM_ROOT_FIELD = "formData"

# ECMAScript WhiteSpace and LineTerminator set, as stripped by String.prototype.trim.
# Differs from str.strip(): includes U+FEFF, excludes U+001C..U+001F and U+0085.
_TRIM_CHARS = (
    "\t\n\v\f\r \xa0\u1680"
    "\u2000\u2001\u2002\u2003\u2004\u2005\u2006\u2007\u2008\u2009\u200a"
    "\u2028\u2029\u202f\u205f\u3000\ufeff"
)


class StudioFormData(BaseModel):
    """
    Validated Studio form submission.

    Attributes:
        goals: Trimmed goals text, 10..2000 characters
        challenges: Trimmed challenges text, 10..2000 characters
        turnstile_token: Optional challenge token (wire name "turnstileToken").
                         Blank or non-string tokens are treated as absent.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    goals: StrictStr
    challenges: StrictStr
    turnstile_token: Optional[str] = Field(default=None, alias="turnstileToken")

    @field_validator("goals", "challenges")
    @classmethod
    def _check_trimmed_length(cls, value: str, info: ValidationInfo) -> str:
        label = _FIELD_LABELS[info.field_name]
        trimmed = value.strip(_TRIM_CHARS)
        if len(trimmed) < STUDIO_FIELD_MIN_CHARS:
            raise PydanticCustomError(
                "string_too_short",
                "{label} must be at least {min_length} characters",
                {"label": label, "min_length": STUDIO_FIELD_MIN_CHARS},
            )
        if len(trimmed) > STUDIO_FIELD_MAX_CHARS:
            raise PydanticCustomError(
                "string_too_long",
                "{label} must be less than {max_length} characters",
                {"label": label, "max_length": STUDIO_FIELD_MAX_CHARS},
            )
        return trimmed

    @field_validator("turnstile_token", mode="before")
    @classmethod
    def _normalize_token(cls, value: Any) -> Optional[str]:
        if not isinstance(value, str):
            return None
        stripped = value.strip(_TRIM_CHARS)
        return stripped or None

    def has_token(self) -> bool:
        return bool(self.turnstile_token)

    def to_form_payload(self) -> Dict[str, str]:
        """Return the trimmed text fields in wire format, without the token."""
        return {"goals": self.goals, "challenges": self.challenges}


def _to_field_errors(exc: ValidationError) -> List[FieldError]:
    """Flatten pydantic errors into one FieldError per failing field."""
    errors: List[FieldError] = []
    seen = set()
    for error in exc.errors():
        loc = error.get("loc") or ()
        field_name = str(loc[0]) if loc else FORM_ROOT_FIELD
        if field_name in seen:
            continue
        seen.add(field_name)
        errors.append(FieldError(field=field_name, message=error.get("msg", "Invalid value")))
    return errors


def validate_studio_form(data: Any) -> StudioFormData:
    """
    Validates a raw Studio form payload.

    Args:
        data: Untrusted mapping with "goals", "challenges" and optionally
              "turnstileToken". Values may be of any type.

    Returns:
        StudioFormData with trimmed text fields

    Raises:
        StudioFormValidationError: If any field fails its type or length rule.
                                   All failing fields are reported.

    Example:
        >>> form = validate_studio_form({"goals": "  Open a second bakery  ", "challenges": "No marketing budget"})
        >>> form.goals
        'Open a second bakery'
    """
    try:
        return StudioFormData.model_validate(data)
    except ValidationError as exc:
        raise StudioFormValidationError(_to_field_errors(exc)) from exc
