# -*- coding: utf-8 -*-

"""
Unit tests for Studio form validation.
Tests validate_studio_form() and the StudioFormData model.
"""

import pytest

from jumpgate.gate_errors import StudioFormValidationError
from jumpgate.validators import StudioFormData, validate_studio_form

GOALS_TOO_SHORT = "Goals must be at least 10 characters"
GOALS_TOO_LONG = "Goals must be less than 2000 characters"
CHALLENGES_TOO_SHORT = "Challenges must be at least 10 characters"
CHALLENGES_TOO_LONG = "Challenges must be less than 2000 characters"


def _errors_by_field(exc_info) -> dict:
    return {error.field: error.message for error in exc_info.value.errors}


class TestValidStudioForm:
    """Tests for accepted submissions."""

    def test_bakery_example_passes(self, valid_goals, valid_challenges):
        """
        What it does: Validates a realistic submission.
        Purpose: Ensure ordinary input is released to generation.
        """
        print("Action: Validating bakery example...")
        form = validate_studio_form({"goals": valid_goals, "challenges": valid_challenges})

        print(f"Result: {form}")
        assert form.goals == valid_goals
        assert form.challenges == valid_challenges
        assert form.turnstile_token is None

    def test_fields_are_trimmed(self, valid_challenges):
        """
        What it does: Verifies leading/trailing whitespace is removed.
        Purpose: Downstream prompts receive trimmed text.
        """
        form = validate_studio_form(
            {"goals": "\n\t  Open a second location  \n", "challenges": f"  {valid_challenges}  "}
        )

        assert form.goals == "Open a second location"
        assert form.challenges == valid_challenges

    def test_extra_keys_are_ignored(self, valid_form):
        """
        What it does: Verifies unrelated keys (currentRole, industry...) are dropped.
        Purpose: The full Studio form carries many fields that are not gated here.
        """
        payload = dict(valid_form, currentRole="Owner", industry="Food")

        form = validate_studio_form(payload)

        assert form.to_form_payload() == valid_form

    def test_token_is_read_from_wire_name(self, valid_form):
        """
        What it does: Verifies turnstileToken is mapped to turnstile_token.
        Purpose: The frontend sends camelCase.
        """
        form = validate_studio_form(dict(valid_form, turnstileToken="  tok-123  "))

        assert form.turnstile_token == "tok-123"
        assert form.has_token() is True

    @pytest.mark.parametrize("token", ["", "   ", None, 42, ["tok"]])
    def test_blank_or_non_string_token_is_absent(self, valid_form, token):
        """
        What it does: Verifies unusable tokens are treated as missing.
        Purpose: Token presence decides whether the bot check runs.
        """
        form = validate_studio_form(dict(valid_form, turnstileToken=token))

        assert form.turnstile_token is None
        assert form.has_token() is False

    def test_validation_is_idempotent(self, valid_form):
        """
        What it does: Validates the same input twice.
        Purpose: Validation is a pure function without hidden state.
        """
        first = validate_studio_form(valid_form)
        second = validate_studio_form(valid_form)

        assert first == second
        assert validate_studio_form(first.to_form_payload()) == first


class TestLengthBoundaries:
    """Boundary tests for the 10..2000 trimmed-length window."""

    @pytest.mark.parametrize("length", [10, 11, 1999, 2000])
    def test_goals_within_bounds_pass(self, valid_challenges, length):
        """
        What it does: Checks accepted goal lengths at and near the bounds.
        Purpose: 10 and 2000 are inclusive.
        """
        form = validate_studio_form({"goals": "g" * length, "challenges": valid_challenges})

        assert len(form.goals) == length

    def test_goals_nine_chars_fails(self, valid_challenges):
        """
        What it does: Checks trimmed length 9.
        Purpose: One below the minimum is rejected.
        """
        with pytest.raises(StudioFormValidationError) as exc_info:
            validate_studio_form({"goals": "g" * 9, "challenges": valid_challenges})

        assert _errors_by_field(exc_info) == {"goals": GOALS_TOO_SHORT}

    def test_goals_2001_chars_fails(self, valid_challenges):
        """
        What it does: Checks trimmed length 2001.
        Purpose: One above the maximum is rejected.
        """
        with pytest.raises(StudioFormValidationError) as exc_info:
            validate_studio_form({"goals": "g" * 2001, "challenges": valid_challenges})

        assert _errors_by_field(exc_info) == {"goals": GOALS_TOO_LONG}

    @pytest.mark.parametrize("length", [10, 2000])
    def test_challenges_bounds_pass(self, valid_goals, length):
        form = validate_studio_form({"goals": valid_goals, "challenges": "c" * length})

        assert len(form.challenges) == length

    def test_challenges_nine_chars_fails(self, valid_goals):
        with pytest.raises(StudioFormValidationError) as exc_info:
            validate_studio_form({"goals": valid_goals, "challenges": "c" * 9})

        assert _errors_by_field(exc_info) == {"challenges": CHALLENGES_TOO_SHORT}

    def test_challenges_2001_chars_fails(self, valid_goals):
        with pytest.raises(StudioFormValidationError) as exc_info:
            validate_studio_form({"goals": valid_goals, "challenges": "c" * 2001})

        assert _errors_by_field(exc_info) == {"challenges": CHALLENGES_TOO_LONG}

    def test_padding_does_not_count_towards_minimum(self, valid_challenges):
        """
        What it does: Pads a 1-char value with spaces to raw length 7.
        Purpose: Trimming happens before the length check.
        """
        with pytest.raises(StudioFormValidationError) as exc_info:
            validate_studio_form({"goals": "   a   ", "challenges": valid_challenges})

        assert _errors_by_field(exc_info) == {"goals": GOALS_TOO_SHORT}

    @pytest.mark.parametrize(
        "goals",
        [
            "\ufeff" * 50,
            "\ufeff123456789",
            "123456789\ufeff",
            "\u3000\u2028 abc \xa0\u202f",
        ],
    )
    def test_invisible_padding_does_not_count_towards_minimum(self, valid_challenges, goals):
        """
        What it does: Pads or fills goals with byte-order marks and Unicode spaces.
        Purpose: Trimming removes the same characters a browser's trim() removes.
        """
        with pytest.raises(StudioFormValidationError) as exc_info:
            validate_studio_form({"goals": goals, "challenges": valid_challenges})

        assert _errors_by_field(exc_info) == {"goals": GOALS_TOO_SHORT}

    def test_bom_padding_trimmed_at_minimum(self, valid_challenges):
        """
        What it does: Wraps exactly 10 characters in byte-order marks.
        Purpose: The marks are trimmed and the remaining 10 characters pass.
        """
        form = validate_studio_form(
            {"goals": "\ufeff1234567890\ufeff", "challenges": valid_challenges}
        )

        assert form.goals == "1234567890"

    def test_separator_controls_are_kept(self, valid_challenges):
        """
        What it does: Surrounds 8 characters with U+001F and U+0085.
        Purpose: Characters outside the browser trim set count towards the length.
        """
        form = validate_studio_form(
            {"goals": "\x1f12345678\x85", "challenges": valid_challenges}
        )

        assert len(form.goals) == 10

    def test_long_whitespace_only_fails_minimum(self, valid_challenges):
        """
        What it does: Sends 5000 spaces as goals.
        Purpose: Whitespace-only input of any length fails the minimum, not the maximum.
        """
        with pytest.raises(StudioFormValidationError) as exc_info:
            validate_studio_form({"goals": " " * 5000, "challenges": valid_challenges})

        assert _errors_by_field(exc_info) == {"goals": GOALS_TOO_SHORT}

    def test_padding_does_not_count_towards_maximum(self, valid_challenges):
        """
        What it does: Pads exactly 2000 chars with surrounding whitespace.
        Purpose: Only the trimmed length is compared with the maximum.
        """
        form = validate_studio_form(
            {"goals": "  " + "g" * 2000 + "  ", "challenges": valid_challenges}
        )

        assert len(form.goals) == 2000


class TestErrorAggregation:
    """Tests for fail-complete error reporting."""

    def test_short_goals_reports_only_goals(self, valid_challenges):
        """
        What it does: Sends goals="short" with valid challenges.
        Purpose: Only the failing field is reported.
        """
        with pytest.raises(StudioFormValidationError) as exc_info:
            validate_studio_form({"goals": "short", "challenges": valid_challenges})

        assert _errors_by_field(exc_info) == {"goals": GOALS_TOO_SHORT}
        assert exc_info.value.first_message == GOALS_TOO_SHORT
        assert str(exc_info.value) == GOALS_TOO_SHORT

    def test_both_fields_reported_together(self):
        """
        What it does: Sends two invalid fields.
        Purpose: Every failing field is collected in one error.
        """
        with pytest.raises(StudioFormValidationError) as exc_info:
            validate_studio_form({"goals": "short", "challenges": "x" * 2500})

        assert _errors_by_field(exc_info) == {
            "goals": GOALS_TOO_SHORT,
            "challenges": CHALLENGES_TOO_LONG,
        }
        assert exc_info.value.fields() == ["goals", "challenges"]


class TestTypeMismatch:
    """Tests for non-string and missing values."""

    @pytest.mark.parametrize("value", [12345678901, None, ["a" * 20], {"text": "a" * 20}, True])
    def test_non_string_goals_fails(self, valid_challenges, value):
        """
        What it does: Sends a non-string goals value.
        Purpose: Untrusted clients may send any JSON type.
        """
        with pytest.raises(StudioFormValidationError) as exc_info:
            validate_studio_form({"goals": value, "challenges": valid_challenges})

        errors = _errors_by_field(exc_info)
        assert list(errors) == ["goals"]
        assert errors["goals"] == "Input should be a valid string"

    def test_missing_fields_fail(self):
        with pytest.raises(StudioFormValidationError) as exc_info:
            validate_studio_form({})

        errors = _errors_by_field(exc_info)
        assert set(errors) == {"goals", "challenges"}
        assert errors["goals"] == "Field required"

    @pytest.mark.parametrize("payload", [None, "goals", ["goals", "challenges"], 7])
    def test_non_mapping_payload_fails(self, payload):
        """
        What it does: Sends a payload that is not an object.
        Purpose: Reported under the formData pseudo-field.
        """
        with pytest.raises(StudioFormValidationError) as exc_info:
            validate_studio_form(payload)

        assert exc_info.value.fields() == ["formData"]


class TestStudioFormDataModel:
    """Tests for direct model use."""

    def test_populate_by_field_name(self, valid_goals, valid_challenges):
        form = StudioFormData(
            goals=valid_goals, challenges=valid_challenges, turnstile_token="tok"
        )

        assert form.turnstile_token == "tok"

    def test_to_form_payload_excludes_token(self, valid_form):
        form = validate_studio_form(dict(valid_form, turnstileToken="tok"))

        assert form.to_form_payload() == valid_form
