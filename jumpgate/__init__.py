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
JumpinAI Studio Gate - validation and bot check before Jump generation.

Modules:
    - config: Configuration and constants
    - validators: Studio form schema (trim + length rules)
    - turnstile: Cloudflare Turnstile verification
    - gate: Validation-then-verification orchestration
    - gate_errors: Error types and Turnstile error-code descriptions
    - client_ip: Caller IP resolution from proxy headers
    - routes: FastAPI routes
"""

# Version is imported from config.py, the single source of truth
from jumpgate.config import APP_VERSION as __version__

# Main components for convenient import
from jumpgate.gate import GateDecision, StudioGate
from jumpgate.turnstile import TurnstileVerifier, VerificationResult, verify_turnstile
from jumpgate.validators import StudioFormData, validate_studio_form
from jumpgate.gate_errors import FieldError, StudioFormValidationError
from jumpgate.client_ip import resolve_client_ip
from jumpgate.routes import router

__all__ = [
    # Version
    "__version__",

    # Gate
    "StudioGate",
    "GateDecision",

    # Bot check
    "TurnstileVerifier",
    "VerificationResult",
    "verify_turnstile",

    # Validation
    "StudioFormData",
    "validate_studio_form",
    "FieldError",
    "StudioFormValidationError",

    # Helpers
    "resolve_client_ip",
    "router",
]
