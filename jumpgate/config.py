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
Studio Gate Configuration.

Centralized storage for all settings and constants.
Loads environment variables and provides typed access to them.
"""

import os
from typing import List
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


# ==================================================================================================
# Server Settings
# ==================================================================================================

# Server host (default: 0.0.0.0 - listen on all interfaces)
# Use "127.0.0.1" to only allow local connections
DEFAULT_SERVER_HOST: str = "0.0.0.0"
SERVER_HOST: str = os.getenv("SERVER_HOST", DEFAULT_SERVER_HOST)

# Server port (default: 8000)
# Can be overridden by CLI: python main.py --port 9000
DEFAULT_SERVER_PORT: int = 8000
SERVER_PORT: int = int(os.getenv("SERVER_PORT", str(DEFAULT_SERVER_PORT)))

# Allowed CORS origins (comma-separated). The Studio frontend is served from
# several preview domains, so the default is permissive.
_cors_origins_raw: str = os.getenv("CORS_ALLOW_ORIGINS", "*")
CORS_ALLOW_ORIGINS: List[str] = [
    value.strip() for value in _cors_origins_raw.split(",") if value.strip()
] or ["*"]

# Headers accepted from the browser on cross-origin requests
CORS_ALLOW_HEADERS: List[str] = [
    "authorization",
    "x-client-info",
    "apikey",
    "content-type",
]

# ==================================================================================================
# Studio Form Limits
# ==================================================================================================

# Length bounds for the free-text goals/challenges fields, measured after trimming.
# Anything outside this range never reaches the paid generation step.
STUDIO_FIELD_MIN_CHARS: int = 10
STUDIO_FIELD_MAX_CHARS: int = 2000

# ==================================================================================================
# Cloudflare Turnstile Settings
# ==================================================================================================

# Server-side secret for Turnstile siteverify. Never logged.
TURNSTILE_SECRET_KEY: str = os.getenv("TURNSTILE_SECRET_KEY", "")

DEFAULT_TURNSTILE_VERIFY_URL: str = (
    "https://challenges.cloudflare.com/turnstile/v0/siteverify"
)
TURNSTILE_VERIFY_URL: str = os.getenv(
    "TURNSTILE_VERIFY_URL", DEFAULT_TURNSTILE_VERIFY_URL
)

# Timeout for the single siteverify call (seconds).
# Default matches the httpx client default. There is no retry.
TURNSTILE_TIMEOUT: float = float(os.getenv("TURNSTILE_TIMEOUT", "5"))

# When enabled, submissions without a token are rejected instead of skipping
# the bot check.
# Default: false (a missing token skips verification)
_REQUIRE_TURNSTILE_TOKEN_RAW: str = os.getenv(
    "REQUIRE_TURNSTILE_TOKEN", "false"
).lower()
REQUIRE_TURNSTILE_TOKEN: bool = _REQUIRE_TURNSTILE_TOKEN_RAW in (
    "true",
    "1",
    "yes",
    "enabled",
    "on",
)

# Generic message shown to end users when bot verification fails.
# Must not reveal whether the failure was transport-level or an explicit rejection.
VERIFICATION_FAILED_MESSAGE: str = "Verification failed. Please try again."

# ==================================================================================================
# Logging Settings
# ==================================================================================================

# Log level for the application
# Available levels: TRACE, DEBUG, INFO, WARNING, ERROR, CRITICAL
# Default: INFO (recommended for production)
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO").upper()


# ==================================================================================================
# Application Version
# ==================================================================================================

APP_VERSION: str = "1.0"
APP_TITLE: str = "JumpinAI Studio Gate"
APP_DESCRIPTION: str = "Input validation and Turnstile bot-check gate in front of JumpinAI Jump generation."
