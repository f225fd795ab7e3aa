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
Cloudflare Turnstile bot check.

Forwards a client-supplied challenge token to the siteverify endpoint and
reduces the answer to accept/reject. Exactly one outbound request per call,
no retry. Transport failures and explicit rejections both come back as
"not accepted"; they differ only in how they are logged.

The secret key is injected through the constructor and never logged.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import httpx
from loguru import logger

from jumpgate.config import TURNSTILE_TIMEOUT, TURNSTILE_VERIFY_URL
from jumpgate.gate_errors import describe_turnstile_error_codes

# VerificationResult.reason values
REASON_ACCEPTED = "accepted"
REASON_REJECTED = "rejected"
REASON_TRANSPORT_ERROR = "transport_error"


@dataclass
class VerificationResult:
    """
    Outcome of one siteverify call.

    Attributes:
        accepted: True only for a 2xx response whose "success" is exactly true
        reason: REASON_ACCEPTED, REASON_REJECTED or REASON_TRANSPORT_ERROR
        status_code: HTTP status when a response was received
        error_codes: "error-codes" reported by Turnstile on rejection
    """

    accepted: bool
    reason: str
    status_code: Optional[int] = None
    error_codes: List[str] = field(default_factory=list)


def _extract_error_codes(data: Dict[str, Any]) -> List[str]:
    codes = data.get("error-codes")
    if isinstance(codes, list):
        return [str(code) for code in codes]
    return []


class TurnstileVerifier:
    """
    Verifies Turnstile tokens against the siteverify endpoint.

    Can share an httpx.AsyncClient owned by the application; without one a
    short-lived client is opened per call.

    Example:
        >>> verifier = TurnstileVerifier(secret_key="0x4AAA...")
        >>> accepted = await verifier.verify(token, "203.0.113.7")
    """

    def __init__(
        self,
        secret_key: str,
        verify_url: str = TURNSTILE_VERIFY_URL,
        timeout: float = TURNSTILE_TIMEOUT,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._secret_key = secret_key
        self._verify_url = verify_url
        self._timeout = timeout
        self._client = client

    def __repr__(self) -> str:
        return f"TurnstileVerifier(verify_url={self._verify_url!r}, timeout={self._timeout})"

    def _build_payload(self, token: str, remote_ip: Optional[str]) -> Dict[str, str]:
        payload = {"secret": self._secret_key, "response": token}
        if remote_ip:
            payload["remoteip"] = remote_ip
        return payload

    async def _post(self, payload: Dict[str, str]) -> httpx.Response:
        headers = {"Content-Type": "application/json"}
        if self._client is not None:
            return await self._client.post(
                self._verify_url, json=payload, headers=headers, timeout=self._timeout
            )
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            return await client.post(self._verify_url, json=payload, headers=headers)

    async def verify_detailed(
        self, token: str, remote_ip: Optional[str]
    ) -> VerificationResult:
        """
        Verifies a token and returns the full outcome.

        Never raises for transport or protocol problems.

        Args:
            token: Opaque token produced by the Turnstile widget
            remote_ip: Caller IP as seen by this server, forwarded as "remoteip".
                       When None or empty, "remoteip" is left out of the body.

        Returns:
            VerificationResult
        """
        try:
            response = await self._post(self._build_payload(token, remote_ip))
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error(
                "[Turnstile] Verification request failed: {}: {}",
                type(exc).__name__,
                exc,
            )
            return VerificationResult(accepted=False, reason=REASON_TRANSPORT_ERROR)

        if not response.is_success:
            logger.error(
                "[Turnstile] Verification request failed: HTTP {} {}",
                response.status_code,
                response.reason_phrase,
            )
            return VerificationResult(
                accepted=False,
                reason=REASON_TRANSPORT_ERROR,
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError:
            logger.error(
                "[Turnstile] Verification response is not valid JSON (HTTP {})",
                response.status_code,
            )
            return VerificationResult(
                accepted=False,
                reason=REASON_TRANSPORT_ERROR,
                status_code=response.status_code,
            )

        if not isinstance(data, dict):
            logger.error(
                "[Turnstile] Unexpected verification response type: {}",
                type(data).__name__,
            )
            return VerificationResult(
                accepted=False,
                reason=REASON_TRANSPORT_ERROR,
                status_code=response.status_code,
            )

        if data.get("success") is True:
            logger.debug("[Turnstile] Token accepted")
            return VerificationResult(
                accepted=True, reason=REASON_ACCEPTED, status_code=response.status_code
            )

        error_codes = _extract_error_codes(data)
        info = describe_turnstile_error_codes(error_codes)
        if info.misconfigured:
            logger.error(
                "[Turnstile] Token rejected, check server configuration: {} ({})",
                info.description,
                ", ".join(info.error_codes),
            )
        else:
            logger.warning(
                "[Turnstile] Token rejected: {} ({})",
                info.description,
                ", ".join(info.error_codes) or "no codes",
            )
        return VerificationResult(
            accepted=False,
            reason=REASON_REJECTED,
            status_code=response.status_code,
            error_codes=error_codes,
        )

    async def verify(self, token: str, remote_ip: Optional[str]) -> bool:
        """Return True when Turnstile accepts the token, False otherwise."""
        result = await self.verify_detailed(token, remote_ip)
        return result.accepted


async def verify_turnstile(
    token: str,
    secret_key: str,
    ip_address: Optional[str],
    *,
    client: Optional[httpx.AsyncClient] = None,
) -> bool:
    """
    One-shot helper: verify a token with an explicit secret.

    Args:
        token: Turnstile token from the client
        secret_key: Server-held Turnstile secret
        ip_address: Caller IP address
        client: Optional shared httpx.AsyncClient

    Returns:
        True if accepted, False on rejection or any transport failure
    """
    verifier = TurnstileVerifier(secret_key=secret_key, client=client)
    return await verifier.verify(token, ip_address)
