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
FastAPI routes for the Studio Gate.

Contains all API endpoints:
- / and /health: Health check
- /v1/client-ip: Caller IP as seen by the gate
- /v1/studio/submissions: Validate and bot-check a Studio form
"""

import json
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from loguru import logger

from jumpgate.client_ip import resolve_client_ip
from jumpgate.config import APP_VERSION, VERIFICATION_FAILED_MESSAGE
from jumpgate.gate import REJECTED_VALIDATION, GateDecision, StudioGate
from jumpgate.gate_errors import FieldError

router = APIRouter()

SUBMISSIONS_ENDPOINT = "/v1/studio/submissions"


def _client_ip(request: Request) -> str:
    peer = request.client.host if request.client else None
    return resolve_client_ip(request.headers, fallback=peer)


def _log_usage(
    endpoint: str,
    ip_address: str,
    user_agent: Optional[str],
    status_code: int,
    started_at: float,
    error_message: Optional[str] = None,
) -> None:
    """Write one usage line per gated request."""
    duration_ms = int((time.monotonic() - started_at) * 1000)
    logger.info(
        "[Usage] endpoint={} ip={} user_agent={!r} status={} duration_ms={} error={}",
        endpoint,
        ip_address,
        user_agent,
        status_code,
        duration_ms,
        error_message or "-",
    )


def _unwrap_form(body: Any) -> Any:
    # The Studio frontend posts {"formData": {...}}; bare forms are accepted too.
    if isinstance(body, dict) and isinstance(body.get("formData"), dict):
        return body["formData"]
    return body


def _error_response(
    status_code: int,
    error_type: str,
    message: str,
    fields: Optional[List[FieldError]] = None,
) -> JSONResponse:
    error: Dict[str, Any] = {"type": error_type, "message": message}
    if fields is not None:
        error["fields"] = [{"field": f.field, "message": f.message} for f in fields]
    return JSONResponse(status_code=status_code, content={"error": error})


def _decision_response(decision: GateDecision) -> JSONResponse:
    if decision.accepted:
        return JSONResponse(
            status_code=200,
            content={"accepted": True, "formData": decision.form.to_form_payload()},
        )
    if decision.rejection == REJECTED_VALIDATION:
        message = decision.errors[0].message if decision.errors else "Invalid form data"
        return _error_response(422, "validation_error", message, decision.errors)
    return _error_response(403, "verification_failed", VERIFICATION_FAILED_MESSAGE)


@router.get("/")
async def root():
    """
    Health check endpoint.

    Returns:
        Status and application version
    """
    return {"status": "ok", "message": "JumpinAI Studio Gate is running", "version": APP_VERSION}


@router.get("/health")
async def health():
    """
    Detailed health check.

    Returns:
        Status, timestamp and version
    """
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "version": APP_VERSION,
    }


@router.get("/v1/client-ip")
async def client_ip(request: Request):
    """Return the caller IP as resolved from proxy headers."""
    return {"ip": _client_ip(request)}


@router.post(SUBMISSIONS_ENDPOINT)
async def submit_studio_form(request: Request):
    """
    Validate a Studio form and bot-check it before generation.

    Responses:
        200: {"accepted": true, "formData": {...}} with trimmed fields
        400: body is not valid JSON
        403: bot verification failed (generic message)
        422: field validation failed, with per-field messages
    """
    started_at = time.monotonic()
    ip_address = _client_ip(request)
    user_agent = request.headers.get("user-agent")

    try:
        body = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        _log_usage(
            SUBMISSIONS_ENDPOINT, ip_address, user_agent, 400, started_at, "Invalid JSON body"
        )
        return _error_response(400, "invalid_request", "Request body must be valid JSON")

    gate: StudioGate = request.app.state.studio_gate
    decision = await gate.check(_unwrap_form(body), ip_address)
    response = _decision_response(decision)

    error_message = None
    if not decision.accepted:
        error_message = f"rejected by {decision.rejection}"
    _log_usage(
        SUBMISSIONS_ENDPOINT,
        ip_address,
        user_agent,
        response.status_code,
        started_at,
        error_message,
    )
    return response
