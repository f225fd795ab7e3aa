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
Caller IP resolution from proxy headers.

The value is only forwarded to Turnstile as an extra signal and is not
validated here.
"""

from typing import Mapping, Optional

UNKNOWN_IP = "unknown"


def _header(headers: Mapping[str, str], name: str) -> str:
    # Starlette Headers are case-insensitive, plain dicts are not.
    value = headers.get(name)
    if value is None:
        value = headers.get(name.lower())
    return (value or "").strip()


def resolve_client_ip(headers: Mapping[str, str], fallback: Optional[str] = None) -> str:
    """
    Resolve the caller IP address.

    Order: first entry of X-Forwarded-For, X-Real-IP, X-Client-IP, then the
    socket peer address (fallback), then "unknown".

    Args:
        headers: Request headers
        fallback: Peer address of the connection, if known

    Returns:
        IP address string or "unknown"
    """
    forwarded_for = _header(headers, "X-Forwarded-For")
    if forwarded_for:
        first = forwarded_for.split(",")[0].strip()
        if first:
            return first

    for name in ("X-Real-IP", "X-Client-IP"):
        value = _header(headers, name)
        if value:
            return value

    if fallback:
        return fallback
    return UNKNOWN_IP
