"""
Request provenance helpers.

Every ledger entry carries the client address and user agent of the
request that produced it.
"""

from typing import Any

from fastapi import Request

from app.constants.legal import ConsentSource
from app.schemas.consent import Provenance

# Column sizes of consent_records
MAX_IP_LENGTH = 45
MAX_USER_AGENT_LENGTH = 512


def get_client_ip(request: Request) -> str | None:
    """First hop of X-Forwarded-For, then X-Real-IP, then the socket peer."""
    forwarded_for = request.headers.get("X-Forwarded-For")
    if forwarded_for:
        client_ip = forwarded_for.split(",")[0].strip()
    else:
        client_ip = request.headers.get("X-Real-IP") or (request.client.host if request.client else None)
    if not client_ip:
        return None
    return client_ip[:MAX_IP_LENGTH]


def get_user_agent(request: Request) -> str | None:
    user_agent = request.headers.get("User-Agent")
    return user_agent[:MAX_USER_AGENT_LENGTH] if user_agent else None


def build_provenance(request: Request, source: ConsentSource, **extra: Any) -> Provenance:
    return Provenance(
        source=source,
        ip_address=get_client_ip(request),
        user_agent=get_user_agent(request),
        extra=extra,
    )
