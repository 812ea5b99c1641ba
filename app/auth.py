"""
Identity verification.

Access tokens are issued by the identity provider; this service only
verifies them. The ``sub`` claim is the user id and the optional
``role`` claim is used for role checks.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt

from app.constants import ACCESS_TOKEN_EXPIRE_MINUTES, ALGORITHM, SECRET_KEY
from app.constants.roles import LEDGER_ADMIN_ROLES, RoleName, get_default_role_name
from app.exceptions import AuthorizationError, NotAuthenticatedError
from app.middleware.logging import user_id_var

logger = logging.getLogger(__name__)

# OAuth2 scheme for token validation; a missing header falls back to the cookie
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="token", auto_error=False)


@dataclass(frozen=True)
class Identity:
    """The authenticated caller."""

    user_id: str
    role: str

    @property
    def is_church_owner(self) -> bool:
        return self.role == RoleName.OWNER.value

    @property
    def is_ledger_admin(self) -> bool:
        return self.role in LEDGER_ADMIN_ROLES


# Function to create an access token with an expiration time
def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire})

    if "sub" not in to_encode:
        raise ValueError("Missing 'sub' claim (user id) in token data.")

    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


# Function to decode an access token
def decode_access_token(token: str) -> Identity:
    try:
        payload = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except ExpiredSignatureError:
        logger.warning("Token expired")
        raise NotAuthenticatedError("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT decoding failed: {str(e)}")
        raise NotAuthenticatedError("Invalid token")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("Token is missing 'sub' claim")
        raise NotAuthenticatedError("Token does not contain 'sub' field.")

    return Identity(user_id=str(user_id), role=payload.get("role") or get_default_role_name())


async def get_current_identity(
    request: Request,
    token: str | None = Depends(oauth2_scheme),
) -> Identity:
    """Resolve the caller from a bearer token or the ``access_token`` cookie."""
    token = token or request.cookies.get("access_token")
    if not token:
        raise NotAuthenticatedError()

    identity = decode_access_token(token)
    request.state.user = identity
    user_id_var.set(identity.user_id)
    return identity


def require_roles(allowed_roles: Iterable[str]) -> Callable:
    """Build a dependency that only lets the given roles through."""
    allowed = frozenset(allowed_roles)

    async def _identity_with_role(identity: Identity = Depends(get_current_identity)) -> Identity:
        if identity.role not in allowed:
            logger.warning(f"Role '{identity.role}' denied; required one of {sorted(allowed)}")
            raise AuthorizationError(required_role=", ".join(sorted(allowed)))
        return identity

    return _identity_with_role


require_ledger_admin = require_roles(LEDGER_ADMIN_ROLES)
