"""
Shared dependencies: get_current_user from Bearer token, require_roles for per-route role checks.

The token's role claim is not trusted on its own: every request re-reads the user row, so a
deleted user loses access and a role change takes effect immediately, not after token expiry.
"""
import logging
from typing import Callable

from fastapi import Depends, Request
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.database import get_db
from app.errors import Forbidden, InvalidToken, Unauthorized
from app.models.user import ROLE_ADMIN, ROLE_STORE_OWNER, ROLE_USER
from app.schemas.auth import UserPublic
from app.services.auth import decode_access_token
from app.services.users import get_user

security = HTTPBearer(auto_error=False)
logger = logging.getLogger(__name__)


def get_current_user(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: Session = Depends(get_db),
) -> UserPublic:
    """Require valid Bearer token; return the live user's public projection."""
    if not credentials or not (getattr(credentials, "credentials", None) or "").strip():
        logger.debug("Auth failed: no Bearer token in request")
        raise Unauthorized("Unauthorized: No token provided")
    try:
        claims = decode_access_token(credentials.credentials)
    except InvalidToken:
        logger.debug("Auth failed: invalid or expired token")
        raise Forbidden("Forbidden: Invalid token", headers={"WWW-Authenticate": "Bearer"}) from None
    user = get_user(db, claims.user_id)
    if user is None:
        logger.debug("Auth failed: token subject %s no longer exists", claims.user_id)
        raise Unauthorized("Unauthorized: User not found")
    current = UserPublic.model_validate(user)
    request.state.user = current
    return current


def require_roles(*roles: str) -> Callable[..., UserPublic]:
    """Dependency factory: authenticated user whose current role is one of roles."""
    allowed = frozenset(roles)

    def checker(current_user: UserPublic = Depends(get_current_user)) -> UserPublic:
        if current_user.role not in allowed:
            logger.info(
                "Forbidden: user %s with role %s needs one of %s",
                current_user.id, current_user.role, sorted(allowed),
            )
            raise Forbidden("Forbidden: Insufficient permissions")
        return current_user

    return checker


require_admin = require_roles(ROLE_ADMIN)
require_store_owner = require_roles(ROLE_STORE_OWNER)
require_user = require_roles(ROLE_USER)
