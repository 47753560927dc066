from __future__ import annotations

from typing import Optional

from fastapi import Header
from pydantic import BaseModel

from app.core.exceptions import AuthRequiredError
from app.core.jwt_utils import jwt_manager
from app.core.logging import bind_user, get_logger

logger = get_logger(__name__)


class AuthenticatedUser(BaseModel):
    id: str
    email: Optional[str] = None


async def current_user(
    authorization: Optional[str] = Header(default=None),
) -> AuthenticatedUser:
    """Resolve the caller from an identity-provider bearer token."""
    token: Optional[str] = None
    if authorization and authorization.lower().startswith("bearer "):
        token = authorization.split(" ", 1)[1].strip()

    if not token:
        raise AuthRequiredError("Unauthorized")

    try:
        claims = jwt_manager.verify_token(token)
    except ValueError as e:
        logger.info("Rejected bearer token: %s", e)
        raise AuthRequiredError("Unauthorized") from e
    user = AuthenticatedUser(id=str(claims["sub"]), email=claims.get("email"))
    bind_user(user.id)
    return user
