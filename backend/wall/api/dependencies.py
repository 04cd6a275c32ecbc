import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from fastapi import Depends, Header, Request
from sqlalchemy.orm import Session
from wall.core.database import get_db
from wall.core.exceptions import UnauthorizedError
from wall.core.security import TokenService, token_service
from wall.repositories.post_repository import PostRepository
from wall.repositories.profile_repository import ProfileRepository
from wall.services.auth_service import AuthService
from wall.services.post_service import PostService
from wall.services.profile_service import ProfileService
from wall.storage.local_storage import LocalStorage, storage

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Identity:
    """Who a request is acting as, resolved from its bearer token"""
    user_id: int
    claims: Dict[str, Any] = field(default_factory=dict)


def get_token_service() -> TokenService:
    return token_service


def get_storage() -> LocalStorage:
    return storage


def get_auth_service(
    db: Session = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
) -> AuthService:
    return AuthService(ProfileRepository(db), tokens)


def get_profile_service(db: Session = Depends(get_db)) -> ProfileService:
    return ProfileService(ProfileRepository(db))


def get_post_service(db: Session = Depends(get_db)) -> PostService:
    return PostService(PostRepository(db), ProfileRepository(db))


def authenticate(authorization: Optional[str], auth_service: AuthService) -> Identity:
    """
    Resolve an Authorization header value to an Identity.

    The scheme word is dropped without being checked, so "Token abc" works the
    same as "Bearer abc". Raises UnauthorizedError when no valid token is present.
    """
    if not authorization:
        raise UnauthorizedError()

    parts = authorization.split()
    token = parts[1] if len(parts) > 1 else None

    claims = auth_service.validate_token(token)
    if claims is None:
        logger.debug("Rejected request with invalid or expired token")
        raise UnauthorizedError()

    # Tokens carry the numeric id; older ones may only have 'sub'
    try:
        user_id = int(claims.get("id", claims.get("sub")))
    except (TypeError, ValueError):
        raise UnauthorizedError()

    return Identity(user_id=user_id, claims=claims)


async def get_current_identity(
    request: Request,
    authorization: Optional[str] = Header(None),
    auth_service: AuthService = Depends(get_auth_service),
) -> Identity:
    """
    Access guard for protected routes.

    On success the identity is also left on request.state for downstream handlers.
    """
    identity = authenticate(authorization, auth_service)
    request.state.identity = identity
    return identity
