import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional
from sqlalchemy.exc import IntegrityError
from wall.core import messages
from wall.core.exceptions import ConflictError, UnauthorizedError
from wall.core.security import TokenService, get_password_hash, verify_password
from wall.models.profile import DEFAULT_BIRTH_DATE, Profile
from wall.repositories.profile_repository import ProfileRepository
from wall.schemas import UserSnapshot

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    user: UserSnapshot
    access_token: str
    refresh_token: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user": self.user,
            "access_token": self.access_token,
            "refresh_token": self.refresh_token,
        }


class AuthService:
    """Registration, login and token validation over the profile store"""

    def __init__(self, profiles: ProfileRepository, tokens: TokenService):
        self.profiles = profiles
        self.tokens = tokens

    def register(self, email: str, password: str) -> AuthResult:
        # Check-then-insert: two concurrent registrations can both pass this check.
        # The unique constraint on email catches the loser below.
        if self.profiles.find_by_email(email) is not None:
            raise ConflictError(messages.EMAIL_TAKEN)

        profile = Profile(
            email=email,
            password_hash=get_password_hash(password),
            avatar="",
            about="",
            birth_date=DEFAULT_BIRTH_DATE,
            phone="",
            first_name="",
            last_name="",
        )
        try:
            profile = self.profiles.create(profile)
        except IntegrityError:
            self.profiles.db.rollback()
            raise ConflictError(messages.EMAIL_TAKEN)

        logger.info(f"Registered profile id={profile.id}")
        return self._issue(profile)

    def login(self, email: str, password: str) -> AuthResult:
        profile = self.profiles.find_by_email(email)
        # Same error for unknown email and wrong password - callers can't tell which failed
        if profile is None or not verify_password(password, profile.password_hash):
            logger.info("Login rejected: invalid credentials")
            raise UnauthorizedError(messages.INVALID_CREDENTIALS)
        return self._issue(profile)

    def validate_token(self, token: Optional[str]) -> Optional[Dict[str, Any]]:
        """Decoded claims for a valid token, None for anything else"""
        return self.tokens.verify(token)

    def _issue(self, profile: Profile) -> AuthResult:
        access_token, refresh_token = self.tokens.issue_pair(profile.id)
        return AuthResult(
            user=UserSnapshot.model_validate(profile),
            access_token=access_token,
            refresh_token=refresh_token,
        )
