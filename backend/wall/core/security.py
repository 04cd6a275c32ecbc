import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Tuple
from jose import JWTError, jwt
from passlib.context import CryptContext
from wall.core.config import settings

logger = logging.getLogger(__name__)

# Passwords are stored as a single unsalted SHA-256 hex digest.
# This is weak against rainbow tables, but existing accounts depend on the format:
# switching schemes (e.g. to bcrypt) requires rehashing on next login.
pwd_context = CryptContext(schemes=["hex_sha256"])


def get_password_hash(password: str) -> str:
    """Hash a password into a 64-char hex digest"""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a password against a stored digest; unrecognised digests never match"""
    if not hashed_password or not pwd_context.identify(hashed_password):
        return False
    return pwd_context.verify(plain_password, hashed_password)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenService:
    """
    Issues and verifies signed, time-limited JWTs.

    The signing key is read once at construction. There is no revocation list:
    a token stays valid until its exp claim passes, whatever happens to the account.
    """

    def __init__(
        self,
        secret_key: str = settings.SECRET_KEY,
        algorithm: str = settings.ALGORITHM,
        access_ttl: timedelta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS),
        refresh_ttl: timedelta = timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
        clock: Callable[[], datetime] = _utcnow,
    ):
        self.secret_key = secret_key
        self.algorithm = algorithm
        self.access_ttl = access_ttl
        self.refresh_ttl = refresh_ttl
        self.clock = clock

    def issue(self, claims: Dict[str, Any], ttl: timedelta) -> str:
        """Sign claims into a token that expires ttl from now"""
        # Copy to avoid mutating the caller's dict
        to_encode = claims.copy()
        issued_at = self.clock()
        to_encode.update({"iat": issued_at, "exp": issued_at + ttl})
        return jwt.encode(to_encode, self.secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> Optional[Dict[str, Any]]:
        """Return the token's claims, or None if it is malformed, expired or badly signed"""
        if not token or not isinstance(token, str):
            return None
        try:
            # Expiry is checked below against self.clock rather than the system time
            claims = jwt.decode(
                token, self.secret_key, algorithms=[self.algorithm], options={"verify_exp": False}
            )
        except JWTError as e:
            logger.debug(f"Token rejected: {e}")
            return None

        exp = claims.get("exp")
        if not isinstance(exp, (int, float)) or exp <= self.clock().timestamp():
            logger.debug("Token rejected: expired or missing exp")
            return None
        return claims

    def issue_pair(self, user_id: int) -> Tuple[str, str]:
        """Issue (access_token, refresh_token) with user_id as the subject"""
        # 'sub' must be a string per RFC 7519; 'id' keeps the numeric form
        claims = {"id": user_id, "sub": str(user_id)}
        return self.issue(claims, self.access_ttl), self.issue(claims, self.refresh_ttl)


token_service = TokenService()
