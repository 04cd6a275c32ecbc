import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional
from wall.client.api import ApiError, UploadTuple, WallApiClient
from wall.client.repository import SessionRepository, StoredSession
from wall.core import messages

logger = logging.getLogger(__name__)


class SessionState(str, Enum):
    ANONYMOUS = "anonymous"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"
    ERROR = "error"


@dataclass(frozen=True)
class ClientSession:
    token: Optional[str] = None
    user: Optional[Dict[str, Any]] = None
    is_authenticated: bool = False
    loading: bool = False
    error: Optional[str] = None
    state: SessionState = SessionState.ANONYMOUS


class SessionStore:
    """
    Client-side auth state: the token, a snapshot of the signed-in user, and
    the flags a UI needs around them.

    State is seeded from the repository at construction. A cached token counts
    as signed in before the server has seen it again; callers must expect the
    first authenticated request to fail with 401 if it has expired meanwhile.
    """

    def __init__(self, repository: SessionRepository, api: WallApiClient):
        self.repository = repository
        self.api = api
        self.session = self._rehydrate()

    def _rehydrate(self) -> ClientSession:
        stored = self.repository.load()
        if stored.token:
            return ClientSession(
                token=stored.token,
                user=stored.user,
                is_authenticated=True,
                state=SessionState.AUTHENTICATED,
            )
        # A user snapshot without a token is leftover state; start signed out
        return ClientSession()

    @property
    def user_id(self) -> Optional[int]:
        return self.session.user.get("id") if self.session.user else None

    async def login(self, email: str, password: str) -> ClientSession:
        return await self._authenticate(lambda: self.api.login(email, password), messages.LOGIN_FAILED)

    async def register(self, email: str, password: str) -> ClientSession:
        return await self._authenticate(lambda: self.api.register(email, password), messages.REGISTER_FAILED)

    async def _authenticate(
        self,
        submit: Callable[[], Awaitable[Dict[str, Any]]],
        fallback_message: str,
    ) -> ClientSession:
        # The loading flag only stops a second submit while one is pending;
        # it is not a lock
        if self.session.loading:
            logger.debug("Submit ignored: another request is in flight")
            return self.session

        self.session = replace(self.session, loading=True, error=None, state=SessionState.AUTHENTICATING)
        try:
            data = await submit()
            token, user = data["access_token"], data["user"]
        except ApiError as e:
            return self._fail(e.message or fallback_message)
        except (KeyError, TypeError):
            logger.error("Auth response is missing the token or user")
            return self._fail(fallback_message)
        except Exception:
            # Never leave the store stuck in loading; later submits would be ignored
            self._fail(fallback_message)
            raise

        self.repository.save(StoredSession(token=token, user=user))
        self.session = ClientSession(
            token=token,
            user=user,
            is_authenticated=True,
            state=SessionState.AUTHENTICATED,
        )
        return self.session

    def logout(self) -> ClientSession:
        self.repository.clear()
        self.session = ClientSession()
        return self.session

    async def update_profile(self, data: Dict[str, Any]) -> ClientSession:
        """Send profile changes and merge the server's copy into the cached user"""
        return await self._refresh_user(
            lambda: self.api.update_profile(self.user_id, data),
            lambda updated: updated,
            messages.PROFILE_UPDATE_FAILED,
        )

    async def upload_avatar(self, upload: UploadTuple) -> ClientSession:
        return await self._refresh_user(
            lambda: self.api.upload_avatar(self.user_id, upload),
            lambda updated: {"avatar": updated.get("avatar", "")},
            messages.AVATAR_UPLOAD_FAILED,
        )

    async def _refresh_user(
        self,
        submit: Callable[[], Awaitable[Dict[str, Any]]],
        pick: Callable[[Dict[str, Any]], Dict[str, Any]],
        fallback_message: str,
    ) -> ClientSession:
        if self.session.loading or self.user_id is None:
            return self.session

        previous_state = self.session.state
        self.session = replace(self.session, loading=True, error=None)
        try:
            updated = await submit()
            user = {**(self.session.user or {}), **pick(updated)}
        except ApiError as e:
            self.session = replace(self.session, loading=False, error=e.message or fallback_message)
            return self.session
        except (AttributeError, TypeError):
            logger.error("Profile response is not an object")
            self.session = replace(self.session, loading=False, error=fallback_message)
            return self.session
        except Exception:
            self.session = replace(self.session, loading=False, error=fallback_message)
            raise

        if self.session.token:
            self.repository.save(StoredSession(token=self.session.token, user=user))
        self.session = replace(self.session, user=user, loading=False, state=previous_state)
        return self.session

    def _fail(self, message: str) -> ClientSession:
        # Whatever was signed in before stays signed in
        self.session = replace(
            self.session,
            loading=False,
            error=message,
            state=SessionState.AUTHENTICATED if self.session.is_authenticated else SessionState.ERROR,
        )
        return self.session
