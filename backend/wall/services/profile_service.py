from typing import Any, Dict
from sqlalchemy.exc import IntegrityError
from wall.core import messages
from wall.core.exceptions import ConflictError, NotFoundError
from wall.models.profile import PROFILE_FIELDS, Profile
from wall.repositories.profile_repository import ProfileRepository


class ProfileService:
    """Profile reads and updates. Updates return the record reloaded from the store."""

    def __init__(self, profiles: ProfileRepository):
        self.profiles = profiles

    def get(self, profile_id: int) -> Profile:
        profile = self.profiles.find(profile_id)
        if profile is None:
            raise NotFoundError(messages.PROFILE_NOT_FOUND)
        return profile

    def create(self, fields: Dict[str, Any]) -> Profile:
        """
        Create a profile without credentials.

        The empty password hash never matches a login attempt, so such a profile
        cannot sign in until a password is set through registration tooling.
        """
        if self.profiles.find_by_email(fields["email"]) is not None:
            raise ConflictError(messages.EMAIL_TAKEN)
        values = {key: value for key, value in fields.items() if key in PROFILE_FIELDS and value is not None}
        try:
            return self.profiles.create(Profile(email=fields["email"], password_hash="", **values))
        except IntegrityError:
            self.profiles.db.rollback()
            raise ConflictError(messages.EMAIL_TAKEN)

    def update(self, profile_id: int, fields: Dict[str, Any]) -> Profile:
        """Merge the given fields into the profile; fields not given stay as they are"""
        values = {key: value for key, value in fields.items() if key in PROFILE_FIELDS}
        profile = self.profiles.update(profile_id, values)
        if profile is None:
            raise NotFoundError(messages.PROFILE_NOT_FOUND)
        return profile

    def update_avatar(self, profile_id: int, filename: str) -> Profile:
        profile = self.profiles.update(profile_id, {"avatar": filename})
        if profile is None:
            raise NotFoundError(messages.PROFILE_NOT_FOUND)
        return profile
