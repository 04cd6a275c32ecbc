from typing import Any, Dict, Optional
from sqlalchemy.orm import Session
from wall.models.profile import Profile
from wall.repositories import tables  # noqa: F401 - registers the mappings


class ProfileRepository:
    """Persistence for Profile records. One instance per database session."""

    def __init__(self, db: Session):
        self.db = db

    def find(self, profile_id: int) -> Optional[Profile]:
        return self.db.get(Profile, profile_id)

    def find_by_email(self, email: str) -> Optional[Profile]:
        # Plain equality - lookups are case-sensitive as stored
        return self.db.query(Profile).filter(Profile.email == email).first()

    def create(self, profile: Profile) -> Profile:
        self.db.add(profile)
        self.db.commit()
        # Refresh to load the generated id
        self.db.refresh(profile)
        return profile

    def update(self, profile_id: int, values: Dict[str, Any]) -> Optional[Profile]:
        """Apply values to the stored record and return it reloaded, or None if absent"""
        profile = self.find(profile_id)
        if profile is None:
            return None
        for key, value in values.items():
            setattr(profile, key, value)
        self.db.commit()
        self.db.refresh(profile)
        return profile

    def delete(self, profile_id: int) -> None:
        self.db.query(Profile).filter(Profile.id == profile_id).delete()
        self.db.commit()

    def avatar_filenames(self) -> set[str]:
        rows = self.db.query(Profile.avatar).filter(Profile.avatar.isnot(None)).all()
        return {avatar for (avatar,) in rows if avatar}
