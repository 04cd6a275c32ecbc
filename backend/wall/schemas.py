from datetime import date, datetime
from typing import List, Optional
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Serialises to camelCase on the wire while accepting either casing on input"""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class UserSnapshot(CamelModel):
    """A profile with its credentials stripped. Every field is always present."""
    id: int
    email: str
    avatar: Optional[str] = ""
    about: Optional[str] = ""
    birth_date: Optional[date] = None
    phone: Optional[str] = ""
    first_name: Optional[str] = ""
    last_name: Optional[str] = ""


class Credentials(BaseModel):
    email: str
    password: str


class AuthResponse(BaseModel):
    user: UserSnapshot
    access_token: str
    refresh_token: str


class ProfileCreate(CamelModel):
    email: str
    avatar: Optional[str] = None
    about: Optional[str] = None
    birth_date: Optional[date] = None
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class ProfileUpdate(CamelModel):
    avatar: Optional[str] = None
    about: Optional[str] = None
    birth_date: Optional[date] = None
    phone: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None


class PostResponse(CamelModel):
    id: int
    text: str
    images: List[str] = []
    author: UserSnapshot
    created_at: datetime
    updated_at: Optional[datetime] = None
