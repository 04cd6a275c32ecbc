from dataclasses import dataclass
from datetime import date
from typing import Optional

# Placeholder birth date given to freshly registered accounts
DEFAULT_BIRTH_DATE = date(1900, 1, 1)

# Fields a client may change through a profile update
PROFILE_FIELDS = ("avatar", "about", "birth_date", "phone", "first_name", "last_name")


@dataclass(eq=False)
class Profile:
    """
    A user account and its public profile in one record.

    Login credentials (email, password_hash) live next to the profile fields.
    password_hash must never leave the server; use UserSnapshot for output.
    """
    email: str
    password_hash: str
    id: Optional[int] = None
    avatar: str = ""
    about: str = ""
    birth_date: Optional[date] = None
    phone: str = ""
    first_name: str = ""
    last_name: str = ""
