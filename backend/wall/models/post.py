from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
from wall.models.profile import Profile


@dataclass(eq=False)
class Post:
    """
    A wall post.

    author is fixed at creation; images is an ordered list of upload filenames.
    Timestamps are filled in by the store on insert and update.
    """
    text: str
    author: Optional[Profile] = None
    images: List[str] = field(default_factory=list)
    id: Optional[int] = None
    author_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
