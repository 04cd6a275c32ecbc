from datetime import datetime, timezone
from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, JSON, String, Table, Text
from sqlalchemy.orm import relationship
from wall.core.database import mapper_registry, metadata
from wall.models.post import Post
from wall.models.profile import Profile


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


profiles_table = Table(
    "profiles",
    metadata,
    Column("id", Integer, primary_key=True, index=True),
    # Exact-match, case-sensitive lookups during login and registration
    Column("email", String, unique=True, index=True, nullable=False),
    # 64-char hex SHA-256 digest
    Column("password_hash", String(64), nullable=False),
    Column("avatar", String, nullable=True),
    Column("about", Text, nullable=True),
    Column("birth_date", Date, nullable=True),
    Column("phone", String, nullable=True),
    Column("first_name", String, nullable=True),
    Column("last_name", String, nullable=True),
)

posts_table = Table(
    "posts",
    metadata,
    Column("id", Integer, primary_key=True, index=True),
    Column("text", Text, nullable=False),
    # Ordered list of upload filenames
    Column("images", JSON, nullable=False, default=list),
    Column("author_id", Integer, ForeignKey("profiles.id"), nullable=False, index=True),
    # Set client-side so that rows written within the same second still order correctly
    Column("created_at", DateTime(timezone=True), default=utcnow, nullable=False),
    Column("updated_at", DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False),
)

mapper_registry.map_imperatively(Profile, profiles_table)
mapper_registry.map_imperatively(
    Post,
    posts_table,
    properties={
        # Author is always needed when a post is rendered, so load it in the same query
        "author": relationship(Profile, lazy="joined"),
    },
)
