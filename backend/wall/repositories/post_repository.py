from typing import Any, Dict, List, Optional
from sqlalchemy.orm import Session
from wall.models.post import Post
from wall.repositories import tables  # noqa: F401 - registers the mappings


class PostRepository:
    """Persistence for Post records. Author profiles are loaded eagerly."""

    def __init__(self, db: Session):
        self.db = db

    def find(self, post_id: int) -> Optional[Post]:
        return self.db.get(Post, post_id)

    def find_page(
        self,
        limit: int,
        offset: int,
        descending: bool = True,
        author_id: Optional[int] = None,
    ) -> List[Post]:
        query = self.db.query(Post)
        if author_id is not None:
            query = query.filter(Post.author_id == author_id)
        if descending:
            # id breaks ties between posts stored with identical timestamps
            query = query.order_by(Post.created_at.desc(), Post.id.desc())
        else:
            query = query.order_by(Post.created_at.asc(), Post.id.asc())
        return query.offset(offset).limit(limit).all()

    def create(self, post: Post) -> Post:
        self.db.add(post)
        self.db.commit()
        self.db.refresh(post)
        return post

    def update(self, post: Post, values: Dict[str, Any]) -> Post:
        for key, value in values.items():
            setattr(post, key, value)
        self.db.commit()
        self.db.refresh(post)
        return post

    def delete(self, post_id: int) -> int:
        """Delete by id; returns the number of rows removed (0 when absent)"""
        deleted = self.db.query(Post).filter(Post.id == post_id).delete()
        self.db.commit()
        return deleted

    def image_filenames(self) -> set[str]:
        filenames: set[str] = set()
        for (images,) in self.db.query(Post.images).all():
            filenames.update(images or [])
        return filenames
