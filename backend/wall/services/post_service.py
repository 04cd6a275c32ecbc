import logging
from typing import List, Optional
from wall.core import messages
from wall.core.exceptions import NotFoundError
from wall.models.post import Post
from wall.repositories.post_repository import PostRepository
from wall.repositories.profile_repository import ProfileRepository

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 5
DEFAULT_OFFSET = 0
DEFAULT_SORT = "DESC"


class PostService:
    """Feed listing and post CRUD"""

    def __init__(self, posts: PostRepository, profiles: ProfileRepository):
        self.posts = posts
        self.profiles = profiles

    def list(
        self,
        limit: int = DEFAULT_LIMIT,
        offset: int = DEFAULT_OFFSET,
        sort: str = DEFAULT_SORT,
        author_id: Optional[int] = None,
    ) -> List[Post]:
        """Posts ordered by creation time, newest first unless sort is 'ASC'"""
        descending = (sort or DEFAULT_SORT).upper() != "ASC"
        return self.posts.find_page(limit, offset, descending=descending, author_id=author_id)

    def get(self, post_id: int) -> Post:
        post = self.posts.find(post_id)
        if post is None:
            raise NotFoundError(messages.POST_NOT_FOUND)
        return post

    def create(self, author_id: int, text: str, images: List[str]) -> Post:
        # The token may outlive its account, so the author has to be checked here
        author = self.profiles.find(author_id)
        if author is None:
            raise NotFoundError(messages.AUTHOR_NOT_FOUND)
        post = self.posts.create(Post(text=text, images=list(images), author=author))
        logger.info(f"Post {post.id} created by profile {author_id}")
        return post

    def update(self, post_id: int, text: Optional[str] = None, images: Optional[List[str]] = None) -> Post:
        """
        Overwrite text and/or images.

        None leaves a field unchanged. An empty images list clears the images.
        """
        post = self.posts.find(post_id)
        if post is None:
            raise NotFoundError(messages.POST_NOT_FOUND)
        values = {}
        if text is not None:
            values["text"] = text
        if images is not None:
            values["images"] = list(images)
        return self.posts.update(post, values)

    def delete(self, post_id: int) -> None:
        """Delete a post; deleting an id that doesn't exist is not an error"""
        if self.posts.delete(post_id):
            logger.info(f"Post {post_id} deleted")
