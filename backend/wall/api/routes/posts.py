from fastapi import APIRouter, Depends, Form, Query, UploadFile, File as FastAPIFile, status
from typing import List, Optional
from wall.api.dependencies import Identity, get_current_identity, get_post_service, get_storage
from wall.core import messages
from wall.core.config import settings
from wall.core.exceptions import BadRequestError
from wall.schemas import PostResponse
from wall.services.post_service import DEFAULT_LIMIT, DEFAULT_OFFSET, DEFAULT_SORT, PostService
from wall.storage.local_storage import LocalStorage

router = APIRouter(
    prefix="/posts",
    tags=["posts"],
    dependencies=[Depends(get_current_identity)],
)


async def collect_images(
    existing_images: Optional[List[str]],
    uploads: Optional[List[UploadFile]],
    storage: LocalStorage,
) -> Optional[List[str]]:
    """
    Build a post's image list: kept filenames first, then new uploads.

    Returns None when the form carried neither field, meaning "leave images alone".
    An existingImages entry with an empty value yields an empty list.
    """
    if existing_images is None and not uploads:
        return None
    kept = [name for name in (existing_images or []) if name]
    uploads = uploads or []
    if len(kept) + len(uploads) > settings.MAX_POST_IMAGES:
        raise BadRequestError(messages.TOO_MANY_IMAGES)
    return kept + await storage.save_images(uploads)


@router.get("", response_model=List[PostResponse])
async def list_posts(
    limit: int = Query(DEFAULT_LIMIT, ge=0),
    offset: int = Query(DEFAULT_OFFSET, ge=0),
    sort: str = Query(DEFAULT_SORT),
    user_id: Optional[int] = Query(None, alias="userId"),
    post_service: PostService = Depends(get_post_service),
):
    """Page through the feed, optionally restricted to one author"""
    # limit=0 means "use the default page size", not an empty page
    return post_service.list(limit or DEFAULT_LIMIT, offset, sort, author_id=user_id)


@router.get("/{post_id}", response_model=PostResponse)
async def get_post(
    post_id: int,
    post_service: PostService = Depends(get_post_service),
):
    return post_service.get(post_id)


@router.post("", response_model=PostResponse, status_code=status.HTTP_201_CREATED)
async def create_post(
    text: str = Form(...),
    images: Optional[List[UploadFile]] = FastAPIFile(None),
    existing_images: Optional[List[str]] = Form(None, alias="existingImages"),
    identity: Identity = Depends(get_current_identity),
    post_service: PostService = Depends(get_post_service),
    storage: LocalStorage = Depends(get_storage),
):
    """Publish a post as the caller"""
    all_images = await collect_images(existing_images, images, storage)
    return post_service.create(identity.user_id, text, all_images or [])


@router.put("/{post_id}", response_model=PostResponse)
async def update_post(
    post_id: int,
    text: Optional[str] = Form(None),
    images: Optional[List[UploadFile]] = FastAPIFile(None),
    existing_images: Optional[List[str]] = Form(None, alias="existingImages"),
    post_service: PostService = Depends(get_post_service),
    storage: LocalStorage = Depends(get_storage),
):
    """Update a post's text and/or images; omitted fields are left unchanged"""
    # 404 before any upload touches the disk
    post_service.get(post_id)
    all_images = await collect_images(existing_images, images, storage)
    return post_service.update(post_id, text=text, images=all_images)


@router.delete("/{post_id}")
async def delete_post(
    post_id: int,
    post_service: PostService = Depends(get_post_service),
):
    """Delete a post. Succeeds whether or not the post exists."""
    post_service.delete(post_id)
    return {"message": "Post deleted successfully"}
