from fastapi import APIRouter, Depends, UploadFile, File as FastAPIFile, status
from wall.api.dependencies import get_current_identity, get_profile_service, get_storage
from wall.schemas import ProfileCreate, ProfileUpdate, UserSnapshot
from wall.services.profile_service import ProfileService
from wall.storage.local_storage import LocalStorage

# Every profile route sits behind the access guard
router = APIRouter(
    prefix="/profile",
    tags=["profile"],
    dependencies=[Depends(get_current_identity)],
)


@router.post("", response_model=UserSnapshot, status_code=status.HTTP_201_CREATED)
async def create_profile(
    profile: ProfileCreate,
    profile_service: ProfileService = Depends(get_profile_service),
):
    """Create a profile record without login credentials"""
    return profile_service.create(profile.model_dump())


@router.get("/{profile_id}", response_model=UserSnapshot)
async def get_profile(
    profile_id: int,
    profile_service: ProfileService = Depends(get_profile_service),
):
    return profile_service.get(profile_id)


@router.put("/{profile_id}", response_model=UserSnapshot)
async def update_profile(
    profile_id: int,
    profile_update: ProfileUpdate,
    profile_service: ProfileService = Depends(get_profile_service),
):
    """Update only the fields present in the body"""
    return profile_service.update(profile_id, profile_update.model_dump(exclude_unset=True))


@router.post("/{profile_id}/avatar", response_model=UserSnapshot)
async def upload_avatar(
    profile_id: int,
    file: UploadFile = FastAPIFile(...),
    profile_service: ProfileService = Depends(get_profile_service),
    storage: LocalStorage = Depends(get_storage),
):
    """Upload an image and make it the profile's avatar"""
    # Fail before writing anything to disk if the profile is missing
    profile_service.get(profile_id)
    filename = await storage.save_image(file)
    return profile_service.update_avatar(profile_id, filename)
