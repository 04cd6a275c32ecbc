from fastapi import APIRouter, Depends, status
from wall.api.dependencies import Identity, get_auth_service, get_current_identity, get_profile_service
from wall.schemas import AuthResponse, Credentials, UserSnapshot
from wall.services.auth_service import AuthService
from wall.services.profile_service import ProfileService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def register(
    credentials: Credentials,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Create an account and sign it in"""
    return auth_service.register(credentials.email, credentials.password).to_dict()


@router.post("/login", response_model=AuthResponse)
async def login(
    credentials: Credentials,
    auth_service: AuthService = Depends(get_auth_service),
):
    """Exchange email and password for an access/refresh token pair"""
    return auth_service.login(credentials.email, credentials.password).to_dict()


@router.get("/me", response_model=UserSnapshot)
async def get_current_user_info(
    identity: Identity = Depends(get_current_identity),
    profile_service: ProfileService = Depends(get_profile_service),
):
    """Get the profile the bearer token belongs to"""
    return profile_service.get(identity.user_id)
