"""Authentication API routes."""
from fastapi import APIRouter, Depends
from usercrud.api.deps import get_app_settings, get_user_repository
from usercrud.config import Settings
from usercrud.exceptions import AuthError, NotFoundError
from usercrud.repositories.user_repository import UserRepository
from usercrud.schemas.auth import LoginRequest
from usercrud.services import auth_service

router = APIRouter()


@router.post("/login", response_model=str)
async def login(
    request: LoginRequest,
    repository: UserRepository = Depends(get_user_repository),
    settings: Settings = Depends(get_app_settings),
):
    """User login endpoint. Returns the access token as a JSON string."""
    credentials = request.to_entity().normalize()
    credentials.validate("login")
    
    try:
        user = await repository.find_by_email(credentials.email)
    except NotFoundError:
        raise AuthError("Incorrect Details")
    
    auth_service.verify_password(credentials.password, user.password)
    return auth_service.create_access_token(user.id, settings)
