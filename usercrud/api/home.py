"""Landing route."""
from fastapi import APIRouter

router = APIRouter()

WELCOME_MESSAGE = "Welcome to the User CRUD API"


@router.get("/", response_model=str)
async def home():
    """Welcome message."""
    return WELCOME_MESSAGE
