"""API routes."""
from fastapi import APIRouter
from usercrud.api import auth, home, users

api_router = APIRouter()

api_router.include_router(home.router, tags=["Home"])
api_router.include_router(auth.router, tags=["Authentication"])
api_router.include_router(users.router, prefix="/users", tags=["Users"])
