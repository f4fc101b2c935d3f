"""User API routes."""
from typing import List
from fastapi import APIRouter, Depends, Request, Response, status
from usercrud.api.deps import authorize, get_user_repository, parse_user_id, read_payload
from usercrud.repositories.user_repository import UserRepository
from usercrud.schemas.user import UserPayload, UserResponse

router = APIRouter()


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    data: UserPayload,
    response: Response,
    repository: UserRepository = Depends(get_user_repository),
):
    """Register a new user."""
    user = data.to_entity().normalize()
    user.validate("create")
    created = await repository.create(user)
    response.headers["Location"] = f"/users/{created.id}"
    return created


@router.get("", response_model=List[UserResponse])
async def list_users(repository: UserRepository = Depends(get_user_repository)):
    """List up to 100 users."""
    return await repository.find_all()


@router.get("/{user_id}", response_model=UserResponse)
async def get_user(
    user_id: int = Depends(parse_user_id),
    repository: UserRepository = Depends(get_user_repository),
):
    """Get a user by ID."""
    return await repository.find_by_id(user_id)


@router.api_route("/{user_id}", methods=["PUT", "POST"], response_model=UserResponse)
async def update_user(
    request: Request,
    user_id: int = Depends(authorize),
    repository: UserRepository = Depends(get_user_repository),
):
    """
    Update a user.

    Only the owner of the account may update it. Address, email and
    password are all required and fully replace the stored values.
    """
    data = await read_payload(request, UserPayload)
    user = data.to_entity().normalize()
    user.id = user_id
    user.validate("update")
    return await repository.update(user_id, user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: int = Depends(authorize),
    repository: UserRepository = Depends(get_user_repository),
):
    """Delete a user. Deleting an already removed account still succeeds."""
    await repository.delete(user_id)
    return Response(
        status_code=status.HTTP_204_NO_CONTENT,
        headers={"Entity": str(user_id)},
    )
