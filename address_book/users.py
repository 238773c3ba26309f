"""User profile routes for the Address Book API."""

from fastapi import APIRouter, Depends

from .auth import get_current_user
from . import schemas

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/me", response_model=schemas.UserResponse)
def read_me(current_user=Depends(get_current_user)):
    """
    Retrieve details of the currently authenticated user.

    Args:
        current_user (User): Authenticated user obtained from JWT token.

    Returns:
        UserResponse: User profile wrapped as ``{"item": ...}``.
    """
    return {"item": current_user}
