# prelovin/users/controller.py
from fastapi import APIRouter
from ..database.core import DbSession
from ..core.exceptions import raise_user_not_found
from ..schemas.user import PublicUserResponse
from .service import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("/{user_id}", response_model=PublicUserResponse)
def get_public_user(user_id: str, db: DbSession):
    """Public seller profile; private contact fields are never returned."""
    user = UserService.get_user(db, user_id)
    if not user:
        raise_user_not_found(user_id)
    return user
