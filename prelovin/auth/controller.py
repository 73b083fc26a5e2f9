# prelovin/auth/controller.py
from fastapi import APIRouter
from ..database.core import DbSession
from ..core.exceptions import raise_user_not_found
from ..schemas.user import UserResponse
from ..users.service import UserService
from .service import CurrentUser

router = APIRouter(prefix='/auth', tags=['auth'])


@router.get("/user", response_model=UserResponse)
def get_auth_user(current_user: CurrentUser, db: DbSession):
    """The caller's own record, private fields included."""
    user = UserService.get_user(db, current_user.user_id)
    if not user:
        raise_user_not_found(current_user.user_id)
    return user


@router.post("/user", response_model=UserResponse)
def sync_auth_user(current_user: CurrentUser, db: DbSession):
    """Identity refresh: store the latest profile claims from the provider."""
    return UserService.upsert_user(db, current_user.to_upsert())
