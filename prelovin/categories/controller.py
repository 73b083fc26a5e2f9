from typing import List
from fastapi import APIRouter
from ..database.core import DbSession
from ..schemas.category import CategoryResponse
from .service import CategoryService

router = APIRouter(prefix="/categories", tags=["categories"])


@router.get("", response_model=List[CategoryResponse])
def list_categories(db: DbSession):
    return CategoryService.get_categories(db)
