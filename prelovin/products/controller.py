# prelovin/products/controller.py
from decimal import Decimal
from typing import List, Optional
from fastapi import APIRouter, Query, status

from ..auth.service import CurrentUser, CurrentMember
from ..core.exceptions import ForbiddenError, raise_product_not_found
from ..database.core import DbSession
from ..logging import logger
from ..schemas.base import MessageResponse
from ..schemas.product import (
    ProductCreate, ProductUpdate, ProductResponse,
    ProductWithSellerResponse, SellerStatsResponse
)
from .filters import CatalogFilters, SortOption, apply_filters
from .service import ProductService

router = APIRouter(tags=["products"])


@router.get("/products", response_model=List[ProductWithSellerResponse])
def list_products(
    db: DbSession,
    category_id: Optional[int] = Query(None, alias="categoryId"),
    seller_id: Optional[str] = Query(None, alias="sellerId"),
    search: Optional[str] = None,
    category: Optional[str] = Query(None, description="Category slug"),
    condition: Optional[List[str]] = Query(None, description="Condition ids, e.g. seperti-baru"),
    min_price: Optional[Decimal] = Query(None, alias="minPrice", ge=0),
    max_price: Optional[Decimal] = Query(None, alias="maxPrice", ge=0),
    sort_by: SortOption = Query(SortOption.NEWEST, alias="sortBy"),
    exclude: Optional[int] = None,
):
    """Active listings, newest first unless another sort is requested."""
    products = ProductService.get_products(db, category_id=category_id, seller_id=seller_id)
    filters = CatalogFilters(
        search=search,
        category=category,
        conditions=condition or [],
        min_price=min_price,
        max_price=max_price,
        sort_by=sort_by,
        exclude_id=exclude,
    )
    return apply_filters(products, filters)


@router.get("/products/{product_id}", response_model=ProductWithSellerResponse)
def get_product(product_id: int, db: DbSession):
    """Product detail; every successful read counts as one view."""
    product = ProductService.get_product_by_id(db, product_id)
    if not product:
        raise_product_not_found(product_id)

    # Serialized before the increment, so the caller sees the count it read
    response = ProductWithSellerResponse.model_validate(product)
    ProductService.increment_product_views(db, product_id)
    return response


@router.get("/my-products", response_model=List[ProductResponse])
def list_my_products(current_user: CurrentUser, db: DbSession):
    return ProductService.get_products_by_seller(db, current_user.user_id)


@router.get("/my-products/stats", response_model=SellerStatsResponse)
def get_my_product_stats(current_user: CurrentUser, db: DbSession):
    """Seller dashboard totals across all of the caller's listings."""
    return ProductService.get_seller_stats(db, current_user.user_id)


@router.post("/products", response_model=ProductResponse, status_code=status.HTTP_201_CREATED)
def create_product(product_data: ProductCreate, current_user: CurrentMember, db: DbSession):
    return ProductService.create_product(db, current_user.id, product_data)


def _get_owned_product(db, product_id: int, user_id: str, action: str):
    product = ProductService.get_product_by_id(db, product_id)
    if not product:
        raise_product_not_found(product_id)
    if product.seller_id != user_id:
        logger.warning(f"User {user_id} tried to {action} product {product_id} owned by {product.seller_id}")
        raise ForbiddenError(f"Not authorized to {action} this product", context={"product_id": product_id})
    return product


@router.patch("/products/{product_id}", response_model=ProductResponse)
def update_product(product_id: int, product_data: ProductUpdate, current_user: CurrentUser, db: DbSession):
    _get_owned_product(db, product_id, current_user.user_id, "update")
    return ProductService.update_product(db, product_id, product_data)


@router.delete("/products/{product_id}", response_model=MessageResponse)
def delete_product(product_id: int, current_user: CurrentUser, db: DbSession):
    _get_owned_product(db, product_id, current_user.user_id, "delete")
    ProductService.delete_product(db, product_id)
    return MessageResponse(message="Product deleted")
