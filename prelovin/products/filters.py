# prelovin/products/filters.py
# Catalog browsing filters applied over the active product list

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum
from typing import Iterable, List, Optional

from .models import Product, condition_slug


class SortOption(str, Enum):
    NEWEST = "newest"
    PRICE_LOW = "price-low"
    PRICE_HIGH = "price-high"
    MOST_VIEWED = "most-viewed"


@dataclass
class CatalogFilters:
    search: Optional[str] = None
    category: Optional[str] = None
    conditions: List[str] = field(default_factory=list)
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    sort_by: SortOption = SortOption.NEWEST
    exclude_id: Optional[int] = None


def _matches_search(product: Product, search: str) -> bool:
    needle = search.lower()
    if needle in product.name.lower():
        return True
    return bool(product.description) and needle in product.description.lower()


def _created_key(product: Product) -> float:
    # Missing timestamps sort as the epoch
    return product.created_at.timestamp() if product.created_at else 0.0


def apply_filters(products: Iterable[Product], filters: CatalogFilters) -> List[Product]:
    """Filter then sort, the way the storefront home page does."""
    result = list(products)

    if filters.exclude_id is not None:
        result = [p for p in result if p.id != filters.exclude_id]

    if filters.search:
        result = [p for p in result if _matches_search(p, filters.search)]

    if filters.category:
        result = [p for p in result if p.category is not None and p.category.slug == filters.category]

    if filters.conditions:
        wanted = set(filters.conditions)
        result = [p for p in result if condition_slug(_condition_value(p)) in wanted]

    if filters.min_price is not None:
        result = [p for p in result if Decimal(p.price) >= filters.min_price]

    if filters.max_price is not None:
        result = [p for p in result if Decimal(p.price) <= filters.max_price]

    return sort_products(result, filters.sort_by)


def sort_products(products: List[Product], sort_by: SortOption) -> List[Product]:
    if sort_by == SortOption.PRICE_LOW:
        return sorted(products, key=lambda p: Decimal(p.price))
    if sort_by == SortOption.PRICE_HIGH:
        return sorted(products, key=lambda p: Decimal(p.price), reverse=True)
    if sort_by == SortOption.MOST_VIEWED:
        return sorted(products, key=lambda p: p.views, reverse=True)
    return sorted(products, key=_created_key, reverse=True)


def _condition_value(product: Product) -> str:
    condition = product.condition
    return condition.value if isinstance(condition, Enum) else str(condition)
