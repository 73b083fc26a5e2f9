# prelovin/client.py

import logging
from collections import OrderedDict
from typing import Any, Dict, Iterable, Optional, Tuple

import httpx

logger = logging.getLogger(__name__)

CacheKey = Tuple[str, Tuple[Tuple[str, str], ...]]


def _normalize_params(params: Optional[Dict[str, Any]]) -> Tuple[Tuple[str, str], ...]:
    if not params:
        return ()
    pairs = []
    for name, value in params.items():
        if value is None:
            continue
        if isinstance(value, (list, tuple)):
            pairs.extend((name, str(v)) for v in value)
        else:
            pairs.append((name, str(value)))
    return tuple(sorted(pairs))


class QueryCache:
    """
    Read-through cache for API responses keyed by (path, params).

    Nothing expires on its own; mutations drop the entries of the resources
    they touch through ``invalidate``.
    """

    def __init__(self, memory_size_limit: int = 256):
        self.memory_cache: "OrderedDict[CacheKey, Any]" = OrderedDict()
        self.memory_size_limit = memory_size_limit
        self.cache_stats = {
            "hits": 0,
            "misses": 0,
            "sets": 0,
            "evictions": 0,
            "invalidations": 0,
        }

    @staticmethod
    def make_key(path: str, params: Optional[Dict[str, Any]] = None) -> CacheKey:
        return path, _normalize_params(params)

    def get(self, key: CacheKey) -> Optional[Any]:
        if key in self.memory_cache:
            self.memory_cache.move_to_end(key)
            self.cache_stats["hits"] += 1
            logger.debug(f"Query cache hit: {key}")
            return self.memory_cache[key]
        self.cache_stats["misses"] += 1
        logger.debug(f"Query cache miss: {key}")
        return None

    def set(self, key: CacheKey, value: Any) -> None:
        self.memory_cache[key] = value
        self.memory_cache.move_to_end(key)
        self.cache_stats["sets"] += 1
        while len(self.memory_cache) > self.memory_size_limit:
            self.memory_cache.popitem(last=False)
            self.cache_stats["evictions"] += 1

    def invalidate(self, *prefixes: str) -> int:
        """Drop every entry whose path starts with one of ``prefixes``."""
        stale = [key for key in self.memory_cache if key[0].startswith(prefixes)]
        for key in stale:
            del self.memory_cache[key]
        self.cache_stats["invalidations"] += len(stale)
        if stale:
            logger.debug(f"Invalidated {len(stale)} cached queries for {prefixes}")
        return len(stale)

    def __contains__(self, key: CacheKey) -> bool:
        return key in self.memory_cache

    def __len__(self) -> int:
        return len(self.memory_cache)


class PrelovinClient:
    """
    Thin consumer of the marketplace API with a query cache in front.

    ``http`` is any ``httpx.Client`` already pointed at the server,
    FastAPI's ``TestClient`` included. Non-2xx answers raise
    ``httpx.HTTPStatusError``.
    """

    def __init__(self, http: httpx.Client, token: Optional[str] = None,
                 api_prefix: str = "/api", cache: Optional[QueryCache] = None):
        self.http = http
        self.api_prefix = api_prefix.rstrip("/")
        self.cache = cache if cache is not None else QueryCache()
        self.headers = {"Authorization": f"Bearer {token}"} if token else {}

    def _path(self, path: str) -> str:
        return f"{self.api_prefix}{path}"

    def _query(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        full_path = self._path(path)
        key = QueryCache.make_key(full_path, params)
        cached = self.cache.get(key)
        if cached is not None:
            return cached

        response = self.http.get(full_path, params=list(key[1]), headers=self.headers)
        response.raise_for_status()
        data = response.json()
        self.cache.set(key, data)
        return data

    def _mutate(self, method: str, path: str, invalidates: Iterable[str], json: Any = None) -> Any:
        response = self.http.request(method, self._path(path), json=json, headers=self.headers)
        response.raise_for_status()
        self.cache.invalidate(*(self._path(p) for p in invalidates))
        return response.json()

    # --- Queries ---

    def categories(self):
        return self._query("/categories")

    def products(self, **params):
        return self._query("/products", params)

    def product(self, product_id: int):
        # Detail reads bump the view counter, so they always reach the server
        response = self.http.get(self._path(f"/products/{product_id}"), headers=self.headers)
        response.raise_for_status()
        return response.json()

    def my_products(self):
        return self._query("/my-products")

    def my_product_stats(self):
        return self._query("/my-products/stats")

    def user(self, user_id: str):
        return self._query(f"/users/{user_id}")

    def cart(self):
        return self._query("/cart")

    def orders(self):
        return self._query("/orders")

    def order(self, order_id: int):
        return self._query(f"/orders/{order_id}")

    # --- Mutations ---

    def create_product(self, payload: Dict[str, Any]):
        return self._mutate("POST", "/products", ["/products", "/my-products"], json=payload)

    def update_product(self, product_id: int, payload: Dict[str, Any]):
        return self._mutate("PATCH", f"/products/{product_id}", ["/products", "/my-products", "/cart"], json=payload)

    def delete_product(self, product_id: int):
        return self._mutate("DELETE", f"/products/{product_id}", ["/products", "/my-products", "/cart"])

    def add_to_cart(self, product_id: int, quantity: int = 1):
        return self._mutate("POST", "/cart", ["/cart"], json={"productId": product_id, "quantity": quantity})

    def update_cart_item(self, cart_item_id: int, quantity: int):
        return self._mutate("PATCH", f"/cart/{cart_item_id}", ["/cart"], json={"quantity": quantity})

    def remove_from_cart(self, cart_item_id: int):
        return self._mutate("DELETE", f"/cart/{cart_item_id}", ["/cart"])

    def checkout(self, shipping_address: str, shipping_city: Optional[str] = None,
                 shipping_phone: Optional[str] = None, notes: Optional[str] = None):
        payload = {
            "shippingAddress": shipping_address,
            "shippingCity": shipping_city,
            "shippingPhone": shipping_phone,
            "notes": notes,
        }
        # Stock and sold counts change too
        return self._mutate("POST", "/orders", ["/cart", "/orders", "/products", "/my-products"], json=payload)

    def update_order_status(self, order_id: int, status: str):
        return self._mutate("PATCH", f"/orders/{order_id}/status", ["/orders"], json={"status": status})
