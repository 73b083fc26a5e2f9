# prelovin/api/main.py

from fastapi import APIRouter
from ..auth.controller import router as auth_router
from ..users.controller import router as users_router
from ..categories.controller import router as categories_router
from ..products.controller import router as products_router
from ..cart.controller import router as cart_router
from ..orders.controller import router as orders_router

# Routers carry their own prefixes; the app mounts this under settings.API_PREFIX
api_router = APIRouter()

api_router.include_router(auth_router)
api_router.include_router(users_router)
api_router.include_router(categories_router)
api_router.include_router(products_router)
api_router.include_router(cart_router)
api_router.include_router(orders_router)
