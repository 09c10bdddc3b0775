"""
Router principal de la API.
Agrupa todos los sub-routers.
"""

from fastapi import APIRouter

from app.api.v1.auth import router as auth_router
from app.api.v1.orders import router as orders_router
from app.api.v1.uploads import router as uploads_router

api_v1_router = APIRouter()

api_v1_router.include_router(
    auth_router,
    prefix="/auth",
    tags=["Autenticación"],
)

api_v1_router.include_router(
    orders_router,
    prefix="/orders",
    tags=["Pedidos"],
)

api_v1_router.include_router(
    uploads_router,
    prefix="/upload",
    tags=["Archivos"],
)
