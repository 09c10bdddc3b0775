"""
Endpoints de autenticación: registro, login, logout y usuario actual.
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.dependencies import get_current_user, login_session, logout_session
from app.database import get_db
from app.models.user import User
from app.schemas.auth import LoginRequest, MessageResponse, RegisterRequest, UserResponse
from app.services import auth_service

router = APIRouter()


@router.post("/register", response_model=UserResponse)
async def register(
    data: RegisterRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Crea un usuario del panel e inicia su sesión."""
    user = await auth_service.create_user(db, data)
    login_session(request, user)
    return user


@router.post("/login", response_model=UserResponse)
async def login(
    data: LoginRequest,
    request: Request,
    db: AsyncSession = Depends(get_db),
):
    """Autentica con usuario y contraseña; la sesión queda en la cookie."""
    user = await auth_service.verify_login(db, data.username, data.password)
    login_session(request, user)
    return user


@router.post("/logout", response_model=MessageResponse)
async def logout(request: Request):
    logout_session(request)
    return MessageResponse(message="Logged out successfully")


@router.get("/me", response_model=UserResponse)
async def me(user: User = Depends(get_current_user)):
    """Usuario de la sesión actual."""
    return user
