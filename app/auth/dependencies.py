"""
Dependencies de FastAPI para la sesión por cookie.

La identidad se resuelve por request a partir de la sesión firmada
(SessionMiddleware); los servicios de pedidos nunca la leen.
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import CredentialsException
from app.database import get_db
from app.models.user import User
from app.services import auth_service

SESSION_USER_KEY = "user_id"


def login_session(request: Request, user: User) -> None:
    request.session[SESSION_USER_KEY] = user.id


def logout_session(request: Request) -> None:
    request.session.clear()


# ── Obtener usuario actual ───────────────────────────
async def get_current_user(
    request: Request,
    db: AsyncSession = Depends(get_db),
) -> User:
    """
    Dependency que:
    1. Lee el user_id de la cookie de sesión
    2. Carga el usuario de la DB
    """
    user_id = request.session.get(SESSION_USER_KEY)
    if user_id is None:
        raise CredentialsException("Unauthorized")

    user = await auth_service.get_user_by_id(db, user_id)
    if user is None:
        # Sesión de un usuario que ya no existe
        logout_session(request)
        raise CredentialsException("Unauthorized")
    return user
