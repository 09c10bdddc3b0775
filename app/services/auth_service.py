"""
Servicio de autenticación: alta de usuarios y verificación de login.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import ConflictException, CredentialsException
from app.core.security import hash_password, verify_password
from app.models.user import User
from app.schemas.auth import RegisterRequest

logger = logging.getLogger(__name__)


async def get_user_by_username(db: AsyncSession, username: str) -> User | None:
    result = await db.execute(select(User).where(User.username == username))
    return result.scalar_one_or_none()


async def get_user_by_id(db: AsyncSession, user_id: int) -> User | None:
    result = await db.execute(select(User).where(User.id == user_id))
    return result.scalar_one_or_none()


async def create_user(db: AsyncSession, data: RegisterRequest) -> User:
    """Crea un usuario con la contraseña hasheada (bcrypt)."""
    if await get_user_by_username(db, data.username):
        raise ConflictException("Username already exists")

    user = User(
        username=data.username,
        hashed_password=hash_password(data.password),
        email=data.email,
        full_name=data.full_name,
    )
    db.add(user)
    try:
        await db.commit()
    except IntegrityError:
        # Alta concurrente con el mismo username
        await db.rollback()
        raise ConflictException("Username already exists")
    await db.refresh(user)
    logger.info("Usuario creado: %s (id=%s)", user.username, user.id)
    return user


async def verify_login(db: AsyncSession, username: str, password: str) -> User:
    """Retorna el usuario si las credenciales son válidas; si no, CredentialsException."""
    user = await get_user_by_username(db, username)
    if not user:
        logger.warning("Login fallido: usuario no encontrado username=%s", username)
        raise CredentialsException("Invalid username or password")

    if not verify_password(password, user.hashed_password):
        logger.warning("Login fallido: contraseña incorrecta para user_id=%s", user.id)
        raise CredentialsException("Invalid username or password")

    return user
