"""
Schemas de autenticación: registro, login y usuario de la sesión.
"""

from pydantic import BaseModel, ConfigDict, EmailStr, Field

from app.schemas.common import CamelModel


# ── Registro / Login ─────────────────────────────────
class RegisterRequest(CamelModel):
    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=6, max_length=72)
    email: EmailStr | None = None
    full_name: str | None = Field(None, max_length=255)


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


# ── Respuestas ───────────────────────────────────────
class UserResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    username: str
    email: str | None = None
    full_name: str | None = None


class MessageResponse(BaseModel):
    message: str
