"""
Script para crear un usuario del panel administrativo.

Uso:
    python scripts/create_admin.py --username admin
    python scripts/create_admin.py --username admin --email admin@lab.com --full-name "Admin"

La contraseña se pide por consola (no queda en el historial del shell).

Requisitos:
    - La migración a1f3c9d2e7b4 debe estar aplicada
"""

import argparse
import getpass
import sys
from pathlib import Path

# Agregar el directorio raíz al path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

import asyncio
from pydantic import ValidationError
from app.core.exceptions import ConflictException
from app.database import async_session_factory
from app.schemas.auth import RegisterRequest
from app.services.auth_service import create_user


async def create_admin(username: str, password: str, email: str | None, full_name: str | None) -> None:
    try:
        data = RegisterRequest(
            username=username, password=password, email=email, full_name=full_name
        )
    except ValidationError as exc:
        print(f"ERROR: datos inválidos: {exc.errors()[0]['msg']}")
        sys.exit(1)

    async with async_session_factory() as session:
        try:
            user = await create_user(session, data)
        except ConflictException as exc:
            print(f"ERROR: {exc.detail}")
            sys.exit(1)

    print(f"Usuario creado: {user.username} (id={user.id})")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Crear usuario del panel administrativo")
    parser.add_argument("--username", required=True, help="Nombre de usuario (mín. 3 caracteres)")
    parser.add_argument("--email", default=None)
    parser.add_argument("--full-name", default=None)
    args = parser.parse_args()

    password = getpass.getpass("Contraseña: ")
    if password != getpass.getpass("Repetir contraseña: "):
        print("ERROR: las contraseñas no coinciden")
        sys.exit(1)

    asyncio.run(create_admin(args.username, password, args.email, args.full_name))
