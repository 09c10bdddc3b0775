"""
Excepciones HTTP personalizadas para la API.

Cada excepción lleva un mensaje corto apto para el usuario; los detalles
internos sólo se registran en el log.
"""

from fastapi import HTTPException, status


class CredentialsException(HTTPException):
    """Sesión ausente o credenciales inválidas (401)."""

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
        )


class NotFoundException(HTTPException):
    """Recurso no encontrado (404)."""

    def __init__(self, resource: str = "Order", detail: str | None = None):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=detail or f"{resource} not found",
        )


class ConflictException(HTTPException):
    """Dato duplicado reportado como error de entrada (400), ej: username."""

    def __init__(self, detail: str = "Resource already exists"):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )


class ValidationException(HTTPException):
    """Entrada inválida (400). `field` indica el primer campo con error."""

    def __init__(self, detail: str = "Validation error", field: str | None = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=detail,
        )
        self.field = field


class InvalidStatusException(HTTPException):
    """Estado fuera del conjunto permitido (400)."""

    def __init__(self, value: object = None):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Invalid status",
        )
        self.value = value


class DuplicateOrderNumberException(HTTPException):
    """
    Colisión del número de pedido (409).
    Es recuperable: se reintenta la creación con un número nuevo.
    """

    def __init__(self, order_number: str):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            detail="Order number already exists, please retry",
        )
        self.order_number = order_number


class StorageException(HTTPException):
    """Fallo inesperado de persistencia (500)."""

    def __init__(self, detail: str = "Failed to access order storage"):
        super().__init__(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=detail,
        )
