"""
Tipos compartidos por los schemas: base camelCase y resultado de validación.
"""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from app.core.exceptions import ValidationException

T = TypeVar("T")


class CamelModel(BaseModel):
    """Schemas expuestos en la API: snake_case en Python, camelCase en JSON."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


@dataclass(frozen=True)
class FieldError:
    """Error de validación asociado a un campo del payload."""
    field: str
    message: str


@dataclass
class ValidationResult(Generic[T]):
    """
    Resultado de una validación pura: el valor tipado o la lista de errores
    en el orden en que se detectaron.
    """
    value: T | None = None
    errors: list[FieldError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.errors

    @property
    def first_error(self) -> FieldError | None:
        return self.errors[0] if self.errors else None

    def unwrap(self) -> T:
        """Retorna el valor o lanza ValidationException con el primer error."""
        first = self.first_error
        if first is not None:
            raise ValidationException(first.message, field=first.field)
        return self.value
