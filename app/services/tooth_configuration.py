"""
Validación de la configuración protésica de un diente.
Función pura: sin I/O ni efectos secundarios.
"""

from typing import Any

from pydantic import ValidationError

from app.schemas.common import FieldError, ValidationResult
from app.schemas.dental_order import ToothConfiguration, ToothReference


def pydantic_field_errors(exc: ValidationError, prefix: str) -> list[FieldError]:
    """Convierte los errores de Pydantic en FieldError con ruta `prefix.campo`."""
    errors = []
    for err in exc.errors():
        path = ".".join(str(part) for part in err["loc"])
        field = f"{prefix}.{path}" if path else prefix
        if err["type"] == "extra_forbidden":
            message = f"Unknown field: {path}"
        else:
            message = f"{path}: {err['msg']}" if path else err["msg"]
        errors.append(FieldError(field=field, message=message))
    return errors


def validate_tooth_configuration(
    raw: Any,
    tooth: ToothReference | None = None,
    field: str = "toothConfiguration",
) -> ValidationResult[ToothConfiguration]:
    """
    Valida una configuración cruda (dict camelCase).

    - Los enums rechazan valores fuera del conjunto cerrado.
    - `articulatorMM` debe ser un número finito >= 0.
    - Una configuración vacía es válida.
    - Si se indica `tooth`, un `toothNumber` presente debe coincidir con él.
    """
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        return ValidationResult(errors=[FieldError(field, "Tooth configuration must be an object")])

    try:
        config = ToothConfiguration.model_validate(raw)
    except ValidationError as exc:
        return ValidationResult(errors=pydantic_field_errors(exc, field))

    if tooth is not None and config.tooth_number is not None and config.tooth_number != tooth.number:
        return ValidationResult(errors=[
            FieldError(
                f"{field}.toothNumber",
                f"Configuration tooth number {config.tooth_number} does not match tooth {tooth.number}",
            )
        ])

    return ValidationResult(value=config)
