"""
Validador de pedidos: transforma el payload crudo del formulario en una
solicitud de creación tipada (DentalOrderCreate) o una lista de errores.

Es puro: no hace I/O y no lanza excepciones de negocio. El llamador
reporta el primer error, igual que el formulario web.
"""

from typing import Any

from pydantic import ValidationError

from app.schemas.common import FieldError, ValidationResult
from app.schemas.dental_order import DentalOrderCreate, ToothConfiguration, ToothReference
from app.services.tooth_catalog import is_valid_tooth_number
from app.services.tooth_configuration import pydantic_field_errors, validate_tooth_configuration

PATIENT_NAME_REQUIRED = "Patient name is required"
TEETH_REQUIRED = "At least one tooth must be selected"

_OPTIONAL_TEXT_FIELDS = {
    "patientId": "patient_id",
    "observations": "observations",
    "smilePhotoPath": "smile_photo_path",
    "scannerFilePath": "scanner_file_path",
}


def _validate_patient_name(payload: dict, errors: list[FieldError]) -> str | None:
    value = payload.get("patientName")
    if not isinstance(value, str) or not value.strip():
        errors.append(FieldError("patientName", PATIENT_NAME_REQUIRED))
        return None
    return value.strip()


def _validate_teeth(payload: dict, errors: list[FieldError]) -> list[ToothReference]:
    raw_teeth = payload.get("selectedTeeth")
    if not isinstance(raw_teeth, list) or not raw_teeth:
        errors.append(FieldError("selectedTeeth", TEETH_REQUIRED))
        return []

    teeth: list[ToothReference] = []
    seen_ids: set[str] = set()
    seen_numbers: set[str] = set()
    for index, raw in enumerate(raw_teeth):
        if not isinstance(raw, dict):
            errors.append(FieldError("selectedTeeth", f"Tooth #{index + 1} must be an object"))
            continue
        try:
            tooth = ToothReference.model_validate(raw)
        except ValidationError as exc:
            first = pydantic_field_errors(exc, f"selectedTeeth.{index}")[0]
            errors.append(FieldError("selectedTeeth", f"Tooth #{index + 1}: {first.message}"))
            continue

        if not is_valid_tooth_number(tooth.number):
            errors.append(FieldError("selectedTeeth", f"Invalid FDI tooth number: {tooth.number}"))
            continue
        if tooth.id in seen_ids:
            errors.append(FieldError("selectedTeeth", f"Duplicate tooth id: {tooth.id}"))
            continue
        if tooth.number in seen_numbers:
            errors.append(FieldError("selectedTeeth", f"Tooth {tooth.number} was selected more than once"))
            continue

        seen_ids.add(tooth.id)
        seen_numbers.add(tooth.number)
        teeth.append(tooth)
    return teeth


def _validate_configurations(
    payload: dict,
    teeth: list[ToothReference],
    errors: list[FieldError],
) -> dict[str, ToothConfiguration]:
    raw_configs = payload.get("toothConfigurations")
    if raw_configs is None:
        return {}
    if not isinstance(raw_configs, dict):
        errors.append(FieldError("toothConfigurations", "Tooth configurations must be an object"))
        return {}

    teeth_by_id = {tooth.id: tooth for tooth in teeth}
    configs: dict[str, ToothConfiguration] = {}
    for tooth_id, raw in raw_configs.items():
        tooth = teeth_by_id.get(tooth_id)
        if tooth is None:
            # Se rechaza para que lo guardado no diverja de lo mostrado
            errors.append(FieldError(
                "toothConfigurations",
                f"Configuration references unknown tooth: {tooth_id}",
            ))
            continue
        result = validate_tooth_configuration(raw, tooth=tooth, field=f"toothConfigurations.{tooth_id}")
        if result.ok:
            configs[tooth_id] = result.value
        else:
            errors.extend(result.errors)
    return configs


def _validate_optional_text(payload: dict, errors: list[FieldError]) -> dict[str, str | None]:
    values: dict[str, str | None] = {}
    for key, attr in _OPTIONAL_TEXT_FIELDS.items():
        value = payload.get(key)
        if value is not None and not isinstance(value, str):
            errors.append(FieldError(key, f"{key} must be a string"))
            continue
        values[attr] = value if value and value.strip() else None
    return values


def validate_order(payload: Any) -> ValidationResult[DentalOrderCreate]:
    """
    Valida un envío del formulario.

    Reglas:
    - `patientName` obligatorio y no vacío tras quitar espacios.
    - `selectedTeeth` no vacío; cada diente con number/name/id no vacíos,
      número FDI válido, ids y números únicos.
    - `toothConfigurations` sólo con claves de dientes seleccionados; cada
      valor pasa la validación de configuración.
    - Campos de texto opcionales: sólo strings.

    Claves desconocidas en el nivel superior (ej: `timestamp`) se ignoran.
    """
    if not isinstance(payload, dict):
        return ValidationResult(errors=[FieldError("body", "Invalid order payload")])

    errors: list[FieldError] = []
    patient_name = _validate_patient_name(payload, errors)
    teeth = _validate_teeth(payload, errors)
    configs = _validate_configurations(payload, teeth, errors)
    optional = _validate_optional_text(payload, errors)

    if errors:
        return ValidationResult(errors=errors)

    try:
        request = DentalOrderCreate(
            patient_name=patient_name,
            selected_teeth=teeth,
            tooth_configurations=configs,
            **optional,
        )
    except ValidationError as exc:
        # Límites de longitud de columnas (max_length)
        return ValidationResult(errors=pydantic_field_errors(exc, "order"))
    return ValidationResult(value=request)


def validate_configuration_overrides(
    payload: Any,
    teeth: list[ToothReference],
) -> ValidationResult[dict[str, ToothConfiguration]]:
    """
    Configuraciones en borrador para un pedido ya guardado (sólo se usan
    al exportar el documento; nunca se persisten).

    Acepta `{"toothConfigurations": {...}}` o un cuerpo vacío; las claves
    deben corresponder a dientes del pedido.
    """
    if payload is None:
        return ValidationResult(value={})
    if not isinstance(payload, dict):
        return ValidationResult(errors=[FieldError("body", "Invalid order payload")])

    errors: list[FieldError] = []
    configs = _validate_configurations(payload, teeth, errors)
    if errors:
        return ValidationResult(errors=errors)
    return ValidationResult(value=configs)
