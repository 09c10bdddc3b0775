"""
Schemas para DentalOrder: dientes seleccionados (FDI), configuración
protésica por diente y envoltorios de respuesta `{success, ...}`.
"""

import enum
from datetime import datetime
from typing import Any

from pydantic import ConfigDict, Field, StrictBool, field_validator

from app.models.dental_order import OrderStatus
from app.schemas.common import CamelModel


# ── Valores cerrados de la configuración ─────────────────────

class WorkType(str, enum.Enum):
    COM_PROVA = "com_prova"
    SEM_PROVA = "sem_prova"


class Material(str, enum.Enum):
    ZIRCONIA = "zirconia"
    PMMA = "pmma"
    DISSILICATO = "dissilicato"


class ToothColor(str, enum.Enum):
    A1 = "A1"
    A2 = "A2"
    A3 = "A3"
    BL1 = "BL1"
    BL2 = "BL2"
    BL3 = "BL3"
    BL4 = "BL4"


class WorkCategory(str, enum.Enum):
    FACETA = "faceta"
    ONLAY = "onlay"
    SOB_IMPLANTE = "sob_implante"   # habilita los campos de implante
    SOB_DENTE = "sob_dente"
    PLACA_MIO = "placa_mio"


class ImplantType(str, enum.Enum):
    PILAR_GT = "pilar_gt"
    MUNHAO_UNIVERSAL_33X6 = "munhao_universal_33x6"
    MUNHAO_UNIVERSAL_33X4 = "munhao_universal_33x4"
    HE_41 = "he_41"
    MINI_PILAR_SIRONA = "mini_pilar_sirona"


class FixationType(str, enum.Enum):
    UNITARIA = "unitaria"
    PROTOCOLO = "protocolo"


class ToothShape(str, enum.Enum):
    REDONDO = "redondo"
    QUADRADO = "quadrado"
    PONTUDO = "pontudo"


# ── Diente y configuración ───────────────────────────────────

class ToothReference(CamelModel):
    """Diente agregado al pedido. Inmutable una vez agregado."""

    model_config = ConfigDict(frozen=True)

    number: str = Field(..., min_length=1, description="Código FDI de 2 dígitos")
    name: str = Field(..., min_length=1)
    id: str = Field(..., min_length=1, description="Único dentro del pedido")

    @field_validator("number", "name", "id")
    @classmethod
    def not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v


class ToothConfiguration(CamelModel):
    """
    Configuración protésica de un diente. Todos los campos son opcionales;
    una configuración vacía es válida. Claves desconocidas se rechazan.
    """

    model_config = ConfigDict(extra="forbid")

    # Informativos: el formulario los envía junto a la configuración
    tooth_number: str | None = None
    tooth_name: str | None = None

    work_type: WorkType | None = None
    material: Material | None = None
    color: ToothColor | None = None
    work_category: WorkCategory | None = None

    # Sólo relevantes con work_category == sob_implante
    implant_type: ImplantType | None = None
    fixation_type: FixationType | None = None

    is_fixed: StrictBool = False
    connected_teeth: str | None = None
    mirror_tooth: StrictBool = False
    standard_library: StrictBool = False
    tooth_shape: ToothShape | None = None
    articulator: StrictBool = False
    articulator_mm: float | None = Field(
        None, alias="articulatorMM", ge=0, allow_inf_nan=False, strict=True
    )

    @property
    def is_implant(self) -> bool:
        return self.work_category == WorkCategory.SOB_IMPLANTE

    def to_storage(self) -> dict[str, Any]:
        """Representación dispersa (camelCase) que se guarda en la columna JSON."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ── Creación ─────────────────────────────────────────────────

class DentalOrderCreate(CamelModel):
    """Solicitud de creación ya validada, lista para asignarle número."""

    patient_name: str = Field(..., min_length=1, max_length=255)
    patient_id: str | None = Field(None, max_length=100)
    selected_teeth: list[ToothReference] = Field(..., min_length=1)
    tooth_configurations: dict[str, ToothConfiguration] = Field(default_factory=dict)
    observations: str | None = None
    smile_photo_path: str | None = Field(None, max_length=500)
    scanner_file_path: str | None = Field(None, max_length=500)

    @field_validator("patient_name")
    @classmethod
    def patient_name_not_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Patient name is required")
        return v


# ── Respuestas ───────────────────────────────────────────────

class DentalOrderResponse(CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_number: str
    patient_name: str
    patient_id: str | None = None
    selected_teeth: list[ToothReference]
    tooth_configurations: dict[str, dict[str, Any]]
    observations: str | None = None
    smile_photo_path: str | None = None
    scanner_file_path: str | None = None
    status: OrderStatus
    created_at: datetime
    updated_at: datetime


class OrderEnvelope(CamelModel):
    success: bool = True
    order: DentalOrderResponse


class OrderListResponse(CamelModel):
    success: bool = True
    orders: list[DentalOrderResponse]
    total: int = Field(..., description="Total de pedidos en el sistema, sin filtros")
    filtered_total: int = Field(..., description="Total de pedidos que cumplen los filtros")
    limit: int
    offset: int


class OrderStatusUpdate(CamelModel):
    # str libre: el valor se valida contra OrderStatus en el servicio (400 Invalid status)
    status: Any = None


# ── Catálogo de dientes ──────────────────────────────────────

class ToothGroup(CamelModel):
    group: str
    teeth: list[ToothReference]


class ToothCatalogResponse(CamelModel):
    success: bool = True
    groups: list[ToothGroup]
