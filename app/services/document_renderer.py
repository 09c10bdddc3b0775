"""
Renderizado determinista de un pedido como documento paginado (A4, mm).

El resultado es un modelo de páginas con líneas posicionadas; el PDF se
dibuja a partir de él en `pdf_export`. El mapeo de valores enum a etiquetas
en portugués vive aquí: el modelo de datos guarda sólo los valores.

Orden de secciones: título → pedido/estado/fecha → paciente → resumen de
dientes → configuración por diente (en orden de selección) → observaciones.
Los pies "Página X de Y" se agregan al final, cuando ya se conoce el total.
"""

from dataclasses import dataclass, field
from datetime import datetime

from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit

from app.models.dental_order import DentalOrder, OrderStatus
from app.schemas.dental_order import DentalOrderCreate, ToothConfiguration, ToothReference

# ── Geometría (mm) ───────────────────────────────────
PAGE_WIDTH = 210.0
PAGE_HEIGHT = 297.0
MARGIN_X = 20.0
TOP_Y = 20.0
TOOTH_BLOCK_BREAK_Y = 250.0     # nuevo bloque de diente → página nueva si se pasa
OBSERVATIONS_BREAK_Y = 200.0    # observaciones → página nueva si se pasa
CONTENT_BOTTOM_Y = 280.0        # ninguna línea de contenido por debajo
FOOTER_PAGE_Y = 287.0
FOOTER_SYSTEM_Y = 292.0

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

TITLE = "LABORATÓRIO ODONTOLÓGICO"
SUBTITLE = "Ordem de Serviço Odontológica"
FOOTER_SYSTEM = "Sistema de Ordem de Serviço Odontológica"
BULLET = "•"

# ── Etiquetas de presentación ────────────────────────
STATUS_LABELS = {
    OrderStatus.PENDING: "Pendente",
    OrderStatus.IN_PROGRESS: "Em Andamento",
    OrderStatus.COMPLETED: "Concluído",
    OrderStatus.CANCELLED: "Cancelado",
}

WORK_TYPE_LABELS = {"com_prova": "Com prova", "sem_prova": "Sem prova"}

MATERIAL_LABELS = {
    "zirconia": "Zircônia",
    "pmma": "PMMA",
    "dissilicato": "Dissilicato de Lítio",
}

WORK_CATEGORY_LABELS = {
    "faceta": "Faceta",
    "onlay": "Onlay",
    "sob_implante": "Sob Implante",
    "sob_dente": "Sob dente",
    "placa_mio": "Placa mio",
}

IMPLANT_TYPE_LABELS = {
    "pilar_gt": "Pilar GT",
    "munhao_universal_33x6": "Munhão Universal 3.3x6",
    "munhao_universal_33x4": "Munhão Universal 3.3x4",
    "he_41": "HE 4.1",
    "mini_pilar_sirona": "Mini pilar Sirona",
}

FIXATION_TYPE_LABELS = {"unitaria": "Unitária", "protocolo": "Protocolo"}

TOOTH_SHAPE_LABELS = {"redondo": "Redondo", "quadrado": "Quadrado", "pontudo": "Pontudo"}


def _label(mapping: dict[str, str], value) -> str:
    raw = getattr(value, "value", value)
    return mapping.get(raw, str(raw))


# ── Modelo del documento ─────────────────────────────

@dataclass(frozen=True)
class DocumentLine:
    text: str
    x: float
    y: float
    size: int = 12
    bold: bool = False
    align: str = "left"     # left | center | right

    @property
    def font(self) -> str:
        return FONT_BOLD if self.bold else FONT


@dataclass
class DocumentPage:
    number: int
    lines: list[DocumentLine] = field(default_factory=list)
    footer: list[DocumentLine] = field(default_factory=list)

    def all_lines(self) -> list[DocumentLine]:
        return self.lines + self.footer


@dataclass
class RenderedDocument:
    title: str
    pages: list[DocumentPage]

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def to_text(self) -> str:
        """Texto plano del documento; las páginas se separan con form feed."""
        return "\f".join(
            "\n".join(line.text for line in page.all_lines()) for page in self.pages
        )


@dataclass
class OrderDocumentData:
    """
    Datos a renderizar: un pedido persistido o el estado del formulario
    (borrador aún no guardado, posiblemente sin número de pedido).
    """
    patient_name: str
    selected_teeth: list[ToothReference]
    tooth_configurations: dict[str, ToothConfiguration]
    patient_id: str | None = None
    observations: str | None = None
    order_number: str | None = None
    status: OrderStatus | None = None
    created_at: datetime | None = None

    @classmethod
    def from_order(
        cls,
        order: DentalOrder,
        draft_configurations: dict[str, ToothConfiguration] | None = None,
    ) -> "OrderDocumentData":
        configs = {
            tooth_id: ToothConfiguration.model_validate(raw)
            for tooth_id, raw in (order.tooth_configurations or {}).items()
        }
        if draft_configurations:
            configs.update(draft_configurations)
        return cls(
            patient_name=order.patient_name,
            patient_id=order.patient_id,
            selected_teeth=[ToothReference.model_validate(t) for t in order.selected_teeth],
            tooth_configurations=configs,
            observations=order.observations,
            order_number=order.order_number,
            status=order.status,
            created_at=order.created_at,
        )

    @classmethod
    def from_draft(cls, data: DentalOrderCreate, order_number: str | None = None) -> "OrderDocumentData":
        return cls(
            patient_name=data.patient_name,
            patient_id=data.patient_id,
            selected_teeth=list(data.selected_teeth),
            tooth_configurations=dict(data.tooth_configurations),
            observations=data.observations,
            order_number=order_number,
        )


# ── Layout ───────────────────────────────────────────

class _Layout:
    """Cursor vertical sobre la lista de páginas."""

    def __init__(self):
        self.pages = [DocumentPage(number=1)]
        self.y = TOP_Y

    @property
    def page(self) -> DocumentPage:
        return self.pages[-1]

    def new_page(self) -> None:
        self.pages.append(DocumentPage(number=len(self.pages) + 1))
        self.y = TOP_Y

    def break_if_past(self, threshold: float) -> None:
        if self.y > threshold:
            self.new_page()

    def write(
        self,
        text: str,
        advance: float,
        *,
        size: int = 12,
        bold: bool = False,
        x: float = MARGIN_X,
        align: str = "left",
    ) -> None:
        if self.y > CONTENT_BOTTOM_Y:
            self.new_page()
        self.page.lines.append(DocumentLine(text, x, self.y, size, bold, align))
        self.y += advance

    def write_wrapped(self, text: str, *, size: int = 12, x: float = MARGIN_X) -> None:
        """Parte el texto al ancho útil; cada línea avanza según el tamaño de fuente."""
        max_width = (PAGE_WIDTH - x - MARGIN_X) * mm
        line_height = size * 0.35 + 1
        for paragraph in text.splitlines() or [""]:
            for line in simpleSplit(paragraph, FONT, size, max_width) or [""]:
                self.write(line, line_height, size=size, x=x)

    def skip(self, amount: float) -> None:
        self.y += amount


def _tooth_detail_lines(config: ToothConfiguration) -> list[str]:
    details = []
    if config.work_type:
        details.append(f"Tipo de Trabalho: {_label(WORK_TYPE_LABELS, config.work_type)}")
    if config.material:
        details.append(f"Material: {_label(MATERIAL_LABELS, config.material)}")
    if config.color:
        details.append(f"Cor: {config.color.value}")
    if config.work_category:
        details.append(f"Categoria: {_label(WORK_CATEGORY_LABELS, config.work_category)}")
    if config.is_implant:
        if config.implant_type:
            details.append(f"Tipo de Implante: {_label(IMPLANT_TYPE_LABELS, config.implant_type)}")
        if config.fixation_type:
            details.append(f"Tipo de Fixação: {_label(FIXATION_TYPE_LABELS, config.fixation_type)}")
    if config.is_fixed:
        connected = f" (dentes conectados: {config.connected_teeth})" if config.connected_teeth else ""
        details.append(f"Fixa: Sim{connected}")
    if config.mirror_tooth:
        details.append("Espelhar dente: Sim")
    if config.standard_library:
        details.append("Seguir dente de biblioteca padrão: Sim")
    if config.tooth_shape:
        details.append(f"Formato do dente: {_label(TOOTH_SHAPE_LABELS, config.tooth_shape)}")
    if config.articulator:
        measure = f" ({config.articulator_mm:g} mm)" if config.articulator_mm is not None else ""
        details.append(f"Articulador: Sim{measure}")
    return details


def render_order_document(source: OrderDocumentData, generated_at: datetime) -> RenderedDocument:
    """
    Renderiza el pedido. Mismos datos + misma fecha de emisión → mismo documento.
    """
    layout = _Layout()
    center = PAGE_WIDTH / 2

    # Título
    layout.write(TITLE, 10, size=18, bold=True, x=center, align="center")
    layout.write(SUBTITLE, 10, size=14, x=center, align="center")

    # Pedido / estado / fecha
    if source.order_number:
        layout.write(f"Pedido: {source.order_number}", 7, size=12, bold=True, x=center, align="center")
    if source.status is not None:
        layout.write(f"Status: {_label(STATUS_LABELS, source.status)}", 7, size=10, x=center, align="center")
    layout.skip(3)
    layout.write(
        f"Data: {generated_at.strftime('%d/%m/%Y')} - {generated_at.strftime('%H:%M:%S')}",
        15, size=10, x=PAGE_WIDTH - MARGIN_X, align="right",
    )

    # Paciente
    layout.write("INFORMAÇÕES DO PACIENTE", 8, size=14, bold=True)
    layout.write_wrapped(f"Nome: {source.patient_name}")
    if source.patient_id and source.patient_id.strip():
        layout.write_wrapped(f"ID: {source.patient_id}")
    layout.skip(9)

    # Dientes
    if source.selected_teeth:
        layout.write("DENTES SELECIONADOS", 8, size=14, bold=True)
        numbers = ", ".join(tooth.number for tooth in source.selected_teeth)
        layout.write_wrapped(f"Dentes: {numbers}")
        layout.skip(10)

        layout.write("CONFIGURAÇÕES DOS DENTES", 10, size=14, bold=True)
        for tooth in source.selected_teeth:
            layout.break_if_past(TOOTH_BLOCK_BREAK_Y)
            layout.write(f"Dente {tooth.number} ({tooth.name})", 6, bold=True)
            config = source.tooth_configurations.get(tooth.id) or ToothConfiguration()
            details = _tooth_detail_lines(config)
            if not details:
                details = ["Sem configuração"]
            for detail in details:
                layout.write(f"{BULLET} {detail}", 5, x=MARGIN_X + 5)
            layout.skip(5)

    # Observaciones
    if source.observations and source.observations.strip():
        layout.break_if_past(OBSERVATIONS_BREAK_Y)
        layout.write("OBSERVAÇÕES", 8, size=14, bold=True)
        layout.write_wrapped(source.observations)

    # Pies: sólo cuando ya se conoce el total de páginas
    total = len(layout.pages)
    for page in layout.pages:
        page.footer = [
            DocumentLine(f"Página {page.number} de {total}", center, FOOTER_PAGE_Y, 8, False, "center"),
            DocumentLine(FOOTER_SYSTEM, center, FOOTER_SYSTEM_Y, 8, False, "center"),
        ]

    title = f"{SUBTITLE} {source.order_number}" if source.order_number else SUBTITLE
    return RenderedDocument(title=title, pages=layout.pages)
