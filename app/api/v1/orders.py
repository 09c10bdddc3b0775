"""
Endpoints de pedidos dentales.

No requieren sesión; los endpoints de archivos sí (ver DESIGN.md).
"""

from datetime import datetime
from typing import Any
from urllib.parse import quote

from fastapi import APIRouter, Body, Depends, Query, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.exceptions import ValidationException
from app.database import get_db
from app.schemas.dental_order import (
    DentalOrderResponse,
    OrderEnvelope,
    OrderListResponse,
    OrderStatusUpdate,
    ToothCatalogResponse,
    ToothReference,
)
from app.services import dental_order_service
from app.services.document_renderer import OrderDocumentData, render_order_document
from app.services.order_number import is_valid_order_number
from app.services.order_status import parse_status
from app.services.order_validator import validate_configuration_overrides, validate_order
from app.services.pdf_export import export_filename, write_pdf
from app.services.tooth_catalog import build_tooth_catalog

settings = get_settings()

router = APIRouter()


def _pdf_response(source: OrderDocumentData) -> Response:
    generated_at = datetime.now()
    document = render_order_document(source, generated_at)
    filename = export_filename(source.patient_name, source.patient_id, generated_at.date())
    ascii_name = filename.encode("ascii", "ignore").decode().replace('"', "") or "ordem_servico.pdf"
    return Response(
        content=write_pdf(document),
        media_type="application/pdf",
        headers={
            "Content-Disposition": (
                f"attachment; filename=\"{ascii_name}\"; filename*=UTF-8''{quote(filename)}"
            )
        },
    )


@router.post("", response_model=OrderEnvelope)
async def create_dental_order(
    payload: Any = Body(...),
    db: AsyncSession = Depends(get_db),
):
    """Valida el formulario, asigna número de pedido y lo guarda como `pending`."""
    order = await dental_order_service.submit_order(db, payload)
    return OrderEnvelope(order=DentalOrderResponse.model_validate(order))


@router.get("", response_model=OrderListResponse)
async def list_dental_orders(
    status: str | None = Query(None),
    search: str | None = Query(None),
    limit: int | None = Query(None),
    offset: int = Query(0),
    db: AsyncSession = Depends(get_db),
):
    """Lista pedidos con filtro de estado, búsqueda libre y paginación."""
    status_filter = parse_status(status) if status else None
    if limit is None:
        limit = settings.ORDERS_DEFAULT_LIMIT
    limit = max(1, min(limit, settings.ORDERS_MAX_LIMIT))
    offset = max(0, offset)

    result = await dental_order_service.list_orders(db, status_filter, search, limit, offset)
    return OrderListResponse(
        orders=[DentalOrderResponse.model_validate(o) for o in result["orders"]],
        total=result["total"],
        filtered_total=result["filtered_total"],
        limit=result["limit"],
        offset=result["offset"],
    )


@router.post("/pdf-preview")
async def preview_order_pdf(payload: Any = Body(...)):
    """
    PDF del estado actual del formulario, sin guardar nada.
    Acepta `orderNumber` opcional si el pedido ya fue enviado.
    """
    data = validate_order(payload).unwrap()
    order_number = payload.get("orderNumber")
    if order_number is not None and (
        not isinstance(order_number, str) or not is_valid_order_number(order_number)
    ):
        raise ValidationException("Invalid order number", field="orderNumber")
    return _pdf_response(OrderDocumentData.from_draft(data, order_number=order_number))


@router.get("/teeth", response_model=ToothCatalogResponse)
async def get_tooth_catalog():
    """Dientes permanentes (FDI) agrupados por cuadrante para el selector del formulario."""
    return ToothCatalogResponse(groups=build_tooth_catalog())


@router.get("/{order_id}", response_model=OrderEnvelope)
async def get_dental_order(
    order_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Obtiene el detalle de un pedido."""
    order = await dental_order_service.get_order(db, order_id)
    return OrderEnvelope(order=DentalOrderResponse.model_validate(order))


@router.patch("/{order_id}/status", response_model=OrderEnvelope)
async def update_dental_order_status(
    order_id: int,
    data: OrderStatusUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Cambia el estado del pedido (pending, in_progress, completed, cancelled)."""
    order = await dental_order_service.update_status(db, order_id, data.status)
    return OrderEnvelope(order=DentalOrderResponse.model_validate(order))


@router.get("/{order_id}/pdf")
async def export_order_pdf(
    order_id: int,
    db: AsyncSession = Depends(get_db),
):
    """Descarga la orden de servicio en PDF."""
    order = await dental_order_service.get_order(db, order_id)
    return _pdf_response(OrderDocumentData.from_order(order))


@router.post("/{order_id}/pdf")
async def export_order_pdf_with_drafts(
    order_id: int,
    payload: Any = Body(None),
    db: AsyncSession = Depends(get_db),
):
    """
    PDF de un pedido guardado con configuraciones en borrador del formulario
    (`toothConfigurations`) por encima de las guardadas. No modifica el pedido.
    """
    order = await dental_order_service.get_order(db, order_id)
    teeth = [ToothReference.model_validate(t) for t in order.selected_teeth]
    drafts = validate_configuration_overrides(payload, teeth).unwrap()
    return _pdf_response(OrderDocumentData.from_order(order, draft_configurations=drafts))
