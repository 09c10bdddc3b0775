"""
Repositorio y servicio de pedidos dentales: creación con número único,
consulta por id, listado con filtros/paginación y cambio de estado.
"""

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import get_settings
from app.core.exceptions import (
    DuplicateOrderNumberException,
    NotFoundException,
    StorageException,
    ValidationException,
)
from app.models.dental_order import DentalOrder, OrderStatus
from app.schemas.dental_order import DentalOrderCreate
from app.services.order_number import generate_order_number
from app.services.order_status import INITIAL_STATUS, check_transition, parse_status
from app.services.order_validator import PATIENT_NAME_REQUIRED, TEETH_REQUIRED, validate_order

logger = logging.getLogger(__name__)

settings = get_settings()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@asynccontextmanager
async def _storage_guard(db: AsyncSession, action: str) -> AsyncIterator[None]:
    """Convierte errores inesperados de la DB en StorageException (sin escrituras parciales)."""
    try:
        yield
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error de almacenamiento al %s", action)
        raise StorageException()


# ── Creación ─────────────────────────────────────────

async def create_order(
    db: AsyncSession,
    data: DentalOrderCreate,
    order_number_factory: Callable[[], str] = generate_order_number,
) -> DentalOrder:
    """
    Persiste un pedido nuevo con estado `pending`.
    Asigna id, número de pedido y timestamps (created_at == updated_at).
    Lanza DuplicateOrderNumberException si el número ya existe.
    """
    # Defensa en profundidad: el validador ya garantiza ambas reglas
    if not data.patient_name or not data.patient_name.strip():
        raise ValidationException(PATIENT_NAME_REQUIRED, field="patientName")
    if not data.selected_teeth:
        raise ValidationException(TEETH_REQUIRED, field="selectedTeeth")

    order_number = order_number_factory()
    now = _utcnow()
    order = DentalOrder(
        order_number=order_number,
        patient_name=data.patient_name,
        patient_id=data.patient_id,
        selected_teeth=[tooth.model_dump(mode="json") for tooth in data.selected_teeth],
        tooth_configurations={
            tooth_id: config.to_storage()
            for tooth_id, config in data.tooth_configurations.items()
        },
        observations=data.observations,
        smile_photo_path=data.smile_photo_path,
        scanner_file_path=data.scanner_file_path,
        status=INITIAL_STATUS,
        created_at=now,
        updated_at=now,
    )
    db.add(order)
    try:
        await db.commit()
    except IntegrityError as exc:
        await db.rollback()
        if "order_number" in str(exc.orig):
            logger.warning("Colisión de número de pedido %s", order_number)
            raise DuplicateOrderNumberException(order_number)
        logger.exception("Error de integridad al crear pedido %s", order_number)
        raise StorageException("Failed to create dental order")
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Error de almacenamiento al crear pedido %s", order_number)
        raise StorageException("Failed to create dental order")

    await db.refresh(order)
    logger.info("Pedido creado: id=%s número=%s", order.id, order.order_number)
    return order


async def submit_order(
    db: AsyncSession,
    payload: Any,
    order_number_factory: Callable[[], str] = generate_order_number,
) -> DentalOrder:
    """
    Flujo completo de creación: validar → generar número → persistir.
    Ante una colisión de número reintenta con un número nuevo hasta
    ORDER_NUMBER_MAX_ATTEMPTS veces.
    """
    data = validate_order(payload).unwrap()

    attempts = settings.ORDER_NUMBER_MAX_ATTEMPTS
    for attempt in range(1, attempts + 1):
        try:
            return await create_order(db, data, order_number_factory)
        except DuplicateOrderNumberException:
            if attempt == attempts:
                raise
            logger.warning("Reintentando creación de pedido (intento %s/%s)", attempt + 1, attempts)


# ── Consulta ─────────────────────────────────────────

async def get_order(db: AsyncSession, order_id: int) -> DentalOrder:
    """Obtiene un pedido por ID."""
    async with _storage_guard(db, f"consultar pedido {order_id}"):
        result = await db.execute(select(DentalOrder).where(DentalOrder.id == order_id))
        order = result.scalar_one_or_none()
    if not order:
        raise NotFoundException("Order")
    return order


async def list_orders(
    db: AsyncSession,
    status: OrderStatus | None = None,
    search: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> dict[str, Any]:
    """
    Lista pedidos (más recientes primero) con filtros opcionales.

    - `status`: coincidencia exacta.
    - `search`: subcadena sin distinguir mayúsculas sobre número de pedido,
      nombre o id del paciente (OR entre los tres).
    - Ambos filtros se combinan con AND.

    `total` cuenta todos los pedidos del sistema sin filtros (comportamiento
    histórico del panel); `filtered_total` cuenta sólo los que cumplen los filtros.
    """
    query = select(DentalOrder)

    if status:
        query = query.where(DentalOrder.status == status)
    if search and search.strip():
        term = search.strip()
        query = query.where(
            or_(
                DentalOrder.order_number.icontains(term, autoescape=True),
                DentalOrder.patient_name.icontains(term, autoescape=True),
                DentalOrder.patient_id.icontains(term, autoescape=True),
            )
        )

    async with _storage_guard(db, "listar pedidos"):
        filtered_total = (
            await db.execute(select(func.count()).select_from(query.subquery()))
        ).scalar_one()
        total = (await db.execute(select(func.count(DentalOrder.id)))).scalar_one()

        query = (
            query.order_by(DentalOrder.created_at.desc(), DentalOrder.id.desc())
            .offset(offset)
            .limit(limit)
        )
        result = await db.execute(query)
        orders = list(result.scalars().all())

    return {
        "orders": orders,
        "total": total,
        "filtered_total": filtered_total,
        "limit": limit,
        "offset": offset,
    }


# ── Cambio de estado ─────────────────────────────────

async def update_status(db: AsyncSession, order_id: int, new_status: object) -> DentalOrder:
    """
    Cambia el estado de un pedido y refresca updated_at (aunque el estado no cambie).
    Última escritura gana: no hay control de concurrencia optimista.
    """
    status = parse_status(new_status)
    order = await get_order(db, order_id)

    check_transition(order.order_number, order.status, status)
    order.status = status
    order.updated_at = _utcnow()

    async with _storage_guard(db, f"actualizar estado del pedido {order_id}"):
        await db.commit()
        await db.refresh(order)
    return order
