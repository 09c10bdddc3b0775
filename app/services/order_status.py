"""
Máquina de estados del pedido.

El almacenamiento no prohíbe ninguna transición entre los cuatro estados;
ALLOWED_TRANSITIONS describe el flujo previsto y las transiciones fuera de él
sólo se registran como advertencia.
"""

import logging

from app.core.exceptions import InvalidStatusException
from app.models.dental_order import OrderStatus

logger = logging.getLogger(__name__)

INITIAL_STATUS = OrderStatus.PENDING

ALLOWED_TRANSITIONS: dict[OrderStatus, list[OrderStatus]] = {
    OrderStatus.PENDING: [OrderStatus.IN_PROGRESS, OrderStatus.CANCELLED],
    OrderStatus.IN_PROGRESS: [OrderStatus.COMPLETED, OrderStatus.CANCELLED],
    OrderStatus.COMPLETED: [],
    OrderStatus.CANCELLED: [],
}


def parse_status(value: object) -> OrderStatus:
    """Convierte un valor crudo en OrderStatus o lanza InvalidStatusException."""
    if isinstance(value, OrderStatus):
        return value
    if isinstance(value, str):
        try:
            return OrderStatus(value)
        except ValueError:
            pass
    raise InvalidStatusException(value)


def is_intended_transition(current: OrderStatus, new: OrderStatus) -> bool:
    """True si la transición sigue el flujo previsto (repetir el estado actual también cuenta)."""
    return current == new or new in ALLOWED_TRANSITIONS.get(current, [])


def check_transition(order_number: str, current: OrderStatus, new: OrderStatus) -> None:
    """Registra la transición; nunca la bloquea."""
    if is_intended_transition(current, new):
        logger.info("Pedido %s: %s -> %s", order_number, current.value, new.value)
    else:
        logger.warning(
            "Pedido %s: transición fuera del flujo previsto %s -> %s",
            order_number, current.value, new.value,
        )
