"""
Modelos SQLAlchemy: exportar todos para que Alembic los detecte.
"""

from app.models.user import User
from app.models.dental_order import DentalOrder, OrderStatus

__all__ = [
    "User",
    "DentalOrder",
    "OrderStatus",
]
