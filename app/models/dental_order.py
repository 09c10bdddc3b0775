"""
Modelo DentalOrder: Pedido de laboratorio dental (prótesis por diente).
"""

import enum
from datetime import datetime
from typing import Any

from sqlalchemy import JSON, DateTime, Enum, Integer, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.database import Base

# JSONB en PostgreSQL, JSON genérico en SQLite (tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


class OrderStatus(str, enum.Enum):
    """Estados del flujo de un pedido de laboratorio."""
    PENDING = "pending"             # Recién creado
    IN_PROGRESS = "in_progress"     # En producción
    COMPLETED = "completed"         # Entregado / terminado
    CANCELLED = "cancelled"


class DentalOrder(Base):
    """
    Pedido de servicio del laboratorio para un paciente.
    Sólo el estado (y updated_at) cambia después de la creación.
    """
    __tablename__ = "dental_orders"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    order_number: Mapped[str] = mapped_column(
        String(50), unique=True, nullable=False, index=True,
        comment="ORD-<epoch ms>-<sufijo aleatorio>"
    )

    # ── Paciente ─────────────────────────────────────
    patient_name: Mapped[str] = mapped_column(String(255), nullable=False)
    patient_id: Mapped[str | None] = mapped_column(
        String(100), nullable=True,
        comment="Identificador externo libre del paciente"
    )

    # ── Dientes y configuración ──────────────────────
    selected_teeth: Mapped[list[dict[str, Any]]] = mapped_column(JSONType, nullable=False)
    tooth_configurations: Mapped[dict[str, Any]] = mapped_column(JSONType, nullable=False)
    observations: Mapped[str | None] = mapped_column(Text, nullable=True)

    # ── Archivos adjuntos (rutas opacas) ─────────────
    smile_photo_path: Mapped[str | None] = mapped_column(String(500), nullable=True)
    scanner_file_path: Mapped[str | None] = mapped_column(String(500), nullable=True)

    # ── Estado ───────────────────────────────────────
    status: Mapped[OrderStatus] = mapped_column(
        Enum(
            OrderStatus,
            native_enum=False,
            length=50,
            values_callable=lambda e: [m.value for m in e],
        ),
        default=OrderStatus.PENDING,
        nullable=False,
        index=True,
    )

    # ── Timestamps ───────────────────────────────────
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<DentalOrder {self.order_number} ({self.status.value})>"
