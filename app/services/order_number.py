"""
Generación del número de pedido: ORD-<epoch ms>-<9 alfanuméricos en mayúscula>.

La unicidad es probabilística (tiempo + azar); el UNIQUE de
`dental_orders.order_number` es la garantía real.
"""

import re
import secrets
import string
import time

ORDER_NUMBER_PREFIX = "ORD"
SUFFIX_LENGTH = 9
SUFFIX_ALPHABET = string.ascii_uppercase + string.digits

ORDER_NUMBER_PATTERN = re.compile(rf"^{ORDER_NUMBER_PREFIX}-\d+-[A-Z0-9]{{{SUFFIX_LENGTH}}}$")


def generate_order_number(now_ms: int | None = None) -> str:
    """Genera un número de pedido nuevo. Se invoca una vez por intento de creación."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    suffix = "".join(secrets.choice(SUFFIX_ALPHABET) for _ in range(SUFFIX_LENGTH))
    return f"{ORDER_NUMBER_PREFIX}-{now_ms}-{suffix}"


def is_valid_order_number(value: str) -> bool:
    return bool(ORDER_NUMBER_PATTERN.match(value))
