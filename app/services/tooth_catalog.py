"""
Catálogo de dientes permanentes (notación FDI) con etiquetas en portugués.
"""

import time

from app.schemas.dental_order import ToothReference

_QUADRANTS = {
    "1": "Quadrante Superior Direito",
    "2": "Quadrante Superior Esquerdo",
    "3": "Quadrante Inferior Esquerdo",
    "4": "Quadrante Inferior Direito",
}

# Posición dentro del cuadrante (1-8) → nombre anatómico
_POSITIONS = {
    "1": "Incisivo Central",
    "2": "Incisivo Lateral",
    "3": "Canino",
    "4": "1º Pré-Molar",
    "5": "2º Pré-Molar",
    "6": "1º Molar",
    "7": "2º Molar",
    "8": "3º Molar (Siso)",
}

# "11" → ("11 - Incisivo Central", "Quadrante Superior Direito"), en orden de cuadrante
PERMANENT_TEETH: dict[str, tuple[str, str]] = {
    f"{q}{p}": (f"{q}{p} - {name}", group)
    for q, group in _QUADRANTS.items()
    for p, name in _POSITIONS.items()
}

VALID_TOOTH_NUMBERS = frozenset(PERMANENT_TEETH)


def is_valid_tooth_number(number: str) -> bool:
    return number in VALID_TOOTH_NUMBERS


def tooth_label(number: str) -> str:
    """Etiqueta de presentación, ej: '16 - 1º Molar'."""
    try:
        return PERMANENT_TEETH[number][0]
    except KeyError:
        raise ValueError(f"Número de dente FDI inválido: {number}") from None


def tooth_group(number: str) -> str:
    return PERMANENT_TEETH[number][1]


def teeth_by_group() -> dict[str, list[str]]:
    """Números agrupados por cuadrante, para armar el selector del formulario."""
    grouped: dict[str, list[str]] = {}
    for number in PERMANENT_TEETH:
        grouped.setdefault(tooth_group(number), []).append(number)
    return grouped


def make_tooth_reference(number: str, now_ms: int | None = None) -> ToothReference:
    """
    Crea la referencia de un diente agregado al pedido.
    El id sigue el formato `tooth_<número>_<epoch ms>`.
    """
    label = tooth_label(number)
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return ToothReference(number=number, name=label, id=f"tooth_{number}_{now_ms}")


def build_tooth_catalog(now_ms: int | None = None) -> list[dict]:
    """
    Selector del formulario: cuadrantes en orden FDI, cada uno con las
    referencias listas para agregar al pedido (mismo instante para todas).
    """
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return [
        {"group": group, "teeth": [make_tooth_reference(n, now_ms) for n in numbers]}
        for group, numbers in teeth_by_group().items()
    ]
