"""
Wartości zależne od poziomu gwiazdek.

WARTOŚCI GWIAZDKOWE:
═══════════════════════════════════════════════════════════════════

    base_damage: [85, 130, 450]   # per star level
    cast_time: 4000               # ta sama dla wszystkich

    get_star_value([85, 130, 450], star=2) → 130
    get_star_value(4000, star=2) → 4000
"""

from __future__ import annotations
from typing import Any, Dict, List, Union


StarValue = Union[float, int, List[float], List[int]]


def get_star_value(value: StarValue, star_level: int = 1) -> float:
    """
    Pobiera wartość dla danego poziomu gwiazdek.

    Args:
        value: Wartość lub lista [1★, 2★, 3★]
        star_level: Poziom gwiazdek (1-3)

    Returns:
        float: Wartość dla tego poziomu

    Example:
        >>> get_star_value([100, 200, 400], 2)
        200.0
        >>> get_star_value(150, 3)
        150.0
    """
    if isinstance(value, (list, tuple)):
        # Indeks 0 = 1★, 1 = 2★, 2 = 3★
        index = max(0, min(star_level - 1, len(value) - 1))
        return float(value[index])
    return float(value)


def resolve_star_values(data: Dict[str, Any], star_level: int) -> Dict[str, Any]:
    """Rozwiązuje wszystkie liczbowe (i listowe) wartości słownika dla gwiazdki."""
    resolved = {}
    for key, value in data.items():
        if isinstance(value, bool) or not isinstance(value, (int, float, list, tuple)):
            resolved[key] = value
        else:
            resolved[key] = get_star_value(value, star_level)
    return resolved
