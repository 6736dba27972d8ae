"""
Combat module - obliczanie obrażeń i rzuty na crit.

Zawiera:
- DamageType: Typy obrażeń (PHYSICAL, MAGIC, TRUE)
- DamageResult: Wynik pipeline'u (obrażenia, crit)
- calculate_*_damage: Trzy kalkulacje obrażeń
- CritTracker: Rzuty na crit i crit streak
"""

from .crit import CritTracker
from .damage import (
    DamageType, DamageResult, AttackerSnapshot, DefenderSnapshot,
    calculate_reduction, resistance_multiplier, resolve_damage,
    calculate_physical_damage, calculate_magic_damage, calculate_true_damage,
)

__all__ = [
    "CritTracker",
    "DamageType", "DamageResult", "AttackerSnapshot", "DefenderSnapshot",
    "calculate_reduction", "resistance_multiplier", "resolve_damage",
    "calculate_physical_damage", "calculate_magic_damage", "calculate_true_damage",
]
