"""
Simulation module - pętla ticków i wyniki.

Zawiera:
- Simulator: Pętla ticków dla jednej jednostki
- SimulationConfig: Czas trwania, interwał ticka, verbose
- SimulationResult / DamageEvent: Wynik przebiegu i log obrażeń
- compare_builds: Jeden przebieg na build itemów
"""

from .result import DamageEvent, SimulationResult, SOURCE_ABILITY, SOURCE_AUTO_ATTACK
from .simulation import (
    Simulator, SimulationConfig, compare_builds,
    DEFAULT_DURATION_MS, DEFAULT_TICK_INTERVAL_MS,
)

__all__ = [
    "DamageEvent", "SimulationResult", "SOURCE_ABILITY", "SOURCE_AUTO_ATTACK",
    "Simulator", "SimulationConfig", "compare_builds",
    "DEFAULT_DURATION_MS", "DEFAULT_TICK_INTERVAL_MS",
]
