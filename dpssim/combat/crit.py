"""
Crit tracker - rzuty na trafienie krytyczne per atakujący.

Każdy rzut:
    - zwiększa total_attacks
    - crit:    total_crits += 1, crit_streak += 1
    - brak:    crit_streak = 0

crit_streak czytają hooki itemów ("czy ostatni atak był critem?"),
np. Striker's Flail.

Szansa >= 1.0 zawsze kończy się critem, <= 0 nigdy. Próbka z RNG
jest pobierana tylko dla szansy pomiędzy (0, 1).
"""

from __future__ import annotations
from dataclasses import dataclass, field

from ..core.rng import GameRNG


@dataclass
class CritTracker:
    """
    Liczniki critów jednej jednostki.

    Attributes:
        rng: Generator używany do rzutów
        total_attacks: Liczba rzutów
        total_crits: Liczba critów
        crit_streak: Ile critów z rzędu (0 po każdym nie-crit)
    """
    rng: GameRNG = field(default_factory=GameRNG)
    total_attacks: int = 0
    total_crits: int = 0
    crit_streak: int = 0

    def roll_crit(self, crit_chance: float) -> bool:
        """
        Rzuca na crit i aktualizuje liczniki.

        Args:
            crit_chance: Szansa (0.0 - 1.0)

        Returns:
            bool: True jeśli crit
        """
        self.total_attacks += 1

        if crit_chance >= 1.0:
            is_crit = True
        elif crit_chance <= 0:
            is_crit = False
        else:
            is_crit = self.rng.random() < crit_chance

        if is_crit:
            self.total_crits += 1
            self.crit_streak += 1
        else:
            self.crit_streak = 0
        return is_crit

    @property
    def last_attack_crit(self) -> bool:
        return self.crit_streak > 0

    @property
    def crit_rate(self) -> float:
        """Procent critów (0 gdy nie było rzutów)."""
        if self.total_attacks == 0:
            return 0.0
        return self.total_crits / self.total_attacks

    def reset(self) -> None:
        self.total_attacks = 0
        self.total_crits = 0
        self.crit_streak = 0
