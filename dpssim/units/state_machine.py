"""
State Machine castowania dla jednostki.

Jednostka ma JEDEN aktualny stan, który określa co może robić.

STANY:
═══════════════════════════════════════════════════════════════════

    IDLE (Bezczynność)
    ─────────────────────────────────────────────────────────────
    Brak casta. Może atakować i zacząć cast.

    ATTACKING (Atak)
    ─────────────────────────────────────────────────────────────
    Kosmetyczny - ustawiany po auto-ataku. Dla bramek działa jak IDLE.

    CASTING (Rzucanie skilla)
    ─────────────────────────────────────────────────────────────
    Trwa od start_cast do end_time z CastingContext.
    Auto-ataki tylko gdy ability na to pozwala.
    Mana tylko gdy ability na to pozwala.

    CHANNELING (Kanałowanie)
    ─────────────────────────────────────────────────────────────
    Brak auto-ataków i nowych castów.

DIAGRAM TRANZYCJI:
═══════════════════════════════════════════════════════════════════

    ┌──────────────────┐   mana >= koszt    ┌─────────────────┐
    │  IDLE/ATTACKING  │───────────────────►│     CASTING     │
    └──────────────────┘                    └────────┬────────┘
             ▲                                       │
             │          now >= end_time              │
             └───────────────────────────────────────┘

INTERWAŁ ATAKU:
═══════════════════════════════════════════════════════════════════

    interval_ms = 1000 / attack_speed   (AS <= 0 -> 1000 ms)
    Po ataku: next_attack_time = now + interval_ms
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from ..abilities.ability import Ability
    from .target import Target


DEFAULT_ATTACK_INTERVAL_MS = 1000


class UnitState(Enum):
    """Stany jednostki."""

    IDLE = auto()
    ATTACKING = auto()
    CASTING = auto()
    CHANNELING = auto()

    def can_start_cast(self) -> bool:
        return self in (UnitState.IDLE, UnitState.ATTACKING)

    def __str__(self) -> str:
        return self.name


@dataclass
class CastingContext:
    """
    Żywa instancja casta - tworzona przy starcie, usuwana po zakończeniu.

    Attributes:
        ability: Rzucana umiejętność
        start_time: Początek casta (ms)
        end_time: Koniec casta (ms)
        targets: Cele rozwiązane przy starcie
        can_gain_mana: Skopiowane z ability
        can_auto_attack: Skopiowane z ability
    """
    ability: "Ability"
    start_time: int
    end_time: int
    targets: List["Target"] = field(default_factory=list)
    can_gain_mana: bool = False
    can_auto_attack: bool = False

    def is_complete(self, now: int) -> bool:
        return now >= self.end_time


def attack_interval_ms(attack_speed: float) -> int:
    """
    Interwał między atakami w ms.

    Examples:
        >>> attack_interval_ms(1.0)
        1000
        >>> attack_interval_ms(0.8)
        1250
        >>> attack_interval_ms(0)
        1000
    """
    if attack_speed <= 0:
        return DEFAULT_ATTACK_INTERVAL_MS
    return int(1000.0 / attack_speed)


class CastingStateMachine:
    """
    Maszyna stanów castowania i timing ataków.

    Nie wywołuje callbacków umiejętności - robi to Unit, który
    ma dostęp do siebie i do symulacji. Tu są tylko stany i bramki.

    Attributes:
        current (UnitState): Aktualny stan
        context (Optional[CastingContext]): Aktywny cast
        next_attack_time (int): Najwcześniejszy czas następnego ataku (ms)

    Example:
        >>> fsm = CastingStateMachine()
        >>> fsm.can_cast(current_mana=50, mana_cost=50)
        True
        >>> ctx = fsm.start_cast(ability, now=1000, targets=[dummy])
        >>> fsm.is_casting
        True
        >>> fsm.is_cast_complete(now=5000)
        True
    """

    def __init__(self):
        self.current = UnitState.IDLE
        self.context: Optional[CastingContext] = None
        self.next_attack_time = 0

    # ─────────────────────────────────────────────────────────────────────────
    # CAST
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_casting(self) -> bool:
        return self.current == UnitState.CASTING

    def can_cast(self, current_mana: float, mana_cost: float) -> bool:
        """Czy można zacząć cast (stan + mana)."""
        return self.current.can_start_cast() and current_mana >= mana_cost

    def start_cast(self, ability: "Ability", now: int, targets: List["Target"]) -> CastingContext:
        """
        IDLE/ATTACKING -> CASTING.

        Returns:
            CastingContext: Nowy kontekst casta
        """
        self.context = CastingContext(
            ability=ability,
            start_time=now,
            end_time=now + ability.cast_time,
            targets=list(targets),
            can_gain_mana=ability.allows_mana_gain_during_cast,
            can_auto_attack=ability.allows_auto_attacks_during_cast,
        )
        self.current = UnitState.CASTING
        return self.context

    def is_cast_complete(self, now: int) -> bool:
        return self.context is not None and self.context.is_complete(now)

    def finish_cast(self) -> Optional[CastingContext]:
        """CASTING -> IDLE. Zwraca zakończony kontekst."""
        context = self.context
        self.context = None
        self.current = UnitState.IDLE
        return context

    def start_channel(self) -> None:
        self.current = UnitState.CHANNELING

    def stop_channel(self) -> None:
        if self.current == UnitState.CHANNELING:
            self.current = UnitState.IDLE

    # ─────────────────────────────────────────────────────────────────────────
    # BRAMKI
    # ─────────────────────────────────────────────────────────────────────────

    def can_gain_mana(self) -> bool:
        if self.is_casting and self.context is not None:
            return self.context.can_gain_mana
        return True

    def can_auto_attack(self, now: int) -> bool:
        if self.is_casting and self.context is not None and not self.context.can_auto_attack:
            return False
        if self.current == UnitState.CHANNELING:
            return False
        return now >= self.next_attack_time

    def on_attack(self, now: int, attack_speed: float) -> None:
        """Planuje następny atak. Stan ATTACKING tylko poza castem."""
        self.next_attack_time = now + attack_interval_ms(attack_speed)
        if self.current == UnitState.IDLE:
            self.current = UnitState.ATTACKING

    def __repr__(self) -> str:
        return f"CastingStateMachine({self.current}, next_attack={self.next_attack_time})"
