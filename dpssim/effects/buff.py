"""
System buffów.

Buffy to czasowe (lub stałe) modyfikacje statystyk jednostki
oraz opcjonalne zmiany zachowania auto-ataku.

STRUKTURA BUFFA:
═══════════════════════════════════════════════════════════════════

    Buff składa się z:
    - Nazwy (klucz tożsamości na jednym nosicielu)
    - Czasu trwania w ms (0 = stały)
    - Bonusów i mnożników statystyk
    - Zachowania przy stackowaniu + limitu stacków
    - Opcjonalnego override'u auto-ataku
    - Opcjonalnego efektu on-hit (dodatkowe obrażenia)
    - Tabeli callbacków: on_apply, on_tick, on_expire, on_refresh
    - Źródła (jednostka / item / ability) - tylko referencja

STACKOWANIE:
═══════════════════════════════════════════════════════════════════

    REFRESH
    ─────────────────────────────────────────────────────────────
    Ponowne nałożenie odświeża applied_time. Staty bez zmian.

    ADDITIVE
    ─────────────────────────────────────────────────────────────
    Dodaje stack (do max_stacks) i sumuje bonusy/mnożniki
    nowego buffa z istniejącymi.

    MULTIPLICATIVE
    ─────────────────────────────────────────────────────────────
    Dodaje stack (do max_stacks) i składa mnożniki:
        existing × (1 + new)   (lub 1 + new gdy brak)

    INDEPENDENT
    ─────────────────────────────────────────────────────────────
    Każde nałożenie to osobna instancja ("Name#2", "Name#3", ...).

OKNO AKTYWNOŚCI:
═══════════════════════════════════════════════════════════════════

    duration <= 0              -> aktywny do jawnego usunięcia
    applied <= t < applied + d -> aktywny
    t >= applied + d           -> wygasa przy najbliższym update

Przykład użycia:
    >>> buff = Buff("Rage", duration=3000,
    ...             stat_bonuses={StatType.ATTACK_SPEED: 0.3})
    >>> unit.buffs.apply_buff(buff, now=1000)
    >>> unit.stats.get(StatType.ATTACK_SPEED, now=2000)  # +30%
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, Tuple, TYPE_CHECKING

from ..core.stats import StatMap, StatType, parse_stat_map

if TYPE_CHECKING:
    from ..combat.damage import DamageType
    from ..units.unit import Unit
    from ..units.target import Target


class StackBehavior(Enum):
    """Zachowanie przy nakładaniu tego samego buffa."""

    REFRESH = auto()         # Odśwież czas trwania
    ADDITIVE = auto()        # Dodaj stack i zsumuj staty
    MULTIPLICATIVE = auto()  # Dodaj stack i złóż mnożniki
    INDEPENDENT = auto()     # Osobna instancja

    @classmethod
    def from_string(cls, s: str) -> "StackBehavior":
        try:
            return cls[s.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown stack behavior '{s}'") from None


class BuffTrigger(Enum):
    """Punkty cyklu życia, pod które można podpiąć callback."""

    ON_APPLY = auto()     # (unit, buff)
    ON_TICK = auto()      # (unit, buff, elapsed_ms)
    ON_EXPIRE = auto()    # (unit, buff)
    ON_REFRESH = auto()   # (unit, buff, incoming)


class SourceKind(Enum):
    UNIT = auto()
    ITEM = auto()
    ABILITY = auto()


@dataclass(frozen=True)
class BuffSource:
    """
    Źródło buffa - tylko referencja, buff nie jest właścicielem źródła.

    Attributes:
        kind: Jednostka / item / ability
        ref: Identyfikator (nazwa jednostki, instance_id itema, nazwa ability)
    """
    kind: SourceKind
    ref: str

    @classmethod
    def unit(cls, name: str) -> "BuffSource":
        return cls(SourceKind.UNIT, name)

    @classmethod
    def item(cls, instance_id: str) -> "BuffSource":
        return cls(SourceKind.ITEM, instance_id)

    @classmethod
    def ability(cls, name: str) -> "BuffSource":
        return cls(SourceKind.ABILITY, name)

    def __str__(self) -> str:
        return f"{self.kind.name.lower()}:{self.ref}"


@dataclass
class AttackStrike:
    """
    Pojedyncze trafienie wynikające z auto-ataku.

    Override auto-ataku zwraca listę trafień (laser przebijający
    trafia kilka celów), każde idzie osobno przez pipeline.

    Attributes:
        target: Trafiony cel
        amount: Obrażenia przed crit i redukcjami
        damage_type: Typ obrażeń
        can_crit: Czy trafienie może critować
    """
    target: "Target"
    amount: float
    damage_type: "DamageType"
    can_crit: bool = True


# (unit, buff, primary_target, alive_targets, now) -> lista trafień
AutoAttackOverride = Callable[
    ["Unit", "Buff", "Target", List["Target"], int], List[AttackStrike]
]

# (unit, buff, target, final_damage, is_crit) -> (kwota, typ) albo None
OnHitEffect = Callable[
    ["Unit", "Buff", "Target", float, bool], Optional[Tuple[float, "DamageType"]]
]


@dataclass(eq=False)
class Buff:
    """
    Buff nałożony (lub do nałożenia) na jednostkę.

    Attributes:
        name: Nazwa bazowa
        duration: Czas trwania w ms (0 = stały)
        stat_bonuses: Bonusy addytywne
        stat_multipliers: Mnożniki
        stack_behavior: Zachowanie przy ponownym nałożeniu
        max_stacks: Limit stacków
        current_stacks: Aktualne stacki
        source: Źródło buffa
        auto_attack_override: Zastępuje domyślny auto-atak
        on_hit: Efekt po trafieniu auto-atakiem
        callbacks: Tabela BuffTrigger -> callback
        applied_time: Kiedy nałożony / odświeżony (ms)
        is_expired: Czy wygasł
        key: Tożsamość na nosicielu (name lub name#n dla INDEPENDENT)
        data: Stan prywatny callbacków
    """
    name: str
    duration: int = 0
    stat_bonuses: StatMap = field(default_factory=dict)
    stat_multipliers: StatMap = field(default_factory=dict)
    stack_behavior: StackBehavior = StackBehavior.REFRESH
    max_stacks: int = 1
    current_stacks: int = 1
    source: Optional[BuffSource] = None
    auto_attack_override: Optional[AutoAttackOverride] = None
    on_hit: Optional[OnHitEffect] = None
    callbacks: Dict[BuffTrigger, Callable[..., Any]] = field(default_factory=dict)
    applied_time: int = 0
    is_expired: bool = False
    key: str = ""
    data: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if not self.key:
            self.key = self.name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Buff":
        """
        Tworzy Buff z danych YAML.

        Format:
            name: "Krakens"
            duration: 0               # ms
            stats: {attack_damage: 0.035}
            multipliers: {}
            stacking: additive
            max_stacks: 15
        """
        return cls(
            name=data["name"],
            duration=int(data.get("duration", 0)),
            stat_bonuses=parse_stat_map(data.get("stats")),
            stat_multipliers=parse_stat_map(data.get("multipliers")),
            stack_behavior=StackBehavior.from_string(data.get("stacking", "refresh")),
            max_stacks=int(data.get("max_stacks", 1)),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # BUDOWANIE
    # ─────────────────────────────────────────────────────────────────────────

    def add_stat_bonus(self, stat: StatType, value: float) -> "Buff":
        self.stat_bonuses[stat] = self.stat_bonuses.get(stat, 0.0) + value
        return self

    def add_stat_multiplier(self, stat: StatType, value: float) -> "Buff":
        self.stat_multipliers[stat] = self.stat_multipliers.get(stat, 0.0) + value
        return self

    def bind(self, trigger: BuffTrigger, callback: Callable[..., Any]) -> "Buff":
        """Podpina callback pod punkt cyklu życia."""
        self.callbacks[trigger] = callback
        return self

    def fire(self, trigger: BuffTrigger, unit: Optional["Unit"], *args: Any) -> None:
        callback = self.callbacks.get(trigger)
        if callback is not None:
            callback(unit, self, *args)

    # ─────────────────────────────────────────────────────────────────────────
    # CZAS
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def is_permanent(self) -> bool:
        return self.duration <= 0

    def is_active(self, now: int) -> bool:
        if self.is_expired:
            return False
        if now < self.applied_time:
            return False
        if self.is_permanent:
            return True
        return now < self.applied_time + self.duration

    def elapsed(self, now: int) -> int:
        return now - self.applied_time

    def remaining_duration(self, now: int) -> int:
        """Pozostały czas w ms (0 dla stałych i wygasłych)."""
        if self.is_permanent or self.is_expired:
            return 0
        now = max(now, self.applied_time)
        return max(0, self.applied_time + self.duration - now)

    # ─────────────────────────────────────────────────────────────────────────
    # STACKOWANIE
    # ─────────────────────────────────────────────────────────────────────────

    @property
    def can_stack(self) -> bool:
        return self.current_stacks < self.max_stacks

    def stack_additive(self, incoming: "Buff") -> None:
        """Dodaje stack i sumuje staty nowego buffa."""
        if not self.can_stack:
            return
        self.current_stacks += 1
        for stat, value in incoming.stat_bonuses.items():
            self.stat_bonuses[stat] = self.stat_bonuses.get(stat, 0.0) + value
        for stat, value in incoming.stat_multipliers.items():
            self.stat_multipliers[stat] = self.stat_multipliers.get(stat, 0.0) + value

    def stack_multiplicative(self, incoming: "Buff") -> None:
        """Dodaje stack i składa mnożniki: existing × (1 + new)."""
        if not self.can_stack:
            return
        self.current_stacks += 1
        for stat, value in incoming.stat_multipliers.items():
            if stat in self.stat_multipliers:
                self.stat_multipliers[stat] *= 1 + value
            else:
                self.stat_multipliers[stat] = 1 + value

    # ─────────────────────────────────────────────────────────────────────────
    # UTILITY
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.key,
            "duration": self.duration,
            "applied_time": self.applied_time,
            "stacks": self.current_stacks,
            "max_stacks": self.max_stacks,
            "stack_behavior": self.stack_behavior.name,
            "stat_bonuses": {s.value: v for s, v in self.stat_bonuses.items()},
            "stat_multipliers": {s.value: v for s, v in self.stat_multipliers.items()},
            "source": str(self.source) if self.source else None,
            "expired": self.is_expired,
        }

    def __repr__(self) -> str:
        stacks = f" x{self.current_stacks}" if self.max_stacks > 1 else ""
        duration = "perm" if self.is_permanent else f"{self.duration}ms"
        return f"Buff({self.key}{stacks}, {duration})"
