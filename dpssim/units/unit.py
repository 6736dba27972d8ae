"""
Unit - jednostka zadająca obrażenia w symulacji.

Jednostka łączy wszystkie komponenty:
- Stats: warstwowa tabela statystyk (nakładka = BuffManager)
- CastingStateMachine: stan (IDLE, ATTACKING, CASTING, CHANNELING)
- Ability: umiejętność rozwiązana dla poziomu gwiazdek
- Lista itemów (ItemInstance) i augmentów
- CritTracker: rzuty na crit

Cykl życia jednostki:
═══════════════════════════════════════════════════════════════════

    1. TWORZENIE
       - Z definicji YAML (UnitDefinition.from_dict -> build)
       - Ustawiany poziom gwiazd, staty bazowe, ability
       - Role casterów dostają bazowy mana regen

    2. EKWIPUNEK
       - add_item() - staty, flagi, hooki ON_EQUIP
       - add_augment() - stały pakiet statystyk

    3. PĘTLA SYMULACJI (per tick, sterowana przez Simulator)
       - stats.set_current_time(now)
       - buffs.update_buffs(now)
       - start_cast() / complete_cast()
       - gain_mana_on_attack() po auto-ataku
       - regen_mana() raz na sekundę

    4. KONIEC
       - Brak persystencji - jednostka żyje tylko w jednym przebiegu

MANA ZA ATAK (per rola):
═══════════════════════════════════════════════════════════════════

    Tanki (attack_tank, magic_tank):       5
    Casterzy (attack_caster, magic_caster): 7  (+ regen 2 / s)
    Pozostali:                             10

    Mana jest przycinana do max many.

Przykład użycia:
    >>> definition = UnitDefinition.from_dict(loader.load_unit("Yunara"))
    >>> unit = definition.build(star_level=2)
    >>> unit.mana_cost
    50.0
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, TYPE_CHECKING

from ..core.rng import GameRNG
from ..core.stats import Stats, StatType
from ..abilities.ability import Ability, AbilityTrigger
from ..abilities.scaling import get_star_value
from ..combat.crit import CritTracker
from ..effects.buff_manager import BuffManager
from ..items.item import Item, ItemInstance
from ..items.item_manager import equip_item
from .state_machine import CastingContext, CastingStateMachine

if TYPE_CHECKING:
    from ..items.augment import Augment
    from .target import Target


DEFAULT_ATTACK_WINDUP_MS = 200
CASTER_MANA_REGEN = 2.0

MANA_PER_ATTACK = {
    "tank": 5.0,
    "caster": 7.0,
    "default": 10.0,
}


# ═══════════════════════════════════════════════════════════════════════════
# ROLE
# ═══════════════════════════════════════════════════════════════════════════

class Role(Enum):
    """Rola jednostki (decyduje o manie za atak i regenie)."""

    ATTACK_TANK = "attack_tank"
    ATTACK_FIGHTER = "attack_fighter"
    ATTACK_MARKSMAN = "attack_marksman"
    ATTACK_CASTER = "attack_caster"
    ATTACK_ASSASSIN = "attack_assassin"
    ATTACK_SPECIALIST = "attack_specialist"
    HYBRID_FIGHTER = "hybrid_fighter"
    MAGIC_TANK = "magic_tank"
    MAGIC_FIGHTER = "magic_fighter"
    MAGIC_MARKSMAN = "magic_marksman"
    MAGIC_CASTER = "magic_caster"
    MAGIC_ASSASSIN = "magic_assassin"
    MAGIC_SPECIALIST = "magic_specialist"

    @classmethod
    def from_string(cls, s: str) -> "Role":
        """
        Konwertuje string na Role ("Attack Marksman", "attack-marksman", ...).

        Raises:
            ValueError: Dla nieznanej roli
        """
        key = s.strip().lower().replace(" ", "_").replace("-", "_")
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown role '{s}'") from None

    @property
    def is_tank(self) -> bool:
        return self in (Role.ATTACK_TANK, Role.MAGIC_TANK)

    @property
    def is_caster(self) -> bool:
        return self in (Role.ATTACK_CASTER, Role.MAGIC_CASTER)

    @property
    def mana_class(self) -> str:
        """Klasa many: tank / caster / default."""
        if self.is_tank:
            return "tank"
        if self.is_caster:
            return "caster"
        return "default"

    def __str__(self) -> str:
        return self.value


# ═══════════════════════════════════════════════════════════════════════════
# UNIT
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(eq=False)
class Unit:
    """
    Jednostka w symulacji.

    Attributes:
        name (str): Nazwa (np. "Yunara")
        role (Role): Rola
        star_level (int): Poziom gwiazd (1-3)
        stats (Stats): Statystyki; nakładką jest BuffManager jednostki
        ability (Optional[Ability]): Umiejętność
        current_mana (float): Aktualna mana
        attack_windup_ms (int): Czas zamachu (informacyjnie)
        mana_per_attack (float): Mana za auto-atak (0 = z roli)

        items (List[ItemInstance]): Itemy w kolejności założenia
        augments (List[Augment]): Augmenty
        item_counter (int): Licznik do instance_id itemów
        buffs (BuffManager): Aktywne buffy
        state (CastingStateMachine): Stan i timing ataków
        crit_tracker (CritTracker): Rzuty na crit
        ability_can_crit (bool): Czy umiejętność może critować

        total_damage (float): Suma zadanych obrażeń
        attack_count (int): Liczba auto-ataków
        ability_count (int): Liczba castów
    """

    name: str
    role: Role = Role.ATTACK_MARKSMAN
    star_level: int = 1
    stats: Stats = field(default_factory=Stats)
    ability: Optional[Ability] = None
    current_mana: float = 0.0
    attack_windup_ms: int = DEFAULT_ATTACK_WINDUP_MS
    mana_per_attack: float = 0.0

    items: List[ItemInstance] = field(default_factory=list, repr=False)
    augments: List["Augment"] = field(default_factory=list, repr=False)
    item_counter: int = field(default=0, repr=False)
    buffs: BuffManager = field(default=None, repr=False)
    state: CastingStateMachine = field(default_factory=CastingStateMachine, repr=False)
    crit_tracker: CritTracker = field(default_factory=CritTracker, repr=False)
    ability_can_crit: bool = False

    total_damage: float = field(default=0.0, repr=False)
    attack_count: int = field(default=0, repr=False)
    ability_count: int = field(default=0, repr=False)

    def __post_init__(self):
        if self.buffs is None:
            self.buffs = BuffManager(self)
        self.stats.overlay = self.buffs
        if self.mana_per_attack <= 0:
            self.mana_per_attack = MANA_PER_ATTACK[self.role.mana_class]

    # ─────────────────────────────────────────────────────────────────────────
    # FACTORY
    # ─────────────────────────────────────────────────────────────────────────

    @classmethod
    def create(
        cls,
        name: str,
        base_stats: Dict[StatType, float],
        role: Role = Role.ATTACK_MARKSMAN,
        star_level: int = 1,
        ability: Optional[Ability] = None,
        starting_mana: float = 0.0,
        attack_windup_ms: int = DEFAULT_ATTACK_WINDUP_MS,
        rng: Optional[GameRNG] = None,
    ) -> "Unit":
        """
        Tworzy jednostkę ze statów bazowych.

        Example:
            >>> unit = Unit.create("Dummy", {StatType.ATTACK_DAMAGE: 100, StatType.ATTACK_SPEED: 1.0})
        """
        stats = Stats()
        for stat, value in base_stats.items():
            stats.set_base(stat, value)
        if role.is_caster and StatType.MANA_REGEN not in base_stats:
            stats.set_base(StatType.MANA_REGEN, CASTER_MANA_REGEN)

        return cls(
            name=name,
            role=role,
            star_level=star_level,
            stats=stats,
            ability=ability,
            current_mana=starting_mana,
            attack_windup_ms=attack_windup_ms,
            crit_tracker=CritTracker(rng=rng or GameRNG()),
        )

    # ─────────────────────────────────────────────────────────────────────────
    # STATY
    # ─────────────────────────────────────────────────────────────────────────

    def set_current_time(self, now: int) -> None:
        self.stats.set_current_time(now)

    @property
    def max_mana(self) -> float:
        return self.stats.get(StatType.MANA)

    @property
    def mana_cost(self) -> float:
        """Koszt ability: jawny mana_cost albo max mana jednostki."""
        if self.ability is not None and self.ability.mana_cost > 0:
            return self.ability.mana_cost
        return self.max_mana

    def attack_speed(self, now: Optional[int] = None) -> float:
        return self.stats.get(StatType.ATTACK_SPEED, now)

    # ─────────────────────────────────────────────────────────────────────────
    # MANA
    # ─────────────────────────────────────────────────────────────────────────

    def _add_mana(self, amount: float) -> float:
        before = self.current_mana
        self.current_mana = min(self.current_mana + amount, self.max_mana)
        return self.current_mana - before

    def gain_mana_on_attack(self) -> float:
        """
        Mana za auto-atak (zależna od roli).

        Returns:
            float: Faktycznie zyskana mana (0 gdy zablokowana castem)
        """
        if not self.state.can_gain_mana():
            return 0.0
        return self._add_mana(self.mana_per_attack)

    def regen_mana(self) -> float:
        """Regeneracja many (raz na sekundę)."""
        if not self.state.can_gain_mana():
            return 0.0
        return self._add_mana(self.stats.get(StatType.MANA_REGEN))

    def restore_mana(self, amount: float) -> float:
        """Mana z efektów (np. Blue Buff) - ignoruje blokadę casta."""
        return self._add_mana(amount)

    def spend_mana(self, amount: float) -> None:
        self.current_mana = max(0.0, self.current_mana - amount)

    # ─────────────────────────────────────────────────────────────────────────
    # ABILITY
    # ─────────────────────────────────────────────────────────────────────────

    def can_cast_ability(self) -> bool:
        """Ability + stan pozwalający na cast + mana >= koszt (koszt > 0)."""
        if self.ability is None:
            return False
        cost = self.mana_cost
        return cost > 0 and self.state.can_cast(self.current_mana, cost)

    def start_cast(self, now: int, targets: List["Target"], simulation: Any = None) -> CastingContext:
        """
        Zaczyna cast: płaci manę, otwiera CastingContext, odpala ON_CAST_START.

        Returns:
            CastingContext: Aktywny cast
        """
        self.spend_mana(self.mana_cost)
        context = self.state.start_cast(self.ability, now, targets)
        self.ability_count += 1
        self.ability.fire(AbilityTrigger.ON_CAST_START, self, context, simulation)
        return context

    def complete_cast(self, simulation: Any = None) -> Optional[CastingContext]:
        """
        Kończy cast: ON_CAST (obrażenia), potem ON_CAST_COMPLETE.

        Returns:
            Optional[CastingContext]: Zakończony kontekst (None gdy brak casta)
        """
        context = self.state.finish_cast()
        if context is None:
            return None
        context.ability.fire(AbilityTrigger.ON_CAST, self, context, simulation)
        context.ability.fire(AbilityTrigger.ON_CAST_COMPLETE, self, context, simulation)
        return context

    # ─────────────────────────────────────────────────────────────────────────
    # EKWIPUNEK
    # ─────────────────────────────────────────────────────────────────────────

    def add_item(self, item: Item, now: int = 0) -> Optional[ItemInstance]:
        """Zakłada item. None gdy unique i już założony."""
        return equip_item(self, item, now)

    def add_items(self, items: Iterable[Item]) -> List[ItemInstance]:
        return [inst for inst in (self.add_item(item) for item in items) if inst is not None]

    def add_augment(self, augment: "Augment") -> None:
        self.stats.add_bonuses(augment.stats)
        self.augments.append(augment)

    # ─────────────────────────────────────────────────────────────────────────
    # SERIALIZACJA
    # ─────────────────────────────────────────────────────────────────────────

    def snapshot(self, now: Optional[int] = None) -> Dict[str, float]:
        """Podsumowanie statów do wyników (mana, max mana, AS, AD, AP)."""
        return {
            "mana": self.current_mana,
            "max_mana": self.max_mana,
            "attack_speed": self.stats.get(StatType.ATTACK_SPEED, now),
            "attack_damage": self.stats.get(StatType.ATTACK_DAMAGE, now),
            "ability_power": self.stats.get(StatType.ABILITY_POWER, now),
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "role": self.role.value,
            "star_level": self.star_level,
            "state": self.state.current.name.lower(),
            "mana": self.current_mana,
            "ability": self.ability.to_dict() if self.ability else None,
            "items": [inst.to_dict() for inst in self.items],
            "augments": [aug.name for aug in self.augments],
            "stats": self.stats.snapshot(),
        }

    def __repr__(self) -> str:
        return f"Unit({self.name}, {self.star_level}★, mana={self.current_mana:.0f})"


# ═══════════════════════════════════════════════════════════════════════════
# DEFINICJA Z YAML
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class UnitDefinition:
    """
    Statyczna definicja jednostki (wpis w rejestrze).

    Staty mogą być listami per gwiazdka: health: [800, 1440, 2592].

    Attributes:
        name: Nazwa (klucz w rejestrze)
        role: Rola
        stats: Surowe staty (wartości lub listy per gwiazdka)
        ability: Surowe dane ability (None = brak)
        starting_mana: Mana na starcie
        attack_windup_ms: Czas zamachu
        mana_per_attack: Nadpisanie many za atak (0 = z roli)
    """
    name: str
    role: Role = Role.ATTACK_MARKSMAN
    stats: Dict[str, Any] = field(default_factory=dict)
    ability: Optional[Dict[str, Any]] = None
    starting_mana: float = 0.0
    attack_windup_ms: int = DEFAULT_ATTACK_WINDUP_MS
    mana_per_attack: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any], mana_config: Optional[Dict[str, Any]] = None) -> "UnitDefinition":
        """
        Tworzy definicję z danych ConfigLoader.load_unit().

        Args:
            data: Definicja jednostki (z defaults)
            mana_config: Sekcja mana z defaults.yaml (mana za atak per klasa roli)

        Raises:
            ValueError: Dla nieznanej roli / statystyki
        """
        role = Role.from_string(data.get("role", "attack_marksman"))
        stats = dict(data.get("stats", {}))
        for key in stats:
            StatType.from_string(key)

        mana_per_attack = float(data.get("mana_per_attack", 0))
        if not mana_per_attack and mana_config:
            per_class = mana_config.get("mana_per_attack", {})
            mana_per_attack = float(per_class.get(role.mana_class, 0))
        if role.is_caster and mana_config and "mana_regen" not in stats:
            stats["mana_regen"] = mana_config.get("caster_mana_regen", CASTER_MANA_REGEN)

        ability = data.get("ability")
        return cls(
            name=data.get("name", data.get("id", "Unit")),
            role=role,
            stats=stats,
            ability=ability if isinstance(ability, dict) else None,
            starting_mana=float(data.get("starting_mana", 0)),
            attack_windup_ms=int(data.get("attack_windup_ms", DEFAULT_ATTACK_WINDUP_MS)),
            mana_per_attack=mana_per_attack,
        )

    def base_stats(self, star_level: int = 1) -> Dict[StatType, float]:
        return {
            StatType.from_string(key): get_star_value(value, star_level)
            for key, value in self.stats.items()
        }

    def build(
        self,
        star_level: int = 1,
        items: Iterable[Item] = (),
        rng: Optional[GameRNG] = None,
    ) -> Unit:
        """
        Tworzy świeżą jednostkę dla poziomu gwiazd i zakłada itemy.

        Example:
            >>> unit = definition.build(2, [guinsoo, kraken, ie], rng=GameRNG(42))
        """
        ability = Ability.from_dict(self.ability, star_level) if self.ability else None
        unit = Unit.create(
            name=self.name,
            base_stats=self.base_stats(star_level),
            role=self.role,
            star_level=star_level,
            ability=ability,
            starting_mana=self.starting_mana,
            attack_windup_ms=self.attack_windup_ms,
            rng=rng,
        )
        if self.mana_per_attack > 0:
            unit.mana_per_attack = self.mana_per_attack
        unit.add_items(items)
        return unit

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "role": self.role.value,
            "stats": dict(self.stats),
            "ability": (self.ability or {}).get("name"),
            "starting_mana": self.starting_mana,
        }
