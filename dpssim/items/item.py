"""
Item - definicja przedmiotu i jego instancja na jednostce.

Każdy przedmiot może zawierać:
- Statystyki (bonusy addytywne: attack_damage: 0.35 = +35% AD)
- Flagi (unique, ability_crit)
- Efekty podpięte pod triggery (on_attack, on_hit, on_second, ...)

FLOW:
═══════════════════════════════════════════════════════════════════════════

    1. Item wczytany z YAML (Item.from_dict)
       - efekty zamienione na hooki w tabeli trigger -> lista callbacków
    2. Unit zakłada item -> ItemInstance ze stabilnym instance_id
       - staty dodane do bonusów jednostki
       - hooki ON_EQUIP odpalone
    3. Symulacja odpala hooki przez ItemManager
       (kolejność = kolejność założenia itemów)

YAML FORMAT:
═══════════════════════════════════════════════════════════════════════════

    Krakens:
      name: "Kraken's Fury"
      stats:
        attack_damage: 0.10
        attack_speed: 0.10
        magic_resist: 20
      effects:
        - trigger: on_attack
          type: stacking_buff
          buff: "Krakens"
          stats: {attack_damage: 0.035}
          max_stacks: 15
          max_stack_bonus: {attack_speed: 0.15}
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from ..core.stats import StatMap, parse_stat_map

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..units.target import Target
    from .item_effect import ItemEffect


# ═══════════════════════════════════════════════════════════════════════════
# TRIGGER TYPES
# ═══════════════════════════════════════════════════════════════════════════

class ItemTrigger(Enum):
    """Punkty, pod które item może podpiąć hooki."""

    ON_EQUIP = auto()    # Założenie itema
    ON_ATTACK = auto()   # Każdy auto-atak, przed zadaniem obrażeń
    ON_HIT = auto()      # Po trafieniu auto-atakiem (zredukowane obrażenia)
    ON_SECOND = auto()   # Raz na pełną sekundę
    ON_CAST = auto()     # Start casta umiejętności

    @classmethod
    def from_string(cls, s: str) -> "ItemTrigger":
        """
        Konwertuje string na ItemTrigger.

        Raises:
            ValueError: Dla nieznanego triggera
        """
        mapping = {
            "on_equip": cls.ON_EQUIP,
            "on_attack": cls.ON_ATTACK,
            "on_hit": cls.ON_HIT,
            "on_second": cls.ON_SECOND,
            "on_cast": cls.ON_CAST,
            "on_ability_cast": cls.ON_CAST,
        }
        key = s.strip().lower()
        if key not in mapping:
            raise ValueError(f"Unknown item trigger '{s}'")
        return mapping[key]


@dataclass
class HookContext:
    """
    Dane przekazywane do hooka itema.

    Attributes:
        instance: Instancja itema, której hook jest odpalany
        unit: Właściciel
        now: Aktualny czas (ms)
        target: Trafiony cel (ON_HIT / ON_ATTACK)
        damage: Zredukowane obrażenia (ON_HIT)
        is_crit: Czy trafienie było critem (ON_HIT)
        targets: Cele casta (ON_CAST)
        simulation: Symulacja (None przy zakładaniu poza symulacją)
    """
    instance: "ItemInstance"
    unit: "Unit"
    now: int = 0
    target: Optional["Target"] = None
    damage: float = 0.0
    is_crit: bool = False
    targets: List["Target"] = field(default_factory=list)
    simulation: Any = None


ItemHook = Callable[[HookContext], None]


# ═══════════════════════════════════════════════════════════════════════════
# ITEM
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(eq=False)
class Item:
    """
    Definicja przedmiotu.

    Attributes:
        name: Nazwa (klucz w rejestrze)
        display_name: Nazwa wyświetlana
        description: Opis
        stats: Bonusy statystyk
        unique: Można założyć tylko jedną kopię
        ability_crit: Umiejętności mogą critować
        max_stacks: Limit stacków instancji (0 = brak stackowania)
        effects: Efekty z YAML
        hooks: Tabela trigger -> lista hooków
    """
    name: str
    display_name: str = ""
    description: str = ""
    stats: StatMap = field(default_factory=dict)
    unique: bool = False
    ability_crit: bool = False
    max_stacks: int = 0
    effects: List["ItemEffect"] = field(default_factory=list)
    hooks: Dict[ItemTrigger, List[ItemHook]] = field(default_factory=dict)

    def __post_init__(self):
        if not self.display_name:
            self.display_name = self.name

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Item":
        """
        Tworzy Item z danych YAML.

        Raises:
            ValueError: Dla nieznanego typu efektu lub triggera
        """
        from .item_effect import ItemEffect

        name = data.get("id", data.get("name", "Item"))
        item = cls(
            name=name,
            display_name=data.get("name", name),
            description=data.get("description", ""),
            stats=parse_stat_map(data.get("stats")),
            unique=bool(data.get("unique", False)),
            ability_crit=bool(data.get("ability_crit", False)),
            max_stacks=int(data.get("max_stacks", 0)),
        )
        for effect_data in data.get("effects", []):
            effect = ItemEffect.from_dict(effect_data)
            item.effects.append(effect)
            item.bind(effect.trigger, effect.as_hook())
        return item

    def bind(self, trigger: ItemTrigger, hook: ItemHook) -> "Item":
        """Podpina hook pod trigger (kolejność podpięcia = kolejność wywołań)."""
        self.hooks.setdefault(trigger, []).append(hook)
        return self

    def get_hooks(self, trigger: ItemTrigger) -> List[ItemHook]:
        return self.hooks.get(trigger, [])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "display_name": self.display_name,
            "description": self.description,
            "stats": {s.value: v for s, v in self.stats.items()},
            "unique": self.unique,
            "ability_crit": self.ability_crit,
            "triggers": sorted(t.name.lower() for t in self.hooks),
        }

    def __repr__(self) -> str:
        return f"Item({self.name})"


@dataclass(eq=False)
class ItemInstance:
    """
    Item założony na jednostkę.

    Attributes:
        instance_id: Stabilny identyfikator ("Krakens#2"), nadany przy zakładaniu
        item: Definicja
        owner: Właściciel
        stacks: Aktualne stacki
    """
    instance_id: str
    item: Item
    owner: "Unit"
    stacks: int = 0

    @property
    def name(self) -> str:
        return self.item.name

    def add_stack(self) -> bool:
        """Dodaje stack jeśli jest miejsce. Zwraca True gdy dodano."""
        if self.item.max_stacks and self.stacks >= self.item.max_stacks:
            return False
        self.stacks += 1
        return True

    def to_dict(self) -> Dict[str, Any]:
        return {"instance_id": self.instance_id, "item": self.item.name, "stacks": self.stacks}

    def __repr__(self) -> str:
        return f"ItemInstance({self.instance_id}, stacks={self.stacks})"
