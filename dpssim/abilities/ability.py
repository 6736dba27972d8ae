"""
Ability - definicja umiejętności jednostki.

Ability to statyczna definicja: obrażenia, typ, czas casta, flagi
i callbacki cyklu casta. Żywy cast to CastingContext
(units/state_machine.py).

CYKL CASTA:
═══════════════════════════════════════════════════════════════════

    ON_CAST_START     - przy starcie casta (np. nałożenie buffa)
    ON_CAST           - przy końcu casta, zadaje obrażenia celom
    ON_CAST_COMPLETE  - po ON_CAST, sprzątanie

    Callback: (unit, context, simulation) -> None

YAML FORMAT (units.yaml, sekcja abilities):
═══════════════════════════════════════════════════════════════════

    transcendent_state:
      name: "Transcendent State"
      damage_type: physical
      cast_time: 4000              # ms
      aoe: true
      mana_gain_during_cast: false
      auto_attacks_during_cast: true
      auto_attack_modifier: true
      effects:
        - type: transcendent_state
          base_damage: [85, 130, 450]
          pierce_falloff: [0.7, 0.7, 0.3]
          attack_speed_bonus: [0.75, 0.75, 3.0]
          crit_true_damage: 0.3
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Dict, List, TYPE_CHECKING

from ..combat.damage import DamageType
from .scaling import get_star_value, resolve_star_values

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..units.state_machine import CastingContext


class AbilityTrigger(Enum):
    """Punkty cyklu casta."""

    ON_CAST_START = auto()
    ON_CAST = auto()
    ON_CAST_COMPLETE = auto()

    @classmethod
    def from_string(cls, s: str) -> "AbilityTrigger":
        try:
            return cls[s.strip().upper()]
        except KeyError:
            raise ValueError(f"Unknown ability trigger '{s}'") from None


AbilityCallback = Callable[["Unit", "CastingContext", Any], None]


@dataclass(eq=False)
class Ability:
    """
    Umiejętność (rozwiązana dla konkretnego poziomu gwiazdek).

    Attributes:
        name: Nazwa wyświetlana
        damage_type: Typ obrażeń ability
        base_damage: Bazowe obrażenia
        ad_ratio: Skalowanie z AD
        ap_ratio: Skalowanie z AP
        cast_time: Czas casta (ms)
        is_aoe: Czy trafia wszystkie żywe cele
        mana_cost: Koszt many (0 = max mana jednostki)
        allows_mana_gain_during_cast: Czy mana rośnie w trakcie casta
        allows_auto_attacks_during_cast: Czy można atakować w trakcie casta
        is_auto_attack_modifier: Obrażenia idą przez zmodyfikowane auto-ataki
        star_level: Poziom gwiazdek
        params: Rozwiązane parametry efektów
        callbacks: Tabela AbilityTrigger -> lista callbacków
    """
    name: str
    damage_type: DamageType = DamageType.MAGIC
    base_damage: float = 0.0
    ad_ratio: float = 0.0
    ap_ratio: float = 0.0
    cast_time: int = 0
    is_aoe: bool = False
    mana_cost: float = 0.0
    allows_mana_gain_during_cast: bool = False
    allows_auto_attacks_during_cast: bool = False
    is_auto_attack_modifier: bool = False
    star_level: int = 1
    params: Dict[str, Any] = field(default_factory=dict)
    callbacks: Dict[AbilityTrigger, List[AbilityCallback]] = field(default_factory=dict)

    def __post_init__(self):
        # Bez jawnego ON_CAST ability z obrażeniami zadaje je na końcu casta
        if (
            AbilityTrigger.ON_CAST not in self.callbacks
            and not self.is_auto_attack_modifier
            and self.deals_damage
        ):
            from .effects import deal_cast_damage
            self.bind(AbilityTrigger.ON_CAST, deal_cast_damage)

    @property
    def deals_damage(self) -> bool:
        return self.base_damage > 0 or self.ad_ratio > 0 or self.ap_ratio > 0

    def bind(self, trigger: AbilityTrigger, callback: AbilityCallback) -> "Ability":
        self.callbacks.setdefault(trigger, []).append(callback)
        return self

    def fire(self, trigger: AbilityTrigger, unit: "Unit", context: "CastingContext", simulation: Any = None) -> None:
        for callback in list(self.callbacks.get(trigger, [])):
            callback(unit, context, simulation)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], star_level: int = 1) -> "Ability":
        """
        Tworzy Ability z danych YAML dla danego poziomu gwiazdek.

        Raises:
            ValueError: Dla nieznanego typu efektu
        """
        from .effects import bind_ability_effect

        callbacks: Dict[AbilityTrigger, List[AbilityCallback]] = {}
        params: Dict[str, Any] = {}
        for effect_data in data.get("effects", []):
            effect_params = resolve_star_values(effect_data, star_level)
            params.update(effect_params)
            trigger, callback = bind_ability_effect(effect_params)
            callbacks.setdefault(trigger, []).append(callback)

        return cls(
            name=data.get("name", data.get("id", "Ability")),
            damage_type=DamageType.from_string(data.get("damage_type", "magic")),
            base_damage=get_star_value(data.get("base_damage", 0), star_level),
            ad_ratio=get_star_value(data.get("ad_ratio", 0), star_level),
            ap_ratio=get_star_value(data.get("ap_ratio", 0), star_level),
            cast_time=int(get_star_value(data.get("cast_time", 0), star_level)),
            is_aoe=bool(data.get("aoe", False)),
            mana_cost=get_star_value(data.get("mana_cost", 0), star_level),
            allows_mana_gain_during_cast=bool(data.get("mana_gain_during_cast", False)),
            allows_auto_attacks_during_cast=bool(data.get("auto_attacks_during_cast", False)),
            is_auto_attack_modifier=bool(data.get("auto_attack_modifier", False)),
            star_level=star_level,
            params=params,
            callbacks=callbacks,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "damage_type": self.damage_type.value,
            "base_damage": self.base_damage,
            "cast_time": self.cast_time,
            "aoe": self.is_aoe,
            "star_level": self.star_level,
        }

    def __repr__(self) -> str:
        return f"Ability({self.name}, {self.star_level}★)"
