"""
Abilities module - umiejętności jednostek.

Zawiera:
- Ability: Definicja umiejętności + tabela callbacków casta
- AbilityTrigger: ON_CAST_START, ON_CAST, ON_CAST_COMPLETE
- ABILITY_EFFECT_HANDLERS: Handlery efektów z YAML
- get_star_value: Wartości per poziom gwiazdek
"""

from .ability import Ability, AbilityTrigger
from .effects import (
    ABILITY_EFFECT_HANDLERS, bind_ability_effect, deal_cast_damage,
    cast_damage_result, piercing_laser, crit_true_damage,
)
from .scaling import get_star_value, resolve_star_values

__all__ = [
    "Ability", "AbilityTrigger",
    "ABILITY_EFFECT_HANDLERS", "bind_ability_effect", "deal_cast_damage",
    "cast_damage_result", "piercing_laser", "crit_true_damage",
    "get_star_value", "resolve_star_values",
]
