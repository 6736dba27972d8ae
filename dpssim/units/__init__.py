"""
Units module - jednostka, cel i maszyna stanów castowania.

Zawiera:
- Unit / UnitDefinition: Jednostka i jej definicja z YAML
- Role: 13 ról (decydują o manie za atak)
- Target: Nieruchomy cel przyjmujący obrażenia
- UnitState / CastingStateMachine / CastingContext: Stany i cykl casta
"""

from .state_machine import (
    UnitState, CastingStateMachine, CastingContext, attack_interval_ms,
    DEFAULT_ATTACK_INTERVAL_MS,
)
from .target import Target
from .unit import Unit, UnitDefinition, Role, MANA_PER_ATTACK

__all__ = [
    "UnitState", "CastingStateMachine", "CastingContext", "attack_interval_ms",
    "DEFAULT_ATTACK_INTERVAL_MS",
    "Target",
    "Unit", "UnitDefinition", "Role", "MANA_PER_ATTACK",
]
