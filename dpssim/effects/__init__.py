"""
Effects module - buffy i ich zarządzanie.

Zawiera:
- Buff: Czasowa modyfikacja statystyk / auto-ataku
- StackBehavior: REFRESH, ADDITIVE, MULTIPLICATIVE, INDEPENDENT
- BuffManager: Cykl życia buffów jednej jednostki
- presets: Gotowe buffy (attack speed, damage amp, empowered auto)
"""

from .buff import (
    Buff, BuffTrigger, BuffSource, SourceKind, StackBehavior, AttackStrike,
)
from .buff_manager import BuffManager
from .presets import attack_speed_buff, damage_amp_buff, empowered_auto_buff

__all__ = [
    "Buff", "BuffTrigger", "BuffSource", "SourceKind", "StackBehavior", "AttackStrike",
    "BuffManager",
    "attack_speed_buff", "damage_amp_buff", "empowered_auto_buff",
]
