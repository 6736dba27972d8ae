"""
Gotowe buffy dla typowych efektów.

    attack_speed_buff(duration, amount)     - +X% attack speed
    damage_amp_buff(duration, amount)       - +X damage amp
    empowered_auto_buff(duration, bonus)    - następny auto-atak +bonus,
                                              buff znika po pierwszym użyciu
"""

from __future__ import annotations
from typing import List, TYPE_CHECKING

from ..core.stats import StatType
from ..combat.damage import DamageType
from .buff import AttackStrike, Buff

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..units.target import Target


ATTACK_SPEED_BUFF = "Attack Speed Boost"
DAMAGE_AMP_BUFF = "Damage Amplification"
EMPOWERED_AUTO_BUFF = "Empowered Auto"


def attack_speed_buff(duration: int, amount: float) -> Buff:
    return Buff(ATTACK_SPEED_BUFF, duration).add_stat_bonus(StatType.ATTACK_SPEED, amount)


def damage_amp_buff(duration: int, amount: float) -> Buff:
    return Buff(DAMAGE_AMP_BUFF, duration).add_stat_bonus(StatType.DAMAGE_AMP, amount)


def _empowered_strike(
    unit: "Unit",
    buff: Buff,
    target: "Target",
    targets: List["Target"],
    now: int,
) -> List[AttackStrike]:
    amount = buff.data["bonus_damage"] + unit.stats.get(StatType.ATTACK_DAMAGE, now)
    unit.buffs.remove_buff(buff.key)
    return [AttackStrike(target, amount, DamageType.PHYSICAL)]


def empowered_auto_buff(duration: int, bonus_damage: float) -> Buff:
    buff = Buff(EMPOWERED_AUTO_BUFF, duration, auto_attack_override=_empowered_strike)
    buff.data["bonus_damage"] = bonus_damage
    return buff
