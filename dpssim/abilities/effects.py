"""
Handlery efektów umiejętności.

Każdy typ efektu z YAML (pole "type") ma handler i punkt cyklu casta,
pod który jest podpinany:

    damage                  ON_CAST        obrażenia ability w cele casta
    transcendent_state      ON_CAST_START  buff: AS + laser przebijający
    empowered_auto          ON_CAST_START  następny auto-atak + bonus
    attack_speed_steroid    ON_CAST_START  czasowy bonus AS

Handler: (unit, context, simulation, params) -> None
Simulation udostępnia: now, deal_damage(target, result, is_ability).
"""

from __future__ import annotations
from functools import partial
from typing import Any, Callable, Dict, List, Optional, Tuple, TYPE_CHECKING

from ..core.stats import StatType
from ..combat.damage import (
    AttackerSnapshot, DefenderSnapshot, DamageResult, DamageType,
    calculate_magic_damage, calculate_physical_damage, calculate_true_damage,
)
from ..effects.buff import AttackStrike, Buff, BuffSource
from ..effects.presets import attack_speed_buff, empowered_auto_buff
from .ability import AbilityTrigger

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..units.target import Target
    from ..units.state_machine import CastingContext
    from .ability import Ability


# ═══════════════════════════════════════════════════════════════════════════
# OBRAŻENIA CASTA
# ═══════════════════════════════════════════════════════════════════════════

def cast_damage_result(
    unit: "Unit",
    ability: "Ability",
    attacker: AttackerSnapshot,
    target: "Target",
) -> DamageResult:
    """
    Liczy obrażenia ability dla jednego celu.

    Crit tylko gdy jednostka ma zgodę na crit umiejętności.
    """
    defender = DefenderSnapshot.of(target)
    can_crit = unit.ability_can_crit
    tracker = unit.crit_tracker

    if ability.damage_type == DamageType.PHYSICAL:
        return calculate_physical_damage(
            attacker, defender, ability.base_damage, tracker, can_crit,
            ad_ratio=ability.ad_ratio,
        )
    if ability.damage_type == DamageType.MAGIC:
        return calculate_magic_damage(
            attacker, defender, ability.base_damage, ability.ap_ratio, tracker, can_crit,
        )
    amount = (
        ability.base_damage
        + attacker.attack_damage * ability.ad_ratio
        + attacker.ability_power * ability.ap_ratio
    )
    return calculate_true_damage(attacker, defender, amount, tracker, can_crit)


def deal_cast_damage(unit: "Unit", context: "CastingContext", simulation: Any) -> None:
    """Zadaje obrażenia ability każdemu żywemu celowi casta."""
    attacker = AttackerSnapshot.of(unit, simulation.now)
    for target in context.targets:
        if not target.is_alive:
            continue
        result = cast_damage_result(unit, context.ability, attacker, target)
        simulation.deal_damage(target, result, is_ability=True)


def _damage(unit: "Unit", context: "CastingContext", simulation: Any, params: Dict[str, Any]) -> None:
    deal_cast_damage(unit, context, simulation)


# ═══════════════════════════════════════════════════════════════════════════
# TRANSCENDENT STATE (Yunara)
# ═══════════════════════════════════════════════════════════════════════════

def piercing_laser(
    unit: "Unit",
    buff: Buff,
    target: "Target",
    targets: List["Target"],
    now: int,
) -> List[AttackStrike]:
    """
    Laser przebijający wszystkie żywe cele, zaczynając od głównego.

    Każdy kolejny cel dostaje (1 - falloff) obrażeń poprzedniego:
        dmg_i = base × (1 + bonus AD) × (1 - falloff)^i
    """
    bonus_ad = unit.stats.get_bonus(StatType.ATTACK_DAMAGE, now)
    laser_damage = buff.data["base_damage"] * (bonus_ad + 1)
    falloff = buff.data.get("pierce_falloff", 0.0)

    hit_order = [target] + [t for t in targets if t is not target and t.is_alive]
    strikes = []
    multiplier = 1.0
    for hit in hit_order:
        strikes.append(AttackStrike(hit, laser_damage * multiplier, DamageType.PHYSICAL))
        multiplier *= 1 - falloff
    return strikes


def crit_true_damage(
    unit: "Unit",
    buff: Buff,
    target: "Target",
    damage: float,
    is_crit: bool,
) -> Optional[Tuple[float, DamageType]]:
    """Crit lasera zadaje dodatkowo X% obrażeń jako true damage."""
    if not is_crit:
        return None
    return damage * buff.data["crit_true_damage"], DamageType.TRUE


def _transcendent_state(unit: "Unit", context: "CastingContext", simulation: Any, params: Dict[str, Any]) -> None:
    now = context.start_time
    ability = context.ability
    ap = unit.stats.get(StatType.ABILITY_POWER, now)
    as_bonus = params["attack_speed_bonus"]

    buff = Buff(
        name=ability.name,
        duration=int(params.get("duration", ability.cast_time)),
        source=BuffSource.ability(ability.name),
        auto_attack_override=piercing_laser,
        on_hit=crit_true_damage,
    )
    buff.add_stat_bonus(StatType.ATTACK_SPEED, as_bonus + ap * as_bonus)
    buff.data.update(
        base_damage=params["base_damage"],
        pierce_falloff=params.get("pierce_falloff", 0.0),
        crit_true_damage=params.get("crit_true_damage", 0.0),
    )
    unit.buffs.apply_buff(buff, now)


# ═══════════════════════════════════════════════════════════════════════════
# PROSTE STEROIDY
# ═══════════════════════════════════════════════════════════════════════════

def _empowered_auto(unit: "Unit", context: "CastingContext", simulation: Any, params: Dict[str, Any]) -> None:
    buff = empowered_auto_buff(int(params.get("duration", 0)), params["bonus_damage"])
    buff.source = BuffSource.ability(context.ability.name)
    unit.buffs.apply_buff(buff, context.start_time)


def _attack_speed_steroid(unit: "Unit", context: "CastingContext", simulation: Any, params: Dict[str, Any]) -> None:
    buff = attack_speed_buff(int(params["duration"]), params["amount"])
    buff.source = BuffSource.ability(context.ability.name)
    unit.buffs.apply_buff(buff, context.start_time)


# ═══════════════════════════════════════════════════════════════════════════
# REJESTR
# ═══════════════════════════════════════════════════════════════════════════

ABILITY_EFFECT_HANDLERS: Dict[str, Tuple[AbilityTrigger, Callable[..., None]]] = {
    "damage": (AbilityTrigger.ON_CAST, _damage),
    "transcendent_state": (AbilityTrigger.ON_CAST_START, _transcendent_state),
    "empowered_auto": (AbilityTrigger.ON_CAST_START, _empowered_auto),
    "attack_speed_steroid": (AbilityTrigger.ON_CAST_START, _attack_speed_steroid),
}


def bind_ability_effect(params: Dict[str, Any]) -> Tuple[AbilityTrigger, Callable[..., None]]:
    """
    Zwraca (trigger, callback) dla efektu z YAML.

    Raises:
        ValueError: Dla nieznanego typu efektu
    """
    effect_type = params.get("type", "")
    if effect_type not in ABILITY_EFFECT_HANDLERS:
        raise ValueError(f"Unknown ability effect type '{effect_type}'")

    default_trigger, handler = ABILITY_EFFECT_HANDLERS[effect_type]
    trigger = default_trigger
    if "trigger" in params:
        trigger = AbilityTrigger.from_string(params["trigger"])
    return trigger, partial(handler, params=params)
