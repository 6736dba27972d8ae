"""
ItemEffect - efekty przedmiotów podpinane pod triggery.

TYPY EFEKTÓW:
═══════════════════════════════════════════════════════════════════════════

    stat_bonus      - Jednorazowo dodaje bonusy statystyk
    stacking_stat   - Dodaje bonusy i stack instancji (do max_stacks itema)
                      Guinsoo: +7% AS co sekundę
    stacking_buff   - Nakłada addytywny buff per instancja itema
                      Kraken: +3.5% AD za atak, max 15, +15% AS na max
                      Striker: po cricie +5% amp na 5 s, max 4
                      Titan: +2% AD/AP za trafienie, max 25, +10% amp na max
    mana_grant      - Daje manę (ignoruje blokadę many w trakcie casta)

WARUNKI (condition):
═══════════════════════════════════════════════════════════════════════════

    last_attack_crit - crit streak właściciela > 0

Nazwa buffa jest budowana ze stabilnego identyfikatora instancji
("Krakens#1", "Krakens#2"), więc dwie kopie tego samego itema
stackują niezależnie.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional

from ..core.stats import StatMap, parse_stat_map
from ..effects.buff import Buff, BuffSource, StackBehavior
from .item import HookContext, ItemHook, ItemTrigger


# ═══════════════════════════════════════════════════════════════════════════
# ITEM EFFECT
# ═══════════════════════════════════════════════════════════════════════════

@dataclass
class ItemEffect:
    """
    Pojedynczy efekt itema.

    Attributes:
        trigger: Kiedy się odpala
        effect_type: Typ (klucz w ITEM_EFFECT_HANDLERS)
        stats: Bonusy statystyk efektu
        buff_name: Nazwa bazowa buffa (stacking_buff)
        duration: Czas trwania buffa w ms (0 = stały)
        max_stacks: Limit stacków buffa
        max_stack_bonus: Dodatkowe staty po osiągnięciu max_stacks
        condition: Warunek odpalenia
        value: Wartość liczbowa (mana_grant)
    """
    trigger: ItemTrigger
    effect_type: str
    stats: StatMap = field(default_factory=dict)
    buff_name: str = ""
    duration: int = 0
    max_stacks: int = 1
    max_stack_bonus: StatMap = field(default_factory=dict)
    condition: Optional[str] = None
    value: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ItemEffect":
        """
        Tworzy ItemEffect z danych YAML.

        Raises:
            ValueError: Dla nieznanego typu efektu / triggera / warunku
        """
        effect_type = data.get("type", "")
        if effect_type not in ITEM_EFFECT_HANDLERS:
            raise ValueError(f"Unknown item effect type '{effect_type}'")

        condition = data.get("condition")
        if condition is not None and condition not in CONDITIONS:
            raise ValueError(f"Unknown item effect condition '{condition}'")

        return cls(
            trigger=ItemTrigger.from_string(data.get("trigger", "on_equip")),
            effect_type=effect_type,
            stats=parse_stat_map(data.get("stats")),
            buff_name=data.get("buff", ""),
            duration=int(data.get("duration", 0)),
            max_stacks=int(data.get("max_stacks", 1)),
            max_stack_bonus=parse_stat_map(data.get("max_stack_bonus")),
            condition=condition,
            value=float(data.get("value", 0.0)),
        )

    def as_hook(self) -> ItemHook:
        """Zwraca hook wywołujący handler tego efektu."""
        handler = ITEM_EFFECT_HANDLERS[self.effect_type]

        def hook(ctx: HookContext) -> None:
            if self.condition and not CONDITIONS[self.condition](ctx):
                return
            handler(ctx, self)

        return hook


# ═══════════════════════════════════════════════════════════════════════════
# WARUNKI
# ═══════════════════════════════════════════════════════════════════════════

def _last_attack_crit(ctx: HookContext) -> bool:
    return ctx.unit.crit_tracker.crit_streak > 0


CONDITIONS: Dict[str, Callable[[HookContext], bool]] = {
    "last_attack_crit": _last_attack_crit,
}


# ═══════════════════════════════════════════════════════════════════════════
# HANDLERY
# ═══════════════════════════════════════════════════════════════════════════

def apply_stat_bonus(ctx: HookContext, effect: ItemEffect) -> None:
    """Dodaje bonusy na stałe."""
    ctx.unit.stats.add_bonuses(effect.stats)


def apply_stacking_stat(ctx: HookContext, effect: ItemEffect) -> None:
    """Dodaje stack instancji i bonusy, o ile jest miejsce."""
    if ctx.instance.add_stack():
        ctx.unit.stats.add_bonuses(effect.stats)


def apply_stacking_buff(ctx: HookContext, effect: ItemEffect) -> None:
    """
    Nakłada addytywny buff przypisany do instancji itema.

    Gdy to nałożenie osiąga max_stacks, buff dostaje dodatkowo
    max_stack_bonus (raz).
    """
    unit = ctx.unit
    label = effect.buff_name or ctx.instance.item.name
    name = f"{label}#{ctx.instance.instance_id.rsplit('#', 1)[-1]}"

    existing = unit.buffs.get_buff(name, ctx.now)
    if existing is None:
        reaches_max = effect.max_stacks <= 1
    else:
        reaches_max = existing.can_stack and existing.current_stacks + 1 == effect.max_stacks

    incoming = Buff(
        name=name,
        duration=effect.duration,
        stat_bonuses=dict(effect.stats),
        stack_behavior=StackBehavior.ADDITIVE,
        max_stacks=effect.max_stacks,
        source=BuffSource.item(ctx.instance.instance_id),
    )
    if reaches_max:
        for stat, value in effect.max_stack_bonus.items():
            incoming.add_stat_bonus(stat, value)

    active = unit.buffs.apply_buff(incoming, ctx.now)
    ctx.instance.stacks = active.current_stacks


def apply_mana_grant(ctx: HookContext, effect: ItemEffect) -> None:
    """Daje manę właścicielowi."""
    ctx.unit.restore_mana(effect.value)


ITEM_EFFECT_HANDLERS: Dict[str, Callable[[HookContext, ItemEffect], None]] = {
    "stat_bonus": apply_stat_bonus,
    "stacking_stat": apply_stacking_stat,
    "stacking_buff": apply_stacking_buff,
    "mana_grant": apply_mana_grant,
}
