"""
Pipeline obliczania obrażeń.

TYPY OBRAŻEŃ:
═══════════════════════════════════════════════════════════════════

    PHYSICAL (Fizyczne)
    ─────────────────────────────────────────────────────────────
    - total = base_damage + AD × ad_ratio   (auto-atak: ad_ratio = 1)
    - Redukowane przez: ARMOR

    MAGIC (Magiczne)
    ─────────────────────────────────────────────────────────────
    - total = base_damage + AP × ap_ratio
    - Redukowane przez: MAGIC RESIST

    TRUE (Prawdziwe)
    ─────────────────────────────────────────────────────────────
    - Pomijają damage reduction celu ORAZ armor/MR
    - Nadal mogą critować (jeśli źródło może)

REDUKCJA Z ODPORNOŚCI:
═══════════════════════════════════════════════════════════════════

    r >= 0:  reduction = r / (100 + r)
    r <  0:  reduction = r / (100 - r)       (ujemna -> wzmacnia)

    mnożnik = 1 - reduction, czyli dla r < 0: 2 - 100 / (100 - r)

    Przykłady:
        0 armor    -> ×1.00
        100 armor  -> ×0.50
        -50 armor  -> ×1.33
        -∞ armor   -> ×2.00 (granica)

    Funkcja jest ciągła w r = 0.

CRITICAL STRIKE:
═══════════════════════════════════════════════════════════════════

    Auto-ataki mogą critować zawsze.
    Umiejętności TYLKO gdy jednostka ma zgodę (IE / Jeweled Gauntlet).
    Gdy can_crit=False nie ma rzutu (liczniki trackera stoją).

    crit: total × (1 + crit_damage)

KOLEJNOŚĆ OBLICZEŃ (nie zmieniać - zmienia wyniki):
═══════════════════════════════════════════════════════════════════

    1. Bazowe obrażenia
    2. Crit
    3. Damage amp atakującego  × (1 + amp)
    4. Flat damage reduction celu  × (1 - DR)     [nie dla TRUE]
    5. Redukcja z armor / MR       × (1 - red)    [nie dla TRUE]
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Optional

from ..core.stats import StatType

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..units.target import Target
    from .crit import CritTracker


class DamageType(Enum):
    """Typ obrażeń - określa jak są redukowane."""
    PHYSICAL = "physical"   # Redukowane przez Armor
    MAGIC = "magic"         # Redukowane przez Magic Resist
    TRUE = "true"           # Nie redukowane

    @classmethod
    def from_string(cls, s: str) -> "DamageType":
        key = s.strip().lower()
        if key == "magical":
            key = "magic"
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown damage type '{s}'") from None


# ═══════════════════════════════════════════════════════════════════════════
# SNAPSHOTY
# ═══════════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class AttackerSnapshot:
    """Ofensywne staty atakującego w danej chwili."""
    attack_damage: float = 0.0
    ability_power: float = 0.0
    crit_chance: float = 0.0
    crit_damage: float = 0.0
    damage_amp: float = 0.0

    @classmethod
    def of(cls, unit: "Unit", now: Optional[int] = None) -> "AttackerSnapshot":
        stats = unit.stats
        return cls(
            attack_damage=stats.get(StatType.ATTACK_DAMAGE, now),
            ability_power=stats.get(StatType.ABILITY_POWER, now),
            crit_chance=stats.get(StatType.CRIT_CHANCE, now),
            crit_damage=stats.get(StatType.CRIT_DAMAGE, now),
            damage_amp=stats.get(StatType.DAMAGE_AMP, now),
        )


@dataclass(frozen=True)
class DefenderSnapshot:
    """Defensywne staty celu."""
    armor: float = 0.0
    magic_resist: float = 0.0
    damage_reduction: float = 0.0

    @classmethod
    def of(cls, target: "Target") -> "DefenderSnapshot":
        return cls(
            armor=target.stats.get(StatType.ARMOR),
            magic_resist=target.stats.get(StatType.MAGIC_RESIST),
            damage_reduction=target.damage_reduction,
        )

    def resistance_for(self, damage_type: DamageType) -> float:
        if damage_type == DamageType.PHYSICAL:
            return self.armor
        if damage_type == DamageType.MAGIC:
            return self.magic_resist
        return 0.0


@dataclass(frozen=True)
class DamageResult:
    """
    Wynik obliczenia obrażeń.

    Attributes:
        final_damage: Obrażenia po wszystkich redukcjach
        is_crit: Czy był krytyk
        pre_mitigation_damage: Obrażenia po crit i amp, przed DR/odpornością
        damage_type: Typ obrażeń
        reduction: Redukcja z odporności (ujemna = wzmocnienie)
    """
    final_damage: float
    is_crit: bool
    pre_mitigation_damage: float
    damage_type: DamageType
    reduction: float = 0.0

    def to_dict(self) -> dict:
        return {
            "final_damage": round(self.final_damage, 1),
            "is_crit": self.is_crit,
            "pre_mitigation_damage": round(self.pre_mitigation_damage, 1),
            "damage_type": self.damage_type.value,
            "reduction": round(self.reduction, 3),
        }


# ═══════════════════════════════════════════════════════════════════════════
# FORMUŁY
# ═══════════════════════════════════════════════════════════════════════════

def calculate_reduction(resistance: float) -> float:
    """
    Oblicza redukcję obrażeń z armor/MR.

    Examples:
        >>> calculate_reduction(0)
        0.0
        >>> calculate_reduction(100)
        0.5
        >>> calculate_reduction(-100)
        -0.5
    """
    if resistance >= 0:
        return resistance / (100 + resistance)
    return resistance / (100 - resistance)


def resistance_multiplier(resistance: float) -> float:
    """Mnożnik obrażeń dla danej odporności (1 - redukcja)."""
    return 1 - calculate_reduction(resistance)


def resolve_damage(
    amount: float,
    damage_type: DamageType,
    attacker: AttackerSnapshot,
    defender: DefenderSnapshot,
    crit_tracker: Optional["CritTracker"] = None,
    can_crit: bool = True,
) -> DamageResult:
    """
    Przepuszcza gotową kwotę obrażeń przez pipeline.

    Wspólny rdzeń dla trzech kalkulacji poniżej oraz dla
    override'ów auto-ataku (które same liczą kwotę bazową).

    Args:
        amount: Obrażenia przed crit i redukcjami
        damage_type: Typ obrażeń
        attacker: Staty atakującego
        defender: Staty celu
        crit_tracker: Tracker do rzutu (None = bez rzutu)
        can_crit: Czy źródło może critować

    Returns:
        DamageResult
    """
    total = amount

    # 2. Crit
    is_crit = False
    if can_crit and crit_tracker is not None:
        is_crit = crit_tracker.roll_crit(attacker.crit_chance)
        if is_crit:
            total *= 1 + attacker.crit_damage

    # 3. Damage amp
    total *= 1 + attacker.damage_amp
    pre_mitigation = total

    if damage_type == DamageType.TRUE:
        return DamageResult(total, is_crit, pre_mitigation, damage_type)

    # 4. Flat damage reduction celu
    total *= 1 - defender.damage_reduction

    # 5. Armor / MR
    reduction = calculate_reduction(defender.resistance_for(damage_type))
    total *= 1 - reduction

    return DamageResult(total, is_crit, pre_mitigation, damage_type, reduction)


def calculate_physical_damage(
    attacker: AttackerSnapshot,
    defender: DefenderSnapshot,
    base_damage: float = 0.0,
    crit_tracker: Optional["CritTracker"] = None,
    can_crit: bool = True,
    ad_ratio: float = 1.0,
) -> DamageResult:
    """Obrażenia fizyczne: base + AD × ad_ratio."""
    total = base_damage + attacker.attack_damage * ad_ratio
    return resolve_damage(total, DamageType.PHYSICAL, attacker, defender, crit_tracker, can_crit)


def calculate_magic_damage(
    attacker: AttackerSnapshot,
    defender: DefenderSnapshot,
    base_damage: float = 0.0,
    ap_ratio: float = 1.0,
    crit_tracker: Optional["CritTracker"] = None,
    can_crit: bool = False,
) -> DamageResult:
    """Obrażenia magiczne: base + AP × ap_ratio. Domyślnie bez crita."""
    total = base_damage + attacker.ability_power * ap_ratio
    return resolve_damage(total, DamageType.MAGIC, attacker, defender, crit_tracker, can_crit)


def calculate_true_damage(
    attacker: AttackerSnapshot,
    defender: DefenderSnapshot,
    base_damage: float,
    crit_tracker: Optional["CritTracker"] = None,
    can_crit: bool = False,
) -> DamageResult:
    """Obrażenia prawdziwe: bez DR i odporności, crit zależnie od źródła."""
    return resolve_damage(base_damage, DamageType.TRUE, attacker, defender, crit_tracker, can_crit)
