"""
Tabela statystyk jednostki / celu.

Każda statystyka ma trzy warstwy plus nakładkę z aktywnych buffów:

    base        - wartość bazowa (z definicji jednostki, per star level)
    bonus       - addytywny bonus (itemy, augmenty, stacki itemów)
    multiplier  - mnożnik (0 traktujemy jako 1.0, NIE jako zero)
    overlay     - bonusy/mnożniki z aktywnych buffów w danej chwili

WZORY:
═══════════════════════════════════════════════════════════════════

    Ogólnie:
        value = (base + bonus + buff_bonus) × (multiplier + buff_multiplier)

    Attack Damage / Attack Speed (procent od bazy):
        value = base × (1 + bonus + buff_bonus)

    Attack Speed dodatkowo ograniczony do ATTACK_SPEED_CAP (5.0).

Przykład:
    Yunara: base AD 90, Deathblade +55% AD
    AD = 90 × (1 + 0.55) = 139.5

Warstwy są tylko akumulowane - itemy i augmenty są na stałe przez
cały przebieg, więc nie ma API do usuwania bonusów.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional, Tuple, Protocol


ATTACK_SPEED_CAP = 5.0


class StatType(Enum):
    """Rodzaje statystyk."""

    HEALTH = "health"
    ARMOR = "armor"
    MAGIC_RESIST = "magic_resist"
    ATTACK_DAMAGE = "attack_damage"
    ABILITY_POWER = "ability_power"
    ATTACK_SPEED = "attack_speed"
    CRIT_CHANCE = "crit_chance"
    CRIT_DAMAGE = "crit_damage"
    MANA = "mana"                      # max mana = koszt umiejętności
    MANA_REGEN = "mana_regen"          # mana na sekundę
    VAMP = "vamp"
    DAMAGE_REDUCTION = "damage_reduction"
    DAMAGE_AMP = "damage_amp"

    @classmethod
    def from_string(cls, s: str) -> "StatType":
        """
        Konwertuje nazwę z YAML na StatType.

        Akceptuje pełne nazwy oraz skróty (ad, ap, as, mr, hp).

        Raises:
            ValueError: Dla nieznanej nazwy
        """
        key = s.strip().lower()
        if key in _STAT_ALIASES:
            return _STAT_ALIASES[key]
        try:
            return cls(key)
        except ValueError:
            raise ValueError(f"Unknown stat '{s}'") from None


_STAT_ALIASES = {
    "hp": StatType.HEALTH,
    "ad": StatType.ATTACK_DAMAGE,
    "ap": StatType.ABILITY_POWER,
    "as": StatType.ATTACK_SPEED,
    "mr": StatType.MAGIC_RESIST,
    "max_mana": StatType.MANA,
    "amp": StatType.DAMAGE_AMP,
    "dr": StatType.DAMAGE_REDUCTION,
}

# Staty liczone jako procent od bazy
_PERCENT_OF_BASE = (StatType.ATTACK_SPEED, StatType.ATTACK_DAMAGE)


StatMap = Dict[StatType, float]


def parse_stat_map(data: Optional[Dict[str, float]]) -> StatMap:
    """Zamienia słownik z YAML ({"ad": 0.35}) na {StatType: float}."""
    if not data:
        return {}
    return {StatType.from_string(name): float(value) for name, value in data.items()}


class StatOverlay(Protocol):
    """Źródło nakładki statystyk (BuffManager)."""

    def get_buff_stats(self, now: int) -> Tuple[StatMap, StatMap]:
        ...


@dataclass
class Stats:
    """
    Warstwowa tabela statystyk.

    Attributes:
        base: Wartości bazowe
        bonus: Addytywne bonusy
        multipliers: Mnożniki (brak / 0 = 1.0)
        overlay: Opcjonalne źródło bonusów z buffów (BuffManager właściciela)
        current_time: Kursor czasu (ms) używany do rozwiązania nakładki

    Example:
        >>> stats = Stats()
        >>> stats.set_base(StatType.ATTACK_DAMAGE, 100)
        >>> stats.add_bonus(StatType.ATTACK_DAMAGE, 0.35)
        >>> stats.get(StatType.ATTACK_DAMAGE)
        135.0
    """
    base: StatMap = field(default_factory=dict)
    bonus: StatMap = field(default_factory=dict)
    multipliers: StatMap = field(default_factory=dict)
    overlay: Optional[StatOverlay] = None
    current_time: int = 0

    # ─────────────────────────────────────────────────────────────────────────
    # MUTACJE
    # ─────────────────────────────────────────────────────────────────────────

    def set_base(self, stat: StatType, value: float) -> None:
        self.base[stat] = float(value)

    def add_bonus(self, stat: StatType, value: float) -> None:
        self.bonus[stat] = self.bonus.get(stat, 0.0) + value

    def add_multiplier(self, stat: StatType, value: float) -> None:
        self.multipliers[stat] = self.multipliers.get(stat, 0.0) + value

    def add_bonuses(self, bonuses: StatMap) -> None:
        """Dodaje cały zestaw bonusów (np. staty itema)."""
        for stat, value in bonuses.items():
            self.add_bonus(stat, value)

    def set_current_time(self, now: int) -> None:
        """Przesuwa kursor czasu używany przez nakładkę buffów."""
        self.current_time = now

    # ─────────────────────────────────────────────────────────────────────────
    # ODCZYT
    # ─────────────────────────────────────────────────────────────────────────

    def _overlay_at(self, now: Optional[int]) -> Tuple[StatMap, StatMap]:
        if self.overlay is None:
            return {}, {}
        return self.overlay.get_buff_stats(self.current_time if now is None else now)

    def get_bonus(self, stat: StatType, now: Optional[int] = None) -> float:
        """
        Zwraca samą warstwę bonusu (łącznie z bonusami buffów).

        Używane przez formuły skalujące od bonusowych wartości,
        np. bonus AD dla lasera Yunary.
        """
        buff_bonuses, _ = self._overlay_at(now)
        return self.bonus.get(stat, 0.0) + buff_bonuses.get(stat, 0.0)

    def get(self, stat: StatType, now: Optional[int] = None) -> float:
        """
        Zwraca finalną wartość statystyki.

        Args:
            stat: Rodzaj statystyki
            now: Czas (ms) dla nakładki buffów; domyślnie current_time

        Returns:
            float: Wartość po zastosowaniu wszystkich warstw
                   (0 dla nieustawionych statystyk)
        """
        base = self.base.get(stat, 0.0)
        bonus = self.bonus.get(stat, 0.0)
        multiplier = self.multipliers.get(stat, 0.0)
        if multiplier == 0:
            multiplier = 1.0

        buff_bonuses, buff_multipliers = self._overlay_at(now)
        bonus += buff_bonuses.get(stat, 0.0)
        multiplier += buff_multipliers.get(stat, 0.0)

        if stat in _PERCENT_OF_BASE:
            result = base * (1 + bonus)
            if stat == StatType.ATTACK_SPEED:
                return min(result, ATTACK_SPEED_CAP)
            return result

        return (base + bonus) * multiplier

    def snapshot(self, now: Optional[int] = None) -> Dict[str, float]:
        """Zwraca słownik {nazwa: wartość} dla wszystkich statystyk."""
        return {stat.value: self.get(stat, now) for stat in StatType}

    def __repr__(self) -> str:
        return (
            f"Stats(AD={self.get(StatType.ATTACK_DAMAGE):.1f}, "
            f"AS={self.get(StatType.ATTACK_SPEED):.2f}, "
            f"AP={self.get(StatType.ABILITY_POWER):.2f}, "
            f"mana={self.get(StatType.MANA):.0f})"
        )
