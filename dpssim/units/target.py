"""
Target - nieruchomy cel (manekin) przyjmujący obrażenia.

Cel ma tylko HP, armor, MR i płaską redukcję obrażeń.
HP zmienia się wyłącznie przez apply_damage i nigdy nie spada poniżej 0.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict

from ..core.stats import Stats, StatType


@dataclass(eq=False)
class Target:
    """
    Cel symulacji.

    Attributes:
        name: Nazwa (klucz w wynikach)
        max_hp: Maksymalne HP
        current_hp: Aktualne HP
        damage_reduction: Płaska redukcja obrażeń (0-1)
        stats: Tabela statystyk (health, armor, magic_resist)

    Example:
        >>> tank = Target.create("Frontline Tank", hp=50000, armor=100, magic_resist=50)
        >>> tank.apply_damage(1000)
        (1000, False)
    """
    name: str
    max_hp: float
    current_hp: float
    damage_reduction: float = 0.0
    stats: Stats = field(default_factory=Stats)

    @classmethod
    def create(
        cls,
        name: str,
        hp: float,
        armor: float = 0.0,
        magic_resist: float = 0.0,
        damage_reduction: float = 0.0,
    ) -> "Target":
        stats = Stats()
        stats.set_base(StatType.HEALTH, hp)
        stats.set_base(StatType.ARMOR, armor)
        stats.set_base(StatType.MAGIC_RESIST, magic_resist)
        return cls(
            name=name,
            max_hp=float(hp),
            current_hp=float(max(hp, 0)),
            damage_reduction=damage_reduction,
            stats=stats,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Target":
        return cls.create(
            name=data.get("name", "Target"),
            hp=data.get("hp", 1000),
            armor=data.get("armor", 0),
            magic_resist=data.get("magic_resist", 0),
            damage_reduction=data.get("damage_reduction", 0.0),
        )

    @property
    def is_alive(self) -> bool:
        return self.current_hp > 0

    def apply_damage(self, amount: float) -> tuple:
        """
        Odejmuje już zredukowane obrażenia.

        Returns:
            (amount, is_dead): Zadane obrażenia i czy cel zginął
        """
        self.current_hp -= amount
        if self.current_hp <= 0:
            self.current_hp = 0.0
            return amount, True
        return amount, False

    def reset(self) -> None:
        self.current_hp = self.max_hp

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "hp": round(self.current_hp, 1),
            "max_hp": self.max_hp,
            "armor": self.stats.get(StatType.ARMOR),
            "magic_resist": self.stats.get(StatType.MAGIC_RESIST),
            "damage_reduction": self.damage_reduction,
        }

    def __repr__(self) -> str:
        return f"Target({self.name}, {self.current_hp:.0f}/{self.max_hp:.0f})"
