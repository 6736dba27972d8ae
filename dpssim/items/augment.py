"""
Augment - stały pakiet statystyk nakładany na jednostkę.

    augments:
      Combat Training:
        description: "Your team gains 10 Attack Damage"
        stats: {attack_damage: 0.10}
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict

from ..core.stats import StatMap, parse_stat_map


@dataclass
class Augment:
    name: str
    description: str = ""
    stats: StatMap = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Augment":
        return cls(
            name=data.get("id", data.get("name", "Augment")),
            description=data.get("description", ""),
            stats=parse_stat_map(data.get("stats")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "stats": {s.value: v for s, v in self.stats.items()},
        }
