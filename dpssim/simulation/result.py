"""
Wynik symulacji - niemutowalny log obrażeń i podsumowanie przebiegu.

DamageEvent jest dopisywany do logu w chwili zadania obrażeń
i nigdy potem nie jest zmieniany. SimulationResult powstaje raz,
na końcu przebiegu, i służy tylko do odczytu (CLI, API, wykresy).

FORMAT to_dict():
═══════════════════════════════════════════════════════════════════

{
    "unit": "Yunara",
    "total_damage": 21874.3,
    "dps": 729.1,
    "damage_by_type": {"physical": 19110.0, "true": 2764.3},
    "damage_by_source": {"auto_attack": 21874.3, "ability": 0.0},
    "time_to_kill": {"Frontline Tank": null},
    "final_health": {"Frontline Tank": 28125.7},
    "crit_rate": 0.61,
    ...
}
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from ..combat.damage import DamageType


SOURCE_AUTO_ATTACK = "auto_attack"
SOURCE_ABILITY = "ability"


@dataclass(frozen=True)
class DamageEvent:
    """
    Pojedynczy wpis w logu obrażeń.

    Attributes:
        timestamp: Czas symulacji (ms)
        damage: Zadane obrażenia (po redukcjach)
        damage_type: Typ obrażeń
        is_ability: Obrażenia z umiejętności (False = auto-atak / on-hit)
        is_crit: Czy był crit
        target_name: Nazwa celu
    """
    timestamp: int
    damage: float
    damage_type: DamageType
    is_ability: bool
    is_crit: bool
    target_name: str

    @property
    def source(self) -> str:
        return SOURCE_ABILITY if self.is_ability else SOURCE_AUTO_ATTACK

    def to_dict(self) -> Dict[str, Any]:
        return {
            "timestamp": self.timestamp,
            "damage": round(self.damage, 2),
            "damage_type": self.damage_type.value,
            "is_ability": self.is_ability,
            "is_crit": self.is_crit,
            "target": self.target_name,
        }


@dataclass
class SimulationResult:
    """
    Podsumowanie jednego przebiegu.

    Attributes:
        unit_name: Nazwa jednostki
        total_damage: Suma obrażeń
        dps: total_damage / sekundy (0 gdy elapsed_ms == 0)
        damage_by_type: Obrażenia per typ
        damage_by_source: Obrażenia per źródło (auto_attack / ability)
        damage_log: Log obrażeń w kolejności zadania
        time_to_kill: Czas zabicia per cel (None = przeżył)
        final_health: HP na koniec per cel
        crit_rate: total_crits / total_attacks (0 gdy brak rzutów)
        attack_count: Liczba auto-ataków
        ability_count: Liczba castów
        stats: Migawka statów na koniec (mana, max_mana, AS, AD, AP)
        elapsed_ms: Czas trwania przebiegu
        seed: Seed generatora critów
        items: Nazwy założonych itemów
    """
    unit_name: str = ""
    total_damage: float = 0.0
    dps: float = 0.0
    damage_by_type: Dict[DamageType, float] = field(default_factory=dict)
    damage_by_source: Dict[str, float] = field(default_factory=dict)
    damage_log: List[DamageEvent] = field(default_factory=list)
    time_to_kill: Dict[str, Optional[int]] = field(default_factory=dict)
    final_health: Dict[str, float] = field(default_factory=dict)
    crit_rate: float = 0.0
    attack_count: int = 0
    ability_count: int = 0
    stats: Dict[str, float] = field(default_factory=dict)
    elapsed_ms: int = 0
    seed: Optional[int] = None
    items: List[str] = field(default_factory=list)

    @classmethod
    def from_log(
        cls,
        damage_log: List[DamageEvent],
        elapsed_ms: int,
        **fields: Any,
    ) -> "SimulationResult":
        """
        Liczy sumy i podziały z logu obrażeń.

        Pozostałe pola (time_to_kill, crit_rate, ...) przekazywane wprost.
        """
        by_type: Dict[DamageType, float] = {}
        by_source = {SOURCE_AUTO_ATTACK: 0.0, SOURCE_ABILITY: 0.0}
        total = 0.0
        for event in damage_log:
            total += event.damage
            by_type[event.damage_type] = by_type.get(event.damage_type, 0.0) + event.damage
            by_source[event.source] += event.damage

        dps = total / (elapsed_ms / 1000) if elapsed_ms > 0 else 0.0
        return cls(
            total_damage=total,
            dps=dps,
            damage_by_type=by_type,
            damage_by_source=by_source,
            damage_log=list(damage_log),
            elapsed_ms=elapsed_ms,
            **fields,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # POCHODNE
    # ─────────────────────────────────────────────────────────────────────────

    def damage_over_time(self) -> List[Tuple[int, float]]:
        """
        Skumulowane obrażenia w czasie [(timestamp, suma), ...].

        Seria dla zewnętrznego rysowania wykresów.
        """
        series = []
        running = 0.0
        for event in self.damage_log:
            running += event.damage
            series.append((event.timestamp, running))
        return series

    def damage_type_percentages(self) -> Dict[str, float]:
        """Udział typów obrażeń w procentach (pusty słownik przy 0 obrażeń)."""
        if self.total_damage <= 0:
            return {}
        return {
            damage_type.value: amount / self.total_damage * 100
            for damage_type, amount in self.damage_by_type.items()
        }

    @property
    def killed_all(self) -> bool:
        return bool(self.time_to_kill) and all(t is not None for t in self.time_to_kill.values())

    def to_dict(self, include_log: bool = False) -> Dict[str, Any]:
        result = {
            "unit": self.unit_name,
            "items": list(self.items),
            "total_damage": round(self.total_damage, 2),
            "dps": round(self.dps, 2),
            "damage_by_type": {t.value: round(v, 2) for t, v in self.damage_by_type.items()},
            "damage_type_percentages": {
                k: round(v, 2) for k, v in self.damage_type_percentages().items()
            },
            "damage_by_source": {k: round(v, 2) for k, v in self.damage_by_source.items()},
            "time_to_kill": dict(self.time_to_kill),
            "final_health": {k: round(v, 2) for k, v in self.final_health.items()},
            "crit_rate": round(self.crit_rate, 4),
            "attack_count": self.attack_count,
            "ability_count": self.ability_count,
            "stats": {k: round(v, 3) for k, v in self.stats.items()},
            "elapsed_ms": self.elapsed_ms,
            "seed": self.seed,
        }
        if include_log:
            result["damage_log"] = [e.to_dict() for e in self.damage_log]
        return result
