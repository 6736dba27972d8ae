"""
System logowania zdarzeń symulacji do formatu JSON.

Log jest pomocniczy: nigdy nie wpływa na przebieg symulacji ani
na wynik. Obrażenia do wyniku trafiają osobno (DamageEvent).

TYPY ZDARZEŃ:
═══════════════════════════════════════════════════════════════════

    SIMULATION_START
    ─────────────────────────────────────────────────────────────
    Początek symulacji.
    Data: seed, unit (snapshot), targets

    SIMULATION_END
    ─────────────────────────────────────────────────────────────
    Koniec symulacji.
    Data: elapsed_ms, total_damage, survivors

    UNIT_ATTACK
    ─────────────────────────────────────────────────────────────
    Auto-atak (jeden wpis na trafienie).
    Data: damage, is_crit

    UNIT_DAMAGE
    ─────────────────────────────────────────────────────────────
    Cel otrzymał obrażenia.
    Data: source_id, damage, damage_type, hp_after

    BONUS_DAMAGE
    ─────────────────────────────────────────────────────────────
    Dodatkowe obrażenia z efektu on-hit buffa.
    Data: source, damage, damage_type

    UNIT_DEATH
    ─────────────────────────────────────────────────────────────
    Cel zginął.
    Data: killer_id

    UNIT_MANA_GAIN
    ─────────────────────────────────────────────────────────────
    Mana za atak / regen.
    Data: amount, mana_after, reason

    ABILITY_CAST_START / ABILITY_CAST_COMPLETE
    ─────────────────────────────────────────────────────────────
    Początek i koniec casta.
    Data: ability_id, targets

    BUFF_EXPIRE
    ─────────────────────────────────────────────────────────────
    Wygaśnięcie buffa.
    Data: buff_id

FORMAT LOGU:
═══════════════════════════════════════════════════════════════════

{
    "metadata": {"version": "1.0", "seed": 42, "tick_interval_ms": 17, ...},
    "events": [
        {"time_ms": 0, "type": "SIMULATION_START", "data": {...}},
        {"time_ms": 1258, "type": "UNIT_ATTACK", "unit_id": "Yunara",
         "target_id": "Frontline Tank", "data": {"damage": 41.2, "is_crit": false}},
        ...
    ]
}
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Dict, List, Optional
from datetime import datetime
import json
from pathlib import Path


class EventType(Enum):
    """Typ zdarzenia w symulacji."""

    # Symulacja
    SIMULATION_START = auto()
    SIMULATION_END = auto()

    # Walka
    UNIT_ATTACK = auto()
    UNIT_DAMAGE = auto()
    BONUS_DAMAGE = auto()
    UNIT_DEATH = auto()
    UNIT_MANA_GAIN = auto()

    # Umiejętności
    ABILITY_CAST_START = auto()
    ABILITY_CAST_COMPLETE = auto()

    # Buffy
    BUFF_EXPIRE = auto()


@dataclass
class GameEvent:
    """
    Pojedyncze zdarzenie w symulacji.

    Attributes:
        time_ms (int): Czas symulacji (ms)
        event_type (EventType): Typ zdarzenia
        unit_id (Optional[str]): Nazwa jednostki
        target_id (Optional[str]): Nazwa celu
        data (Dict): Dodatkowe dane specyficzne dla typu zdarzenia
    """
    time_ms: int
    event_type: EventType
    unit_id: Optional[str] = None
    target_id: Optional[str] = None
    data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Serializuje zdarzenie do słownika."""
        result = {
            "time_ms": self.time_ms,
            "type": self.event_type.name,
        }

        if self.unit_id:
            result["unit_id"] = self.unit_id
        if self.target_id:
            result["target_id"] = self.target_id
        if self.data:
            result["data"] = self.data

        return result

    def format(self) -> str:
        """Jedna linia do wypisania w trybie verbose."""
        who = self.unit_id or "-"
        if self.target_id:
            who = f"{who} -> {self.target_id}"
        details = " ".join(f"{k}={v}" for k, v in self.data.items())
        return f"[{self.time_ms / 1000:7.3f}s] {self.event_type.name:<22} {who} {details}".rstrip()


class EventLogger:
    """
    Logger zdarzeń symulacji.

    Attributes:
        events (List[GameEvent]): Lista wszystkich zdarzeń
        metadata (Dict): Metadane symulacji
        verbose (bool): Czy wypisywać zdarzenia na stdout

    Example:
        >>> logger = EventLogger(seed=42, verbose=True)
        >>> logger.log_attack(1250, "Yunara", "Frontline Tank", 41.2, is_crit=False)
        [  1.250s] UNIT_ATTACK            Yunara -> Frontline Tank damage=41.2 is_crit=False
        >>> logger.save("output/run_42.json")
    """

    def __init__(
        self,
        seed: Optional[int] = None,
        tick_interval_ms: int = 17,
        verbose: bool = False,
    ):
        self.events: List[GameEvent] = []
        self.verbose = verbose
        self.metadata: Dict[str, Any] = {
            "version": "1.0",
            "seed": seed,
            "tick_interval_ms": tick_interval_ms,
            "timestamp": datetime.now().isoformat(),
        }

    # ─────────────────────────────────────────────────────────────────────────
    # LOGOWANIE OGÓLNE
    # ─────────────────────────────────────────────────────────────────────────

    def log(self, event: GameEvent) -> None:
        self.events.append(event)
        if self.verbose:
            print(event.format())

    def log_event(
        self,
        time_ms: int,
        event_type: EventType,
        unit_id: Optional[str] = None,
        target_id: Optional[str] = None,
        **data: Any,
    ) -> GameEvent:
        """
        Tworzy i loguje zdarzenie.

        Returns:
            GameEvent: Utworzone zdarzenie
        """
        event = GameEvent(
            time_ms=time_ms,
            event_type=event_type,
            unit_id=unit_id,
            target_id=target_id,
            data=dict(data),
        )
        self.log(event)
        return event

    # ─────────────────────────────────────────────────────────────────────────
    # POMOCNICZE METODY LOGOWANIA
    # ─────────────────────────────────────────────────────────────────────────

    def log_simulation_start(self, time_ms: int, unit: Dict, targets: List[Dict]) -> None:
        self.log_event(
            time_ms, EventType.SIMULATION_START,
            unit_id=unit.get("name"),
            seed=self.metadata["seed"],
            targets=[t["name"] for t in targets],
        )

    def log_simulation_end(
        self,
        time_ms: int,
        unit_id: str,
        total_damage: float,
        survivors: List[str],
    ) -> None:
        self.log_event(
            time_ms,
            EventType.SIMULATION_END,
            unit_id=unit_id,
            elapsed_ms=time_ms,
            total_damage=round(total_damage, 1),
            survivors=survivors,
        )

    def log_attack(
        self,
        time_ms: int,
        unit_id: str,
        target_id: str,
        damage: float,
        is_crit: bool = False,
    ) -> None:
        """Loguje trafienie auto-atakiem."""
        self.log_event(
            time_ms,
            EventType.UNIT_ATTACK,
            unit_id=unit_id,
            target_id=target_id,
            damage=round(damage, 1),
            is_crit=is_crit,
        )

    def log_damage(
        self,
        time_ms: int,
        unit_id: str,
        source_id: str,
        damage: float,
        damage_type: str,
        hp_after: float,
    ) -> None:
        """Loguje otrzymanie obrażeń (unit_id = cel)."""
        self.log_event(
            time_ms,
            EventType.UNIT_DAMAGE,
            unit_id=unit_id,
            source_id=source_id,
            damage=round(damage, 1),
            damage_type=damage_type,
            hp_after=round(hp_after, 1),
        )

    def log_bonus_damage(
        self,
        time_ms: int,
        unit_id: str,
        target_id: str,
        source: str,
        damage: float,
        damage_type: str,
    ) -> None:
        """Loguje dodatkowe obrażenia efektu on-hit."""
        self.log_event(
            time_ms,
            EventType.BONUS_DAMAGE,
            unit_id=unit_id,
            target_id=target_id,
            source=source,
            damage=round(damage, 1),
            damage_type=damage_type,
        )

    def log_death(
        self,
        time_ms: int,
        unit_id: str,
        killer_id: Optional[str] = None,
    ) -> None:
        self.log_event(
            time_ms,
            EventType.UNIT_DEATH,
            unit_id=unit_id,
            killer_id=killer_id,
        )

    def log_mana_gain(
        self,
        time_ms: int,
        unit_id: str,
        amount: float,
        mana_after: float,
        reason: str,
    ) -> None:
        self.log_event(
            time_ms,
            EventType.UNIT_MANA_GAIN,
            unit_id=unit_id,
            amount=round(amount, 1),
            mana_after=round(mana_after, 1),
            reason=reason,
        )

    def log_ability_cast(
        self,
        time_ms: int,
        unit_id: str,
        ability_id: str,
        targets: List[str],
        completed: bool = False,
    ) -> None:
        """Loguje start (lub koniec) casta umiejętności."""
        self.log_event(
            time_ms,
            EventType.ABILITY_CAST_COMPLETE if completed else EventType.ABILITY_CAST_START,
            unit_id=unit_id,
            ability_id=ability_id,
            targets=targets,
        )

    def log_buff_expire(
        self,
        time_ms: int,
        unit_id: str,
        buff_id: str,
    ) -> None:
        self.log_event(
            time_ms,
            EventType.BUFF_EXPIRE,
            unit_id=unit_id,
            buff_id=buff_id,
        )

    # ─────────────────────────────────────────────────────────────────────────
    # SERIALIZACJA
    # ─────────────────────────────────────────────────────────────────────────

    def to_dict(self) -> Dict[str, Any]:
        return {
            "metadata": self.metadata,
            "events": [e.to_dict() for e in self.events],
        }

    def save(self, filepath: str) -> None:
        """Zapisuje log do pliku JSON (tworzy katalogi)."""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)

    def to_json(self, indent: Optional[int] = 2) -> str:
        """
        Zwraca log jako string JSON.

        Args:
            indent: Wcięcie (None = compact)
        """
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)

    # ─────────────────────────────────────────────────────────────────────────
    # STATYSTYKI
    # ─────────────────────────────────────────────────────────────────────────

    def get_events_by_type(self, event_type: EventType) -> List[GameEvent]:
        """Filtruje zdarzenia po typie."""
        return [e for e in self.events if e.event_type == event_type]

    def get_events_for_unit(self, unit_id: str) -> List[GameEvent]:
        """Filtruje zdarzenia dla jednostki (jako sprawca lub cel)."""
        return [e for e in self.events if unit_id in (e.unit_id, e.target_id)]
