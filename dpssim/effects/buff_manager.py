"""
BuffManager - zarządzanie buffami jednej jednostki.

CYKL ŻYCIA:
═══════════════════════════════════════════════════════════════════

    1. APPLY   apply_buff(buff, now)
       - Istnieje aktywny buff o tej nazwie -> ścieżka refresh
       - W przeciwnym razie: applied_time = now, dodaj, ON_APPLY

    2. UPDATE  update_buffs(now)   (raz na tick, przed walką)
       - Okno minęło -> is_expired, ON_EXPIRE
       - W przeciwnym razie ON_TICK(elapsed)
       - Po przejściu wygasłe buffy są usuwane
       - Zwraca wygasłe oraz jawnie usunięte od poprzedniego update

    3. QUERY   get_active_buffs / has_buff / get_buff_stats

ITERACJA:
═══════════════════════════════════════════════════════════════════

    update_buffs iteruje po kopii listy. Buffy nałożone przez
    callbacki w trakcie przejścia trafiają do listy pending
    i są dołączane po zakończeniu przejścia - nic nie jest
    pomijane ani przetwarzane dwa razy.

    Kolejność buffów = kolejność nałożenia (deterministyczna).
"""

from __future__ import annotations
from typing import Dict, List, Optional, Tuple, TYPE_CHECKING

from ..core.stats import StatMap
from .buff import Buff, BuffTrigger, StackBehavior

if TYPE_CHECKING:
    from ..units.unit import Unit


class BuffManager:
    """
    Aktywne buffy jednej jednostki.

    Attributes:
        owner: Nosiciel (przekazywany do callbacków)
        _buffs: Buffy w kolejności nałożenia
        _pending: Buffy nałożone w trakcie update_buffs
        _removed: Buffy usunięte jawnie, oddawane przez następny update_buffs

    Example:
        >>> manager = BuffManager(unit)
        >>> manager.apply_buff(Buff("Rage", duration=3000), now=0)
        >>> manager.has_buff("Rage", now=2999)
        True
        >>> manager.update_buffs(now=3000)
        [Buff(Rage, 3000ms)]
    """

    def __init__(self, owner: Optional["Unit"] = None):
        self.owner = owner
        self._buffs: List[Buff] = []
        self._pending: List[Buff] = []
        self._removed: List[Buff] = []
        self._updating = False
        self._instance_counters: Dict[str, int] = {}

    @property
    def buffs(self) -> List[Buff]:
        """Wszystkie buffy na liście (łącznie z wygasłymi przed sprzątaniem)."""
        return self._buffs + self._pending

    # ─────────────────────────────────────────────────────────────────────────
    # NAKŁADANIE
    # ─────────────────────────────────────────────────────────────────────────

    def apply_buff(self, buff: Buff, now: int) -> Buff:
        """
        Nakłada buff albo odświeża / stackuje istniejący.

        Args:
            buff: Nowy buff
            now: Aktualny czas (ms)

        Returns:
            Buff: Buff który jest faktycznie aktywny na nosicielu
                  (istniejący przy refresh, nowy w pozostałych przypadkach)
        """
        if buff.stack_behavior == StackBehavior.INDEPENDENT:
            if self._find_by_name(buff.name, now) is not None:
                count = self._instance_counters.get(buff.name, 1) + 1
                self._instance_counters[buff.name] = count
                buff.key = f"{buff.name}#{count}"
        else:
            existing = self._find_by_key(buff.name, now)
            if existing is not None:
                self._refresh(existing, buff, now)
                return existing

        buff.applied_time = now
        buff.is_expired = False
        if self._updating:
            self._pending.append(buff)
        else:
            self._buffs.append(buff)

        buff.fire(BuffTrigger.ON_APPLY, self.owner)
        return buff

    def _refresh(self, existing: Buff, incoming: Buff, now: int) -> None:
        if existing.stack_behavior == StackBehavior.ADDITIVE:
            existing.stack_additive(incoming)
        elif existing.stack_behavior == StackBehavior.MULTIPLICATIVE:
            existing.stack_multiplicative(incoming)

        existing.applied_time = now
        existing.fire(BuffTrigger.ON_REFRESH, self.owner, incoming)

    def remove_buff(self, name: str) -> bool:
        """
        Jawnie usuwa buff (po kluczu).

        Wywołuje ON_EXPIRE. Jeśli trwa update_buffs, buff zostanie
        wyczyszczony na końcu przejścia. Usunięty buff pojawia się
        w wyniku najbliższego update_buffs.

        Returns:
            bool: True jeśli buff był aktywny
        """
        for buff in self.buffs:
            if buff.key == name and not buff.is_expired:
                buff.is_expired = True
                self._removed.append(buff)
                buff.fire(BuffTrigger.ON_EXPIRE, self.owner)
                if not self._updating:
                    self._cleanup_expired()
                return True
        return False

    # ─────────────────────────────────────────────────────────────────────────
    # UPDATE
    # ─────────────────────────────────────────────────────────────────────────

    def update_buffs(self, now: int) -> List[Buff]:
        """
        Aktualizuje buffy (raz na tick).

        Returns:
            List[Buff]: Buffy które wygasły w tym przejściu, a po nich
                        buffy usunięte jawnie od poprzedniego wywołania
        """
        expired: List[Buff] = []
        self._updating = True
        try:
            for buff in list(self._buffs):
                if buff.is_expired:
                    continue
                if not buff.is_active(now):
                    buff.is_expired = True
                    expired.append(buff)
                    buff.fire(BuffTrigger.ON_EXPIRE, self.owner)
                else:
                    buff.fire(BuffTrigger.ON_TICK, self.owner, buff.elapsed(now))
        finally:
            self._updating = False

        self._buffs.extend(self._pending)
        self._pending = []
        self._cleanup_expired()

        expired.extend(self._removed)
        self._removed = []
        return expired

    def _cleanup_expired(self) -> None:
        self._buffs = [b for b in self._buffs if not b.is_expired]

    # ─────────────────────────────────────────────────────────────────────────
    # ZAPYTANIA
    # ─────────────────────────────────────────────────────────────────────────

    def _find_by_key(self, key: str, now: int) -> Optional[Buff]:
        for buff in self.buffs:
            if buff.key == key and buff.is_active(now):
                return buff
        return None

    def _find_by_name(self, name: str, now: int) -> Optional[Buff]:
        for buff in self.buffs:
            if buff.name == name and buff.is_active(now):
                return buff
        return None

    def get_active_buffs(self, now: int) -> List[Buff]:
        """Buffy aktywne w chwili now, w kolejności nałożenia."""
        return [b for b in self.buffs if b.is_active(now)]

    def get_buff(self, name: str, now: int) -> Optional[Buff]:
        """Aktywny buff o kluczu lub nazwie bazowej."""
        return self._find_by_key(name, now) or self._find_by_name(name, now)

    def has_buff(self, name: str, now: int) -> bool:
        return self.get_buff(name, now) is not None

    def get_stacks(self, name: str, now: int) -> int:
        buff = self.get_buff(name, now)
        return buff.current_stacks if buff else 0

    def remaining_duration(self, name: str, now: int) -> int:
        """Pozostały czas buffa w ms (0 gdy brak / stały)."""
        buff = self.get_buff(name, now)
        return buff.remaining_duration(now) if buff else 0

    def get_buff_stats(self, now: int) -> Tuple[StatMap, StatMap]:
        """
        Sumuje staty wszystkich aktywnych buffów.

        Returns:
            (bonuses, multipliers): Słowniki StatType -> suma
        """
        bonuses: StatMap = {}
        multipliers: StatMap = {}
        for buff in self.get_active_buffs(now):
            for stat, value in buff.stat_bonuses.items():
                bonuses[stat] = bonuses.get(stat, 0.0) + value
            for stat, value in buff.stat_multipliers.items():
                multipliers[stat] = multipliers.get(stat, 0.0) + value
        return bonuses, multipliers

    def __len__(self) -> int:
        return len(self._buffs)

    def __repr__(self) -> str:
        return f"BuffManager({self._buffs})"
