"""
Główny silnik symulacji DPS.

Jedna jednostka atakuje nieruchome cele. Czas płynie stałymi
krokami (domyślnie 17 ms, ~60 ticków na sekundę), każdy tick
wykonuje fazy w ściśle określonej kolejności.

PĘTLA TICKA:
═══════════════════════════════════════════════════════════════════

    1. CZAS
       ─────────────────────────────────────────────────────────
       • stats.set_current_time(now) - kursor dla nakładki buffów

    2. UPDATE_BUFFS
       ─────────────────────────────────────────────────────────
       • Wygaszenie buffów (ON_EXPIRE), ON_TICK dla reszty
       • Loguj BUFF_EXPIRE
       • Musi być przed walką - override auto-ataku, który właśnie
         wygasł, nie może już zadziałać w tym ticku

    3. CAST W TOKU
       ─────────────────────────────────────────────────────────
       • Cast skończony -> ON_CAST (obrażenia) + ON_CAST_COMPLETE
       • Cast trwa i blokuje auto-ataki -> tylko faza 6, koniec ticka

    4. START CASTA
       ─────────────────────────────────────────────────────────
       • mana >= koszt i są cele (1 żywy / wszystkie żywe dla AoE)
       • Płać manę, ON_CAST_START, hooki itemów ON_CAST
       • Koniec ticka

    5. AUTO-ATAK
       ─────────────────────────────────────────────────────────
       • now >= next_attack_time (i cast pozwala na ataki)
       • Trafienia: override aktywnego buffa albo zwykły atak fizyczny
       • Pipeline obrażeń dla każdego trafienia
       • Hooki itemów ON_ATTACK (raz na atak)
       • Dla każdego trafienia: HP celu -> ON_HIT itemów -> on-hit buffów
       • Mana za atak, następny atak za 1000 / AS ms

    6. NOWA SEKUNDA
       ─────────────────────────────────────────────────────────
       • Raz na przekroczoną pełną sekundę
       • Regen many (jeśli dozwolony), hooki itemów ON_SECOND

KONIEC PRZEBIEGU:
═══════════════════════════════════════════════════════════════════

    • now >= duration_ms
    • albo wszystkie cele mają 0 HP (sprawdzane przed każdym tickiem,
      cel martwy od startu ma time_to_kill = 0)

DETERMINIZM:
═══════════════════════════════════════════════════════════════════

    • Ten sam seed = ten sam log obrażeń
    • Itemy i buffy przetwarzane w kolejności nałożenia
    • Jedyna losowość: CritTracker jednostki (GameRNG z seeda)

Przykład użycia:
    >>> unit = library.units.get("Yunara")[0].build(2, items)
    >>> tank = Target.create("Frontline Tank", hp=50000, armor=100, magic_resist=50)
    >>> result = Simulator(unit, [tank], seed=42).run()
    >>> round(result.dps)
    812
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
import copy

from ..core.rng import GameRNG
from ..core.registry import ContentLibrary
from ..combat.damage import (
    AttackerSnapshot, DefenderSnapshot, DamageResult,
    calculate_physical_damage, resolve_damage,
)
from ..effects.buff import AttackStrike, Buff
from ..events.event_logger import EventLogger
from ..items.item_manager import ItemManager
from ..units.target import Target
from ..units.unit import Unit
from .result import DamageEvent, SimulationResult


DEFAULT_DURATION_MS = 30000
DEFAULT_TICK_INTERVAL_MS = 17


@dataclass
class SimulationConfig:
    """
    Konfiguracja przebiegu.

    Attributes:
        duration_ms (int): Maksymalny czas symulacji
        tick_interval_ms (int): Krok czasu
        verbose (bool): Wypisywanie zdarzeń na stdout

    Niedodatnie duration / interval są zastępowane wartościami domyślnymi.
    """
    duration_ms: int = DEFAULT_DURATION_MS
    tick_interval_ms: int = DEFAULT_TICK_INTERVAL_MS
    verbose: bool = False

    def __post_init__(self):
        if self.duration_ms <= 0:
            self.duration_ms = DEFAULT_DURATION_MS
        if self.tick_interval_ms <= 0:
            self.tick_interval_ms = DEFAULT_TICK_INTERVAL_MS

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "SimulationConfig":
        """Tworzy konfigurację z sekcji simulation z defaults.yaml."""
        data = data or {}
        return cls(
            duration_ms=int(data.get("duration_ms", DEFAULT_DURATION_MS)),
            tick_interval_ms=int(data.get("tick_interval_ms", DEFAULT_TICK_INTERVAL_MS)),
            verbose=bool(data.get("verbose", False)),
        )


class Simulator:
    """
    Pętla ticków dla jednej jednostki i jej celów.

    Attributes:
        unit (Unit): Atakująca jednostka
        targets (List[Target]): Cele w kolejności priorytetu
        config (SimulationConfig): Konfiguracja
        seed (int): Seed generatora critów
        logger (EventLogger): Log zdarzeń (pomocniczy)
        items (ItemManager): Odpalanie hooków itemów
        time (int): Aktualny czas (ms)

    Example:
        >>> sim = Simulator(unit, [tank], SimulationConfig(duration_ms=10000), seed=7)
        >>> result = sim.run()
        >>> result.time_to_kill["Frontline Tank"]
        None
    """

    def __init__(
        self,
        unit: Unit,
        targets: Sequence[Target],
        config: Optional[SimulationConfig] = None,
        seed: Optional[int] = None,
        logger: Optional[EventLogger] = None,
    ):
        self.unit = unit
        self.targets: List[Target] = list(targets)
        self.config = config or SimulationConfig()

        self.rng = GameRNG(seed)
        self.seed = self.rng.seed
        self.unit.crit_tracker.rng = self.rng.fork()

        self.logger = logger or EventLogger(
            seed=self.seed,
            tick_interval_ms=self.config.tick_interval_ms,
            verbose=self.config.verbose,
        )
        self.items = ItemManager(self)

        self.time = 0
        self._last_second = 0
        self.damage_log: List[DamageEvent] = []
        self.time_to_kill: Dict[str, Optional[int]] = {}

    @property
    def now(self) -> int:
        return self.time

    # ─────────────────────────────────────────────────────────────────────────
    # URUCHOMIENIE
    # ─────────────────────────────────────────────────────────────────────────

    def run(self) -> SimulationResult:
        """
        Uruchamia symulację do końca.

        Returns:
            SimulationResult: Zawsze kompletny wynik
        """
        self.time = 0
        self._last_second = 0
        self.damage_log = []
        self.time_to_kill = {t.name: (None if t.is_alive else 0) for t in self.targets}

        self.logger.log_simulation_start(
            0, self.unit.to_dict(), [t.to_dict() for t in self.targets]
        )

        while self.time < self.config.duration_ms:
            if self._all_targets_dead():
                break
            self._run_tick()
            self.time += self.config.tick_interval_ms

        self.logger.log_simulation_end(
            self.time,
            self.unit.name,
            self.unit.total_damage,
            [t.name for t in self.targets if t.is_alive],
        )
        return self.get_result()

    def _run_tick(self) -> None:
        """Wykonuje jeden tick symulacji."""
        unit = self.unit
        now = self.time

        # 1. Kursor czasu
        unit.set_current_time(now)

        # 2. Buffy
        self._phase_update_buffs()

        # 3. Cast w toku
        if unit.state.is_casting:
            if unit.state.is_cast_complete(now):
                self._complete_cast()
            elif not unit.state.context.can_auto_attack:
                self._phase_new_second()
                return

        # 4. Start casta
        if unit.can_cast_ability():
            targets = self._find_ability_targets()
            if targets:
                self._start_cast(targets)
                return

        # 5. Auto-atak
        if unit.state.can_auto_attack(now):
            self._perform_auto_attack()

        # 6. Nowa sekunda
        self._phase_new_second()

    # ─────────────────────────────────────────────────────────────────────────
    # FAZY TICKA
    # ─────────────────────────────────────────────────────────────────────────

    def _phase_update_buffs(self) -> None:
        for buff in self.unit.buffs.update_buffs(self.time):
            self.logger.log_buff_expire(self.time, self.unit.name, buff.key)

    def _phase_new_second(self) -> None:
        """Faza 6: regen many + ON_SECOND, raz na pełną sekundę."""
        second = self.time // 1000
        if second <= self._last_second:
            return
        self._last_second = second

        gained = self.unit.regen_mana()
        if gained > 0:
            self.logger.log_mana_gain(
                self.time, self.unit.name, gained, self.unit.current_mana, "regen"
            )
        self.items.on_second(self.unit)

    def _start_cast(self, targets: List[Target]) -> None:
        unit = self.unit
        context = unit.start_cast(self.time, targets, self)
        self.items.on_cast(unit, targets)
        self.logger.log_ability_cast(
            self.time, unit.name, context.ability.name, [t.name for t in targets]
        )

    def _complete_cast(self) -> None:
        context = self.unit.complete_cast(self)
        if context is not None:
            self.logger.log_ability_cast(
                self.time, self.unit.name, context.ability.name,
                [t.name for t in context.targets], completed=True,
            )

    # ─────────────────────────────────────────────────────────────────────────
    # AUTO-ATAK
    # ─────────────────────────────────────────────────────────────────────────

    def _override_buff(self) -> Optional[Buff]:
        """Pierwszy aktywny buff z override'em auto-ataku."""
        for buff in self.unit.buffs.get_active_buffs(self.time):
            if buff.auto_attack_override is not None:
                return buff
        return None

    def _perform_auto_attack(self) -> None:
        unit = self.unit
        now = self.time
        target = self._find_target()
        if target is None:
            return

        attacker = AttackerSnapshot.of(unit, now)
        override = self._override_buff()

        # Trafienia i pipeline
        hits: List[Tuple[Target, DamageResult]] = []
        if override is not None:
            strikes: List[AttackStrike] = override.auto_attack_override(
                unit, override, target, self._alive_targets(), now
            )
            for strike in strikes:
                result = resolve_damage(
                    strike.amount, strike.damage_type, attacker,
                    DefenderSnapshot.of(strike.target), unit.crit_tracker, strike.can_crit,
                )
                hits.append((strike.target, result))
        else:
            result = calculate_physical_damage(
                attacker, DefenderSnapshot.of(target), 0.0, unit.crit_tracker
            )
            hits.append((target, result))

        # Hooki przed obrażeniami
        self.items.on_attack(unit, target)

        for hit_target, result in hits:
            self.deal_damage(hit_target, result, is_ability=False)
            self.logger.log_attack(now, unit.name, hit_target.name, result.final_damage, result.is_crit)
            self.items.on_hit(unit, hit_target, result.final_damage, result.is_crit)
            self._apply_on_hit_buffs(hit_target, result, attacker)

        unit.attack_count += 1

        gained = unit.gain_mana_on_attack()
        if gained > 0:
            self.logger.log_mana_gain(now, unit.name, gained, unit.current_mana, "attack")

        unit.state.on_attack(now, unit.attack_speed(now))

    def _apply_on_hit_buffs(self, target: Target, result: DamageResult, attacker: AttackerSnapshot) -> None:
        """
        Efekty on-hit buffów (dodatkowe obrażenia jako osobne zdarzenie).

        Kwota pochodzi z obrażeń już wzmocnionych, więc damage amp
        nie jest naliczany drugi raz. Bonus nie critował.
        """
        unit = self.unit
        unamplified = replace(attacker, damage_amp=0.0)
        for buff in unit.buffs.get_active_buffs(self.time):
            if buff.on_hit is None:
                continue
            bonus = buff.on_hit(unit, buff, target, result.final_damage, result.is_crit)
            if bonus is None:
                continue
            amount, damage_type = bonus
            bonus_result = resolve_damage(
                amount, damage_type, unamplified, DefenderSnapshot.of(target), can_crit=False
            )
            self.deal_damage(target, bonus_result, is_ability=False)
            self.logger.log_bonus_damage(
                self.time, unit.name, target.name, buff.key,
                bonus_result.final_damage, damage_type.value,
            )

    # ─────────────────────────────────────────────────────────────────────────
    # OBRAŻENIA
    # ─────────────────────────────────────────────────────────────────────────

    def deal_damage(self, target: Target, result: DamageResult, is_ability: bool) -> float:
        """
        Aplikuje wynik pipeline'u do celu i zapisuje DamageEvent.

        Martwy cel nie przyjmuje obrażeń (zwraca 0).

        Returns:
            float: Zadane obrażenia
        """
        if not target.is_alive:
            return 0.0

        damage, is_dead = target.apply_damage(result.final_damage)
        self.unit.total_damage += damage
        self.damage_log.append(DamageEvent(
            timestamp=self.time,
            damage=damage,
            damage_type=result.damage_type,
            is_ability=is_ability,
            is_crit=result.is_crit,
            target_name=target.name,
        ))
        self.logger.log_damage(
            self.time, target.name, self.unit.name, damage,
            result.damage_type.value, target.current_hp,
        )

        if is_dead and self.time_to_kill.get(target.name) is None:
            self.time_to_kill[target.name] = self.time
            self.logger.log_death(self.time, target.name, self.unit.name)
        return damage

    # ─────────────────────────────────────────────────────────────────────────
    # CELE
    # ─────────────────────────────────────────────────────────────────────────

    def _alive_targets(self) -> List[Target]:
        return [t for t in self.targets if t.is_alive]

    def _find_target(self) -> Optional[Target]:
        """Pierwszy żywy cel (kolejność = priorytet)."""
        for target in self.targets:
            if target.is_alive:
                return target
        return None

    def _find_ability_targets(self) -> List[Target]:
        if self.unit.ability is not None and self.unit.ability.is_aoe:
            return self._alive_targets()
        target = self._find_target()
        return [target] if target is not None else []

    def _all_targets_dead(self) -> bool:
        return all(not t.is_alive for t in self.targets)

    # ─────────────────────────────────────────────────────────────────────────
    # WYNIK
    # ─────────────────────────────────────────────────────────────────────────

    def get_result(self) -> SimulationResult:
        unit = self.unit
        return SimulationResult.from_log(
            self.damage_log,
            self.time,
            unit_name=unit.name,
            time_to_kill=dict(self.time_to_kill),
            final_health={t.name: t.current_hp for t in self.targets},
            crit_rate=unit.crit_tracker.crit_rate,
            attack_count=unit.attack_count,
            ability_count=unit.ability_count,
            stats=unit.snapshot(self.time),
            seed=self.seed,
            items=[inst.name for inst in unit.items],
        )

    def save_log(self, filepath: str) -> None:
        self.logger.save(filepath)


# ═══════════════════════════════════════════════════════════════════════════
# PORÓWNANIE BUILDÓW
# ═══════════════════════════════════════════════════════════════════════════

Build = Tuple[str, List[str]]


def _fresh_targets(target: Union[Target, Dict[str, Any], Iterable[Target]]) -> List[Target]:
    if isinstance(target, Target):
        templates = [target]
    elif isinstance(target, dict):
        templates = [Target.from_dict(target)]
    else:
        templates = list(target)

    fresh = []
    for template in templates:
        clone = copy.deepcopy(template)
        clone.reset()
        fresh.append(clone)
    return fresh


def compare_builds(
    library: ContentLibrary,
    unit_name: str,
    star_level: int,
    builds: Union[Dict[str, List[str]], Sequence[Build]],
    target: Union[Target, Dict[str, Any], Iterable[Target]],
    config: Optional[SimulationConfig] = None,
    seed: Optional[int] = None,
    augments: Sequence[str] = (),
) -> List[Tuple[str, SimulationResult]]:
    """
    Uruchamia jedną symulację na build (ten sam seed dla każdego).

    Args:
        library: Rejestry treści
        unit_name: Jednostka z rejestru
        star_level: Poziom gwiazd
        builds: {etykieta: [itemy]} albo lista (etykieta, [itemy])
        target: Cel (świeża kopia na każdy build)
        config: Konfiguracja przebiegu
        seed: Seed (None = losowy, wspólny dla wszystkich buildów)
        augments: Nazwy augmentów dla każdego buildu

    Returns:
        List[(etykieta, SimulationResult)] w kolejności buildów

    Raises:
        KeyError: Nieznana jednostka / item / augment
    """
    definition, found = library.units.get(unit_name)
    if not found:
        raise KeyError(f"Unknown unit '{unit_name}'")

    augment_defs = []
    for name in augments:
        augment, ok = library.augments.get(name)
        if not ok:
            raise KeyError(f"Unknown augment '{name}'")
        augment_defs.append(augment)

    if seed is None:
        seed = GameRNG().seed

    entries = list(builds.items()) if isinstance(builds, dict) else list(builds)
    results = []
    for label, item_names in entries:
        items, missing = library.resolve_items(item_names)
        if missing:
            raise KeyError(f"Unknown items in build '{label}': {', '.join(missing)}")

        unit = definition.build(star_level, items)
        for augment in augment_defs:
            unit.add_augment(augment)

        simulator = Simulator(unit, _fresh_targets(target), config, seed=seed)
        results.append((label, simulator.run()))
    return results
