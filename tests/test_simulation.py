"""
Testy dla pętli symulacji.

Testuje:
- Scenariusze end-to-end (obrażenia bez redukcji, armor, crit, zabicie, martwy cel)
- Laser Yunary (przebicie z falloffem, true damage z critów)
- Cast blokujący auto-ataki / manę
- Determinizm dla seeda
- Wynik (DPS, podziały, seria obrażeń)
- Porównanie buildów
- Log zdarzeń
"""

import json

import pytest
from pathlib import Path

from dpssim.abilities.effects import crit_true_damage, piercing_laser
from dpssim.combat.damage import AttackerSnapshot, DamageType, calculate_physical_damage, DefenderSnapshot
from dpssim.core.config_loader import ConfigLoader
from dpssim.core.registry import ContentLibrary
from dpssim.core.rng import GameRNG
from dpssim.core.stats import StatType
from dpssim.effects.buff import Buff
from dpssim.effects.presets import EMPOWERED_AUTO_BUFF, empowered_auto_buff
from dpssim.events.event_logger import EventType
from dpssim.simulation import (
    DEFAULT_DURATION_MS, DEFAULT_TICK_INTERVAL_MS,
    SimulationConfig, SimulationResult, Simulator, compare_builds,
)
from dpssim.units.target import Target
from dpssim.units.unit import Unit


DATA_PATH = Path(__file__).parent.parent / "data"


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

@pytest.fixture(scope="module")
def library():
    """Rejestry zbudowane z data/*.yaml."""
    return ContentLibrary.from_loader(ConfigLoader(str(DATA_PATH)))


def create_unit(ad=100.0, attack_speed=1.0, crit_chance=0.0, crit_damage=0.4):
    """Jednostka bez ability i bez many."""
    return Unit.create(
        "Attacker",
        {
            StatType.ATTACK_DAMAGE: ad,
            StatType.ATTACK_SPEED: attack_speed,
            StatType.CRIT_CHANCE: crit_chance,
            StatType.CRIT_DAMAGE: crit_damage,
        },
    )


def build_unit(library, name="Yunara", star_level=2, items=()):
    definition, found = library.units.get(name)
    assert found
    resolved, missing = library.resolve_items(list(items))
    assert not missing
    return definition.build(star_level, resolved)


def frontline_tank(name="Frontline Tank"):
    return Target.create(name, hp=50000, armor=100, magic_resist=50)


def run(unit, targets, duration_ms=5000, seed=42, verbose=False):
    simulator = Simulator(unit, targets, SimulationConfig(duration_ms, verbose=verbose), seed=seed)
    return simulator, simulator.run()


def cast_windows(logger):
    """Pary (start, koniec) castów z logu zdarzeń."""
    starts = [e.time_ms for e in logger.get_events_by_type(EventType.ABILITY_CAST_START)]
    ends = [e.time_ms for e in logger.get_events_by_type(EventType.ABILITY_CAST_COMPLETE)]
    return list(zip(starts, ends))


# ═══════════════════════════════════════════════════════════════════════════
# TEST: SCENARIUSZE END-TO-END
# ═══════════════════════════════════════════════════════════════════════════

def test_no_armor_deals_full_damage():
    """100 AD, 0% crit, 0 armor -> każde trafienie = 100."""
    _, result = run(create_unit(), [Target.create("Dummy", hp=1_000_000)])

    assert result.attack_count == 5
    assert all(e.damage == pytest.approx(100) for e in result.damage_log)
    assert result.total_damage == pytest.approx(500)
    assert result.crit_rate == 0.0


def test_100_armor_halves_damage():
    _, result = run(create_unit(), [Target.create("Dummy", hp=1_000_000, armor=100)])
    assert all(e.damage == pytest.approx(50) for e in result.damage_log)


def test_full_crit_chance_multiplies_every_attack():
    """100% crit, +50% crit damage -> 1.5× przy każdym ataku."""
    _, result = run(
        create_unit(crit_chance=1.0, crit_damage=0.5), [Target.create("Dummy", hp=1_000_000)]
    )
    assert all(e.is_crit for e in result.damage_log)
    assert all(e.damage == pytest.approx(150) for e in result.damage_log)
    assert result.crit_rate == 1.0


def test_kill_recorded_at_killing_event():
    """1000 HP, 4 × 250 -> HP 0, time_to_kill = czas ostatniego trafienia."""
    _, result = run(create_unit(ad=250), [Target.create("Dummy", hp=1000)], duration_ms=30000)

    assert result.final_health["Dummy"] == 0
    assert result.total_damage == pytest.approx(1000)
    assert result.time_to_kill["Dummy"] == result.damage_log[-1].timestamp
    assert result.killed_all
    assert result.elapsed_ms < 30000


def test_target_dead_from_start():
    """Cel z 0 HP: koniec przy pierwszym sprawdzeniu, time_to_kill = 0."""
    _, result = run(create_unit(), [Target.create("Dead", hp=0)])

    assert result.time_to_kill == {"Dead": 0}
    assert result.elapsed_ms == 0
    assert result.dps == 0.0
    assert result.damage_log == []


def test_run_ends_at_duration():
    _, result = run(create_unit(), [Target.create("Dummy", hp=1_000_000)], duration_ms=1000)
    assert 1000 <= result.elapsed_ms < 1000 + DEFAULT_TICK_INTERVAL_MS
    assert result.time_to_kill == {"Dummy": None}
    assert not result.killed_all


def test_attacks_follow_attack_interval():
    """AS 1.0 -> kolejne ataki co >= 1000 ms (pierwszy tick po interwale)."""
    _, result = run(create_unit(), [Target.create("Dummy", hp=1_000_000)])
    times = [e.timestamp for e in result.damage_log]
    assert times[0] == 0
    assert all(1000 <= b - a < 1000 + DEFAULT_TICK_INTERVAL_MS for a, b in zip(times, times[1:]))


def test_overkill_attacks_next_target():
    first = Target.create("First", hp=100)
    second = Target.create("Second", hp=1_000_000)
    _, result = run(create_unit(), [first, second], duration_ms=2500)

    assert result.time_to_kill["First"] == 0
    assert [e.target_name for e in result.damage_log] == ["First", "Second", "Second"]


def test_dead_target_takes_no_damage():
    simulator = Simulator(create_unit(), [Target.create("Dummy", hp=0)], seed=1)
    result = calculate_physical_damage(AttackerSnapshot(attack_damage=100), DefenderSnapshot())
    assert simulator.deal_damage(simulator.targets[0], result, is_ability=False) == 0.0
    assert simulator.damage_log == []


# ═══════════════════════════════════════════════════════════════════════════
# TEST: LASER YUNARY
# ═══════════════════════════════════════════════════════════════════════════

def test_piercing_laser_falloff_skips_dead_targets():
    """Trafia żywe cele po kolei, każdy kolejny × (1 - falloff)."""
    unit = create_unit(ad=90)
    unit.stats.add_bonus(StatType.ATTACK_DAMAGE, 0.2)
    buff = Buff("Transcendent State")
    buff.data.update(base_damage=130, pierce_falloff=0.7)

    first, dead, third, fourth = (Target.create(n, hp=1000) for n in "ABCD")
    dead.apply_damage(1000)

    strikes = piercing_laser(unit, buff, first, [first, dead, third, fourth], 0)

    assert [s.target for s in strikes] == [first, third, fourth]
    assert [s.amount for s in strikes] == pytest.approx([156, 156 * 0.3, 156 * 0.09])
    assert all(s.damage_type == DamageType.PHYSICAL for s in strikes)


def test_crit_true_damage_only_on_crit():
    buff = Buff("Transcendent State")
    buff.data["crit_true_damage"] = 0.3
    target = Target.create("Dummy", hp=1000)

    assert crit_true_damage(None, buff, target, 200, False) is None
    amount, damage_type = crit_true_damage(None, buff, target, 200, True)
    assert amount == pytest.approx(60)
    assert damage_type == DamageType.TRUE


def test_yunara_laser_pierces_secondary_targets(library):
    unit = build_unit(library, "Yunara", 2)
    targets = [frontline_tank("Tank 1"), frontline_tank("Tank 2"), frontline_tank("Tank 3")]
    simulator, result = run(unit, targets, duration_ms=30000)

    assert result.ability_count >= 1
    assert result.final_health["Tank 2"] < 50000
    assert result.final_health["Tank 3"] < 50000
    # Laser to zmodyfikowany auto-atak, nie obrażenia z ability
    assert result.damage_by_source["ability"] == 0.0


def test_yunara_laser_crits_deal_true_damage(library):
    unit = build_unit(library, "Yunara", 2, ["IE"])
    simulator, result = run(unit, [frontline_tank()], duration_ms=30000)

    bonus = simulator.logger.get_events_by_type(EventType.BONUS_DAMAGE)
    assert bonus
    assert all(e.data["damage_type"] == "true" for e in bonus)
    assert result.damage_by_type[DamageType.TRUE] > 0


def test_no_mana_gain_during_transcendent_state(library):
    unit = build_unit(library, "Yunara", 2)
    simulator, _ = run(unit, [frontline_tank()], duration_ms=30000)

    gains = [e.time_ms for e in simulator.logger.get_events_by_type(EventType.UNIT_MANA_GAIN)]
    windows = cast_windows(simulator.logger)
    assert windows
    for start, end in windows:
        assert end - start >= 4000
        assert not [t for t in gains if start <= t < end]


def test_yunara_keeps_attacking_during_cast(library):
    unit = build_unit(library, "Yunara", 2)
    simulator, _ = run(unit, [frontline_tank()], duration_ms=30000)

    attacks = [e.time_ms for e in simulator.logger.get_events_by_type(EventType.UNIT_ATTACK)]
    start, end = cast_windows(simulator.logger)[0]
    assert [t for t in attacks if start < t < end]


# ═══════════════════════════════════════════════════════════════════════════
# TEST: CASTER
# ═══════════════════════════════════════════════════════════════════════════

def test_lux_cast_deals_ability_damage(library):
    unit = build_unit(library, "Lux", 1)
    _, result = run(unit, [frontline_tank()], duration_ms=30000)

    ability_events = [e for e in result.damage_log if e.is_ability]
    assert result.ability_count >= 1
    assert ability_events
    assert all(e.damage_type == DamageType.MAGIC for e in ability_events)
    # 280 × (100 / 150) za Final Spark
    assert ability_events[0].damage == pytest.approx(280 * 100 / 150)
    assert result.damage_by_source["ability"] == pytest.approx(sum(e.damage for e in ability_events))


def test_lux_cast_blocks_auto_attacks(library):
    unit = build_unit(library, "Lux", 1)
    simulator, _ = run(unit, [frontline_tank()], duration_ms=30000)

    attacks = [e.time_ms for e in simulator.logger.get_events_by_type(EventType.UNIT_ATTACK)]
    for start, end in cast_windows(simulator.logger):
        assert not [t for t in attacks if start <= t < end]


def test_blue_buff_mana_after_cast(library):
    """Blue Buff: mana od razu po starcie casta, mimo blokady."""
    unit = build_unit(library, "Lux", 1, ["Blue Buff"])
    simulator = Simulator(unit, [frontline_tank()], SimulationConfig(30000), seed=3)

    while not unit.state.is_casting:
        simulator._run_tick()
        simulator.time += simulator.config.tick_interval_ms
    assert unit.current_mana == 10


# ═══════════════════════════════════════════════════════════════════════════
# TEST: DETERMINIZM
# ═══════════════════════════════════════════════════════════════════════════

def test_same_seed_same_damage_log(library):
    items = ["Guinsoos", "Krakens", "IE"]
    _, first = run(build_unit(library, items=items), [frontline_tank()], 30000, seed=12345)
    _, second = run(build_unit(library, items=items), [frontline_tank()], 30000, seed=12345)

    assert [e.to_dict() for e in first.damage_log] == [e.to_dict() for e in second.damage_log]
    assert first.total_damage == second.total_damage


def test_random_seed_is_reported():
    simulator, result = run(create_unit(), [Target.create("Dummy", hp=1000)], seed=None)
    assert result.seed is not None
    assert result.seed == simulator.seed


# ═══════════════════════════════════════════════════════════════════════════
# TEST: KONFIGURACJA I WYNIK
# ═══════════════════════════════════════════════════════════════════════════

def test_non_positive_config_replaced_by_defaults():
    config = SimulationConfig(duration_ms=0, tick_interval_ms=-5)
    assert config.duration_ms == DEFAULT_DURATION_MS
    assert config.tick_interval_ms == DEFAULT_TICK_INTERVAL_MS


def test_config_from_dict():
    config = SimulationConfig.from_dict({"duration_ms": 10000})
    assert config.duration_ms == 10000
    assert config.tick_interval_ms == DEFAULT_TICK_INTERVAL_MS
    assert SimulationConfig.from_dict(None).duration_ms == DEFAULT_DURATION_MS


def test_empty_result_guards_division():
    result = SimulationResult.from_log([], 0)
    assert result.dps == 0.0
    assert result.damage_type_percentages() == {}
    assert result.damage_over_time() == []


def test_result_breakdowns(library):
    unit = build_unit(library, items=["Guinsoos", "Krakens", "IE"])
    _, result = run(unit, [frontline_tank()], 30000)

    assert result.dps == pytest.approx(result.total_damage / (result.elapsed_ms / 1000))
    assert sum(result.damage_by_type.values()) == pytest.approx(result.total_damage)
    assert sum(result.damage_by_source.values()) == pytest.approx(result.total_damage)
    assert sum(result.damage_type_percentages().values()) == pytest.approx(100)

    series = result.damage_over_time()
    assert series[-1][1] == pytest.approx(result.total_damage)
    assert all(a[1] <= b[1] for a, b in zip(series, series[1:]))

    assert set(result.stats) == {"mana", "max_mana", "attack_speed", "attack_damage", "ability_power"}
    assert result.items == ["Guinsoos", "Krakens", "IE"]


def test_result_to_dict(library):
    _, result = run(build_unit(library), [frontline_tank()], 5000)
    data = result.to_dict()
    assert data["unit"] == "Yunara"
    assert "damage_log" not in data
    assert len(result.to_dict(include_log=True)["damage_log"]) == len(result.damage_log)
    json.dumps(data)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: PORÓWNANIE BUILDÓW
# ═══════════════════════════════════════════════════════════════════════════

BUILDS = [
    ("RB Kraken IE", ["Guinsoos", "Krakens", "IE"]),
    ("5 Deathblades", ["Deathblade"] * 5),
]


def test_compare_builds_same_seed_for_all(library):
    template = frontline_tank()
    results = compare_builds(library, "Yunara", 2, BUILDS, template, SimulationConfig(10000))

    assert [label for label, _ in results] == ["RB Kraken IE", "5 Deathblades"]
    assert len({r.seed for _, r in results}) == 1
    assert results[1][1].items == ["Deathblade"] * 5
    assert template.current_hp == 50000


def test_compare_builds_accepts_dict_and_target_dict(library):
    results = compare_builds(
        library, "Yunara", 1, {"Empty": []},
        {"name": "Dummy", "hp": 1000, "armor": 0}, SimulationConfig(30000), seed=7,
    )
    label, result = results[0]
    assert label == "Empty"
    assert result.killed_all


def test_compare_builds_with_augment(library):
    plain = compare_builds(library, "Yunara", 2, {"x": []}, frontline_tank(), SimulationConfig(5000), seed=1)
    boosted = compare_builds(
        library, "Yunara", 2, {"x": []}, frontline_tank(), SimulationConfig(5000), seed=1,
        augments=["Combat Training"],
    )
    assert boosted[0][1].stats["attack_damage"] > plain[0][1].stats["attack_damage"]


@pytest.mark.parametrize("kwargs", [
    {"unit_name": "Nobody"},
    {"builds": [("Bad", ["Excalibur"])]},
    {"augments": ["Nope"]},
])
def test_compare_builds_unknown_content_raises(library, kwargs):
    args = dict(unit_name="Yunara", builds=BUILDS, augments=())
    args.update(kwargs)
    with pytest.raises(KeyError):
        compare_builds(
            library, args["unit_name"], 2, args["builds"], frontline_tank(),
            SimulationConfig(1000), seed=1, augments=args["augments"],
        )


# ═══════════════════════════════════════════════════════════════════════════
# TEST: LOG ZDARZEŃ
# ═══════════════════════════════════════════════════════════════════════════

def test_event_log_brackets_run():
    simulator, result = run(create_unit(), [Target.create("Dummy", hp=1_000_000)])
    events = simulator.logger.events

    assert events[0].event_type == EventType.SIMULATION_START
    assert events[-1].event_type == EventType.SIMULATION_END
    assert len(simulator.logger.get_events_by_type(EventType.UNIT_ATTACK)) == result.attack_count
    assert simulator.logger.get_events_for_unit("Dummy")


def test_death_logged_once():
    simulator, _ = run(create_unit(ad=250), [Target.create("Dummy", hp=1000)], duration_ms=30000)
    deaths = simulator.logger.get_events_by_type(EventType.UNIT_DEATH)
    assert len(deaths) == 1
    assert deaths[0].data["killer_id"] == "Attacker"


def test_consumed_empowered_auto_logged_as_buff_expire():
    """Buff zdjęty po pierwszym ataku pojawia się w logu jako BUFF_EXPIRE."""
    unit = create_unit()
    unit.buffs.apply_buff(empowered_auto_buff(5000, 50), now=0)
    simulator, result = run(unit, [Target.create("Dummy", hp=1_000_000)])

    expires = simulator.logger.get_events_by_type(EventType.BUFF_EXPIRE)
    assert [e.data["buff_id"] for e in expires] == [EMPOWERED_AUTO_BUFF]
    assert result.damage_log[0].damage == pytest.approx(150)
    assert result.damage_log[1].damage == pytest.approx(100)


def test_logging_does_not_change_result(capsys):
    _, quiet = run(create_unit(crit_chance=0.5), [Target.create("Dummy", hp=1_000_000)], seed=5)
    _, loud = run(create_unit(crit_chance=0.5), [Target.create("Dummy", hp=1_000_000)], seed=5, verbose=True)

    assert "UNIT_ATTACK" in capsys.readouterr().out
    assert quiet.total_damage == loud.total_damage


def test_save_log(tmp_path):
    simulator, _ = run(create_unit(), [Target.create("Dummy", hp=1000)])
    path = tmp_path / "logs" / "run.json"
    simulator.save_log(str(path))

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data["metadata"]["seed"] == 42
    assert data["events"][0]["type"] == "SIMULATION_START"
    assert json.loads(simulator.logger.to_json())["events"] == data["events"]
