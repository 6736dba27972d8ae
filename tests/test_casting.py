"""
Testy dla castowania i many.

Testuje:
- State machine (stany, bramki, interwał ataku)
- Manę za atak per rola i regen casterów
- Blokadę many w trakcie casta
- Cykl casta na jednostce (koszt, kolejność callbacków)
- Definicje jednostek z YAML
"""

import pytest

from dpssim.abilities.ability import Ability, AbilityTrigger
from dpssim.core.rng import GameRNG
from dpssim.core.stats import StatType
from dpssim.units.state_machine import CastingStateMachine, UnitState, attack_interval_ms
from dpssim.units.target import Target
from dpssim.units.unit import MANA_PER_ATTACK, Role, Unit, UnitDefinition


# ═══════════════════════════════════════════════════════════════════════════
# FIXTURES
# ═══════════════════════════════════════════════════════════════════════════

def create_unit(role=Role.ATTACK_MARKSMAN, mana=50, ability=None, starting_mana=0.0):
    """Helper do tworzenia jednostek testowych."""
    return Unit.create(
        "Test",
        {StatType.ATTACK_DAMAGE: 100, StatType.ATTACK_SPEED: 1.0, StatType.MANA: mana},
        role=role,
        ability=ability,
        starting_mana=starting_mana,
        rng=GameRNG(1),
    )


def create_ability(cast_time=1000, mana_gain=False, autos=False):
    """Ability bez obrażeń - tylko do testów cyklu casta."""
    return Ability(
        "Steroid",
        cast_time=cast_time,
        allows_mana_gain_during_cast=mana_gain,
        allows_auto_attacks_during_cast=autos,
    )


@pytest.fixture
def dummy():
    return Target.create("Dummy", hp=1000)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: STATE MACHINE
# ═══════════════════════════════════════════════════════════════════════════

def test_attack_interval():
    assert attack_interval_ms(1.0) == 1000
    assert attack_interval_ms(0.8) == 1250
    assert attack_interval_ms(0) == 1000
    assert attack_interval_ms(-1) == 1000


def test_state_machine_starts_idle():
    fsm = CastingStateMachine()
    assert fsm.current == UnitState.IDLE
    assert fsm.can_auto_attack(now=0)
    assert fsm.can_gain_mana()


def test_can_cast_requires_mana():
    fsm = CastingStateMachine()
    assert not fsm.can_cast(current_mana=49, mana_cost=50)
    assert fsm.can_cast(current_mana=50, mana_cost=50)


def test_cast_blocks_autos_and_mana(dummy):
    fsm = CastingStateMachine()
    context = fsm.start_cast(create_ability(cast_time=1000), now=500, targets=[dummy])

    assert fsm.is_casting
    assert context.end_time == 1500
    assert not fsm.can_auto_attack(now=600)
    assert not fsm.can_gain_mana()
    assert not fsm.can_cast(current_mana=100, mana_cost=50)
    assert not fsm.is_cast_complete(now=1499)
    assert fsm.is_cast_complete(now=1500)

    assert fsm.finish_cast() is context
    assert fsm.current == UnitState.IDLE


def test_cast_allowing_autos(dummy):
    fsm = CastingStateMachine()
    fsm.start_cast(create_ability(autos=True, mana_gain=True), now=0, targets=[dummy])
    assert fsm.can_auto_attack(now=0)
    assert fsm.can_gain_mana()


def test_on_attack_schedules_next_attack():
    fsm = CastingStateMachine()
    fsm.on_attack(now=100, attack_speed=0.8)
    assert fsm.next_attack_time == 1350
    assert fsm.current == UnitState.ATTACKING
    assert not fsm.can_auto_attack(now=1349)
    assert fsm.can_auto_attack(now=1350)


def test_channeling_blocks_autos():
    fsm = CastingStateMachine()
    fsm.start_channel()
    assert not fsm.can_auto_attack(now=0)
    fsm.stop_channel()
    assert fsm.can_auto_attack(now=0)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: MANA
# ═══════════════════════════════════════════════════════════════════════════

@pytest.mark.parametrize("role, expected", [
    (Role.ATTACK_MARKSMAN, 10),
    (Role.MAGIC_TANK, 5),
    (Role.ATTACK_TANK, 5),
    (Role.MAGIC_CASTER, 7),
    (Role.HYBRID_FIGHTER, 10),
])
def test_mana_per_attack_by_role(role, expected):
    unit = create_unit(role=role)
    assert unit.gain_mana_on_attack() == expected
    assert unit.current_mana == expected


def test_mana_clamped_to_max():
    unit = create_unit(mana=50, starting_mana=45)
    assert unit.gain_mana_on_attack() == 5
    assert unit.current_mana == 50


def test_caster_has_base_regen():
    caster = create_unit(role=Role.MAGIC_CASTER)
    marksman = create_unit(role=Role.ATTACK_MARKSMAN)
    assert caster.regen_mana() == 2
    assert marksman.regen_mana() == 0


def test_mana_blocked_during_cast_but_restore_works(dummy):
    unit = create_unit(ability=create_ability(), starting_mana=50)
    unit.start_cast(0, [dummy])

    assert unit.gain_mana_on_attack() == 0
    assert unit.regen_mana() == 0
    assert unit.restore_mana(10) == 10


def test_role_from_string():
    assert Role.from_string("Attack Marksman") == Role.ATTACK_MARKSMAN
    assert Role.from_string("magic-caster") == Role.MAGIC_CASTER
    assert len(Role) == 13
    with pytest.raises(ValueError):
        Role.from_string("healer")


# ═══════════════════════════════════════════════════════════════════════════
# TEST: CAST NA JEDNOSTCE
# ═══════════════════════════════════════════════════════════════════════════

def test_cannot_cast_without_ability():
    unit = create_unit(starting_mana=100)
    assert not unit.can_cast_ability()


def test_cannot_cast_with_zero_cost():
    """Koszt 0 -> umiejętność nigdy nie jest rzucana."""
    unit = create_unit(mana=0, ability=create_ability())
    assert not unit.can_cast_ability()


def test_explicit_ability_cost_overrides_max_mana():
    ability = create_ability()
    ability.mana_cost = 30
    unit = create_unit(mana=50, ability=ability, starting_mana=30)
    assert unit.mana_cost == 30
    assert unit.can_cast_ability()


def test_start_cast_spends_mana_and_counts(dummy):
    unit = create_unit(ability=create_ability(), starting_mana=50)
    assert unit.can_cast_ability()

    unit.start_cast(0, [dummy])
    assert unit.current_mana == 0
    assert unit.ability_count == 1
    assert not unit.can_cast_ability()


def test_cast_callback_order(dummy):
    calls = []
    ability = create_ability()
    ability.bind(AbilityTrigger.ON_CAST_START, lambda u, ctx, sim: calls.append("start"))
    ability.bind(AbilityTrigger.ON_CAST_COMPLETE, lambda u, ctx, sim: calls.append("complete"))
    ability.bind(AbilityTrigger.ON_CAST, lambda u, ctx, sim: calls.append("cast"))
    unit = create_unit(ability=ability, starting_mana=50)

    unit.start_cast(0, [dummy])
    context = unit.complete_cast()

    assert calls == ["start", "cast", "complete"]
    assert context.targets == [dummy]
    assert unit.state.current == UnitState.IDLE


def test_complete_cast_without_cast_returns_none():
    assert create_unit().complete_cast() is None


def test_damaging_ability_gets_default_cast_damage():
    ability = Ability("Nuke", ap_ratio=200)
    assert len(ability.callbacks[AbilityTrigger.ON_CAST]) == 1


# ═══════════════════════════════════════════════════════════════════════════
# TEST: DEFINICJE JEDNOSTEK
# ═══════════════════════════════════════════════════════════════════════════

YUNARA = {
    "name": "Yunara",
    "role": "attack_marksman",
    "stats": {
        "health": [800, 1440, 2592],
        "attack_damage": [60, 90, 135],
        "attack_speed": 0.8,
        "mana": 50,
        "crit_chance": 0.25,
    },
}


def test_unit_definition_star_values():
    definition = UnitDefinition.from_dict(YUNARA)
    unit = definition.build(star_level=2)

    assert unit.stats.get(StatType.ATTACK_DAMAGE) == 90
    assert unit.stats.get(StatType.HEALTH) == 1440
    assert unit.max_mana == 50
    assert unit.mana_per_attack == MANA_PER_ATTACK["default"]


def test_unit_definition_uses_mana_config():
    mana_config = {"mana_per_attack": {"tank": 4, "caster": 6, "default": 9}, "caster_mana_regen": 3}
    definition = UnitDefinition.from_dict(dict(YUNARA, role="magic_caster"), mana_config)
    unit = definition.build()

    assert unit.mana_per_attack == 6
    assert unit.stats.get(StatType.MANA_REGEN) == 3


def test_unit_definition_rejects_unknown_stat():
    with pytest.raises(ValueError):
        UnitDefinition.from_dict(dict(YUNARA, stats={"luck": 7}))
