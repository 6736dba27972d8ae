"""
Testy dla systemu itemów.

Testuje:
- Zakładanie itemów (staty, instance_id, unique)
- Crit umiejętności z IE / Jeweled Gauntlet
- Efekty itemów: Guinsoo, Kraken, Striker, Titan, Blue Buff
- Niezależne stackowanie kopii tego samego itema
- Augmenty
- Walidację efektów z YAML
"""

import pytest
from pathlib import Path

from dpssim.core.config_loader import ConfigLoader
from dpssim.core.registry import ContentLibrary
from dpssim.core.rng import GameRNG
from dpssim.core.stats import StatType
from dpssim.items import Augment, Item, ItemEffect, ItemManager, ItemTrigger, fire_item_hooks
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


@pytest.fixture
def unit():
    """Jednostka 100 AD / 1.0 AS / 50 many."""
    return Unit.create(
        "Test",
        {
            StatType.ATTACK_DAMAGE: 100,
            StatType.ATTACK_SPEED: 1.0,
            StatType.MANA: 50,
            StatType.CRIT_DAMAGE: 0.4,
        },
        rng=GameRNG(1),
    )


def item(library, name):
    definition, found = library.items.get(name)
    assert found, name
    return definition


def fire(unit, trigger, now=0, times=1, **kwargs):
    for _ in range(times):
        fire_item_hooks(unit, trigger, now, **kwargs)


# ═══════════════════════════════════════════════════════════════════════════
# TEST: ZAKŁADANIE
# ═══════════════════════════════════════════════════════════════════════════

def test_equip_adds_stats(unit, library):
    unit.add_item(item(library, "Deathblade"))
    assert unit.stats.get(StatType.ATTACK_DAMAGE) == pytest.approx(155)
    assert unit.stats.get(StatType.DAMAGE_AMP) == pytest.approx(0.10)


def test_instance_ids_are_stable(unit, library):
    kraken = item(library, "Krakens")
    instances = unit.add_items([kraken, kraken, item(library, "IE")])
    assert [i.instance_id for i in instances] == ["Krakens#1", "Krakens#2", "IE#3"]


def test_unique_item_refused_twice(unit, library):
    ie = item(library, "IE")
    assert unit.add_item(ie) is not None
    assert unit.add_item(ie) is None
    assert len(unit.items) == 1
    assert unit.stats.get(StatType.CRIT_CHANCE) == pytest.approx(0.35)


def test_ability_crit_granted_by_ie(unit, library):
    assert not unit.ability_can_crit
    unit.add_item(item(library, "IE"))
    assert unit.ability_can_crit
    assert unit.stats.get(StatType.CRIT_DAMAGE) == pytest.approx(0.4)


def test_second_ability_crit_source_adds_crit_damage(unit, library):
    """IE + Jeweled Gauntlet: druga zgoda -> +10% crit damage."""
    unit.add_items([item(library, "IE"), item(library, "Jeweled Gauntlet")])
    assert unit.ability_can_crit
    assert unit.stats.get(StatType.CRIT_DAMAGE) == pytest.approx(0.5)


def test_equip_hooks_fire_only_for_new_instance(unit):
    calls = []
    trinket = Item("Trinket").bind(ItemTrigger.ON_EQUIP, lambda ctx: calls.append(ctx.instance.instance_id))
    unit.add_item(trinket)
    unit.add_item(trinket)
    assert calls == ["Trinket#1", "Trinket#2"]


# ═══════════════════════════════════════════════════════════════════════════
# TEST: EFEKTY
# ═══════════════════════════════════════════════════════════════════════════

def test_guinsoo_stacks_every_second(unit, library):
    unit.add_item(item(library, "Guinsoos"))
    fire(unit, ItemTrigger.ON_SECOND, times=3)

    assert unit.items[0].stacks == 3
    assert unit.attack_speed() == pytest.approx(1.0 * (1 + 0.10 + 3 * 0.07))


def test_kraken_stacks_cap_and_max_bonus(unit, library):
    """15 stacków po 3.5% AD, na max +15% AS. Dalsze ataki nic nie dodają."""
    unit.add_item(item(library, "Krakens"))
    fire(unit, ItemTrigger.ON_ATTACK, times=20)

    assert unit.buffs.get_stacks("Krakens#1", now=0) == 15
    assert unit.items[0].stacks == 15
    assert unit.stats.get(StatType.ATTACK_DAMAGE) == pytest.approx(100 * (1 + 0.10 + 15 * 0.035))
    assert unit.attack_speed() == pytest.approx(1.0 * (1 + 0.10 + 0.15))


def test_kraken_no_max_bonus_before_cap(unit, library):
    unit.add_item(item(library, "Krakens"))
    fire(unit, ItemTrigger.ON_ATTACK, times=14)
    assert unit.attack_speed() == pytest.approx(1.10)


def test_two_krakens_stack_independently(unit, library):
    kraken = item(library, "Krakens")
    unit.add_items([kraken, kraken])
    fire(unit, ItemTrigger.ON_ATTACK, times=3)

    assert unit.buffs.get_stacks("Krakens#1", now=0) == 3
    assert unit.buffs.get_stacks("Krakens#2", now=0) == 3
    assert [i.stacks for i in unit.items] == [3, 3]


def test_striker_requires_crit(unit, library):
    """Striker: buff tylko gdy ostatni atak był critem."""
    unit.add_item(item(library, "Strikers"))
    dummy = Target.create("Dummy", hp=1000)

    unit.crit_tracker.roll_crit(0.0)
    fire(unit, ItemTrigger.ON_HIT, target=dummy)
    assert not unit.buffs.has_buff("Strikers Damage Amp#1", now=0)

    unit.crit_tracker.roll_crit(1.0)
    fire(unit, ItemTrigger.ON_HIT, now=1000, target=dummy, is_crit=True)
    assert unit.buffs.has_buff("Strikers Damage Amp#1", now=5999)
    assert not unit.buffs.has_buff("Strikers Damage Amp#1", now=6000)
    assert unit.stats.get(StatType.DAMAGE_AMP, now=2000) == pytest.approx(0.10 + 0.05)


def test_striker_caps_at_four_stacks(unit, library):
    unit.add_item(item(library, "Strikers"))
    unit.crit_tracker.roll_crit(1.0)
    fire(unit, ItemTrigger.ON_HIT, times=6)
    assert unit.stats.get(StatType.DAMAGE_AMP, now=0) == pytest.approx(0.10 + 4 * 0.05)


def test_titans_max_stacks_grant_amp(unit, library):
    unit.add_item(item(library, "Titans"))
    fire(unit, ItemTrigger.ON_HIT, times=30)

    assert unit.stats.get(StatType.ATTACK_DAMAGE) == pytest.approx(100 * (1 + 25 * 0.02))
    assert unit.stats.get(StatType.DAMAGE_AMP) == pytest.approx(0.10)


def test_blue_buff_restores_mana_on_cast(unit, library):
    unit.add_item(item(library, "Blue Buff"))
    manager = ItemManager()
    assert manager.on_cast(unit, []) == 1
    assert unit.current_mana == 10


def test_item_manager_on_attack_counts_hooks(unit, library):
    unit.add_items([item(library, "Krakens"), item(library, "Deathblade")])
    manager = ItemManager()
    assert manager.on_attack(unit, Target.create("Dummy", hp=100)) == 1
    assert manager.get_unit_items_summary(unit)[0]["stacks"] == 1


# ═══════════════════════════════════════════════════════════════════════════
# TEST: AUGMENTY
# ═══════════════════════════════════════════════════════════════════════════

def test_augment_adds_stats(unit, library):
    augment, found = library.augments.get("Combat Training")
    assert found
    unit.add_augment(augment)
    assert unit.stats.get(StatType.ATTACK_DAMAGE) == pytest.approx(110)
    assert unit.augments == [augment]


def test_augment_from_dict():
    augment = Augment.from_dict({"id": "Magic Wand", "stats": {"ap": 0.1}})
    assert augment.name == "Magic Wand"
    assert augment.stats == {StatType.ABILITY_POWER: 0.1}


# ═══════════════════════════════════════════════════════════════════════════
# TEST: WALIDACJA
# ═══════════════════════════════════════════════════════════════════════════

def test_unknown_effect_type_raises():
    with pytest.raises(ValueError):
        ItemEffect.from_dict({"trigger": "on_hit", "type": "lifesteal"})


def test_unknown_trigger_raises():
    with pytest.raises(ValueError):
        ItemEffect.from_dict({"trigger": "on_death", "type": "stat_bonus"})


def test_unknown_condition_raises():
    with pytest.raises(ValueError):
        ItemEffect.from_dict({"trigger": "on_hit", "type": "stat_bonus", "condition": "full_moon"})


def test_item_from_dict_binds_hooks():
    kraken = Item.from_dict({
        "id": "Krakens",
        "name": "Kraken's Fury",
        "effects": [{"trigger": "on_attack", "type": "stacking_buff", "max_stacks": 15}],
    })
    assert kraken.display_name == "Kraken's Fury"
    assert len(kraken.get_hooks(ItemTrigger.ON_ATTACK)) == 1
    assert kraken.to_dict()["triggers"] == ["on_attack"]
