"""
ItemManager - zakładanie itemów i odpalanie ich hooków.

ODPOWIEDZIALNOŚCI:
═══════════════════════════════════════════════════════════════════════════

    1. Zakładanie itemów (equip_item)
       - unique: druga kopia odrzucona
       - staty dodane do bonusów jednostki
       - ability_crit: zgoda na crit umiejętności
         (druga zgoda -> +10% crit damage)
       - instance_id nadany raz, nie zależy od pozycji na liście
       - hooki ON_EQUIP
    2. Odpalanie triggerów w trakcie symulacji:

        on_attack(unit, target)             przed zadaniem obrażeń
        on_hit(unit, target, damage, crit)  po zadaniu obrażeń
        on_second(unit)                     raz na pełną sekundę
        on_cast(unit, targets)              start casta

Kolejność: itemy w kolejności założenia, hooki w kolejności podpięcia.
Iteracja po kopii listy - hook może bezpiecznie nakładać buffy.
"""

from __future__ import annotations
from typing import Any, Iterable, List, Optional, TYPE_CHECKING

from ..core.stats import StatType
from .item import HookContext, Item, ItemInstance, ItemTrigger

if TYPE_CHECKING:
    from ..units.unit import Unit
    from ..units.target import Target


ABILITY_CRIT_BONUS = 0.10


def equip_item(unit: "Unit", item: Item, now: int = 0) -> Optional[ItemInstance]:
    """
    Zakłada item na jednostkę.

    Returns:
        ItemInstance lub None gdy item jest unique i już założony
    """
    if item.unique and any(inst.item.name == item.name for inst in unit.items):
        return None

    unit.item_counter += 1
    instance = ItemInstance(
        instance_id=f"{item.name}#{unit.item_counter}",
        item=item,
        owner=unit,
    )
    unit.items.append(instance)
    unit.stats.add_bonuses(item.stats)

    if item.ability_crit:
        if unit.ability_can_crit:
            unit.stats.add_bonus(StatType.CRIT_DAMAGE, ABILITY_CRIT_BONUS)
        unit.ability_can_crit = True

    fire_item_hooks(unit, ItemTrigger.ON_EQUIP, now, instances=[instance])
    return instance


def fire_item_hooks(
    unit: "Unit",
    trigger: ItemTrigger,
    now: int,
    simulation: Any = None,
    target: Optional["Target"] = None,
    damage: float = 0.0,
    is_crit: bool = False,
    targets: Optional[List["Target"]] = None,
    instances: Optional[Iterable[ItemInstance]] = None,
) -> int:
    """
    Odpala hooki danego triggera dla itemów jednostki.

    Returns:
        int: Liczba wywołanych hooków
    """
    fired = 0
    for instance in list(instances if instances is not None else unit.items):
        for hook in list(instance.item.get_hooks(trigger)):
            hook(HookContext(
                instance=instance,
                unit=unit,
                now=now,
                target=target,
                damage=damage,
                is_crit=is_crit,
                targets=list(targets or []),
                simulation=simulation,
            ))
            fired += 1
    return fired


class ItemManager:
    """
    Odpala hooki itemów w kontekście symulacji.

    Attributes:
        simulation: Symulacja (przekazywana do hooków)
    """

    def __init__(self, simulation: Any = None):
        self.simulation = simulation

    @property
    def now(self) -> int:
        return self.simulation.now if self.simulation is not None else 0

    def on_attack(self, unit: "Unit", target: "Target") -> int:
        return fire_item_hooks(unit, ItemTrigger.ON_ATTACK, self.now, self.simulation, target=target)

    def on_hit(self, unit: "Unit", target: "Target", damage: float, is_crit: bool) -> int:
        return fire_item_hooks(
            unit, ItemTrigger.ON_HIT, self.now, self.simulation,
            target=target, damage=damage, is_crit=is_crit,
        )

    def on_second(self, unit: "Unit") -> int:
        return fire_item_hooks(unit, ItemTrigger.ON_SECOND, self.now, self.simulation)

    def on_cast(self, unit: "Unit", targets: List["Target"]) -> int:
        return fire_item_hooks(unit, ItemTrigger.ON_CAST, self.now, self.simulation, targets=targets)

    def get_unit_items_summary(self, unit: "Unit") -> List[dict]:
        return [instance.to_dict() for instance in unit.items]
