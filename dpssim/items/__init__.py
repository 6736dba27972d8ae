"""
Items module - przedmioty i augmenty.

Zawiera:
- Item / ItemInstance: Definicja i instancja na jednostce
- ItemTrigger: ON_EQUIP, ON_ATTACK, ON_HIT, ON_SECOND, ON_CAST
- ItemEffect + ITEM_EFFECT_HANDLERS: Efekty z YAML
- ItemManager / equip_item / fire_item_hooks: Zakładanie i hooki
- Augment: Stałe pakiety statystyk
"""

from .item import Item, ItemInstance, ItemTrigger, HookContext
from .item_effect import ItemEffect, ITEM_EFFECT_HANDLERS, CONDITIONS
from .item_manager import ItemManager, equip_item, fire_item_hooks
from .augment import Augment

__all__ = [
    "Item", "ItemInstance", "ItemTrigger", "HookContext",
    "ItemEffect", "ITEM_EFFECT_HANDLERS", "CONDITIONS",
    "ItemManager", "equip_item", "fire_item_hooks",
    "Augment",
]
