"""
Rejestry treści - wyszukiwanie definicji po nazwie.

Rejestr nie zawiera logiki symulacji. Jest budowany jawnie
(z YAML albo w teście z ręcznie zrobionych definicji) i wstrzykiwany
tam, gdzie jest potrzebny. Brak globalnego stanu modułu.

    >>> items = ContentRegistry("item")
    >>> items.register(Item(name="IE", stats={StatType.CRIT_CHANCE: 0.35}))
    >>> items.get("IE")
    (Item(IE), True)
    >>> items.get("Nope")
    (None, False)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Generic, Iterator, List, Optional, Tuple, TypeVar, TYPE_CHECKING

if TYPE_CHECKING:
    from ..items.item import Item
    from ..items.augment import Augment
    from ..units.unit import UnitDefinition
    from .config_loader import ConfigLoader


T = TypeVar("T")


class ContentRegistry(Generic[T]):
    """
    Rejestr definicji jednego rodzaju (itemy, jednostki, augmenty).

    Klucz = atrybut `name` definicji. Ponowna rejestracja nadpisuje wpis.
    """

    def __init__(self, kind: str = "definition"):
        self.kind = kind
        self._definitions: Dict[str, T] = {}

    def register(self, definition: T) -> T:
        self._definitions[definition.name] = definition
        return definition

    def get(self, name: str) -> Tuple[Optional[T], bool]:
        """
        Zwraca (definicja, znaleziono).

        Nieznana nazwa -> (None, False); nigdy nie podstawia domyślnej.
        """
        definition = self._definitions.get(name)
        return definition, definition is not None

    def names(self) -> List[str]:
        return list(self._definitions.keys())

    def values(self) -> List[T]:
        return list(self._definitions.values())

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __iter__(self) -> Iterator[T]:
        return iter(list(self._definitions.values()))

    def __len__(self) -> int:
        return len(self._definitions)

    def __repr__(self) -> str:
        return f"ContentRegistry({self.kind}, {len(self)} entries)"


@dataclass
class ContentLibrary:
    """
    Komplet rejestrów przekazywany do warstwy symulacji / CLI / API.

    Attributes:
        items: Rejestr Item
        units: Rejestr UnitDefinition
        augments: Rejestr Augment
    """
    items: ContentRegistry["Item"] = field(default_factory=lambda: ContentRegistry("item"))
    units: ContentRegistry["UnitDefinition"] = field(default_factory=lambda: ContentRegistry("unit"))
    augments: ContentRegistry["Augment"] = field(default_factory=lambda: ContentRegistry("augment"))

    @classmethod
    def from_loader(cls, loader: "ConfigLoader") -> "ContentLibrary":
        """
        Buduje rejestry ze wszystkich plików YAML loadera.

        Raises:
            KeyError: Jednostka wskazuje nieistniejącą ability
            ValueError: Nieznana rola / statystyka / typ efektu
        """
        from ..items.item import Item
        from ..items.augment import Augment
        from ..units.unit import UnitDefinition

        library = cls()
        for data in loader.load_all_items().values():
            library.items.register(Item.from_dict(data))
        for data in loader.load_all_augments().values():
            library.augments.register(Augment.from_dict(data))

        mana_config = loader.get_mana_config()
        for data in loader.load_all_units().values():
            if isinstance(data.get("ability"), str):
                data["ability"] = loader.load_ability(data["ability"])
            library.units.register(UnitDefinition.from_dict(data, mana_config))
        return library

    def resolve_items(self, names: List[str]) -> Tuple[List["Item"], List[str]]:
        """
        Zamienia nazwy na definicje.

        Returns:
            (znalezione itemy, nieznane nazwy)
        """
        found, missing = [], []
        for name in names:
            item, ok = self.items.get(name)
            if ok:
                found.append(item)
            else:
                missing.append(name)
        return found, missing
