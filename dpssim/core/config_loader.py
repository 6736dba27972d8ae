"""
Loader konfiguracji z automatycznym uzupełnianiem wartości domyślnych.

Tabele treści (jednostki, przedmioty, augmenty) to dane, nie logika -
trzymamy je w plikach YAML:
- defaults.yaml: ustawienia symulacji, bazowe staty jednostek, mana per rola
- units.yaml: definicje jednostek (+ sekcja abilities)
- items.yaml: definicje przedmiotów
- augments.yaml: definicje augmentów

Logika merge (uzupełniania defaults):
    1. Wczytaj defaults.yaml - sekcja unit_defaults
    2. Wczytaj konkretną definicję jednostki
    3. Brakujące klucze bierzemy z defaults
    4. Definicja może nadpisać defaults (merge rekurencyjny)

Przykład:
    defaults.yaml:
        unit_defaults:
          stats:
            crit_chance: 0.25
            crit_damage: 0.4

    units.yaml:
        units:
          Yunara:
            stats:
              attack_speed: 0.8   # crit_chance -> 0.25 z defaults

Użycie:
    >>> loader = ConfigLoader("data/")
    >>> yunara = loader.load_unit("Yunara")
    >>> yunara["stats"]["crit_chance"]
    0.25
"""

from __future__ import annotations
from pathlib import Path
from typing import Dict, Optional
import copy

import yaml


class ConfigLoader:
    """
    Ładuje konfigurację z plików YAML z automatycznym merge defaults.

    Każdy plik jest wczytywany raz i cache'owany do wywołania reload().

    Attributes:
        data_path (Path): Ścieżka do folderu data/
    """

    def __init__(self, data_path: str = "data/"):
        self.data_path = Path(data_path)
        self._defaults: Optional[Dict] = None
        self._units: Optional[Dict] = None
        self._abilities: Optional[Dict] = None
        self._items: Optional[Dict] = None
        self._augments: Optional[Dict] = None

    # ─────────────────────────────────────────────────────────────────────────
    # WCZYTYWANIE PLIKÓW
    # ─────────────────────────────────────────────────────────────────────────

    def _load_yaml(self, filename: str) -> Dict:
        """
        Wczytuje plik YAML.

        Raises:
            FileNotFoundError: Jeśli plik nie istnieje
            yaml.YAMLError: Jeśli plik jest niepoprawny
        """
        filepath = self.data_path / filename
        with open(filepath, 'r', encoding='utf-8') as f:
            return yaml.safe_load(f) or {}

    def get_defaults(self) -> Dict:
        """Zwraca zawartość defaults.yaml (cache'owaną)."""
        if self._defaults is None:
            self._defaults = self._load_yaml("defaults.yaml")
        return self._defaults

    def get_unit_defaults(self) -> Dict:
        """Zwraca sekcję unit_defaults."""
        return self.get_defaults().get("unit_defaults", {})

    def get_simulation_config(self) -> Dict:
        """Zwraca sekcję simulation (czas trwania, interwał ticka)."""
        return self.get_defaults().get("simulation", {})

    def get_mana_config(self) -> Dict:
        """Zwraca sekcję mana (mana za atak per klasa roli, regen casterów)."""
        return self.get_defaults().get("mana", {})

    # ─────────────────────────────────────────────────────────────────────────
    # ŁADOWANIE JEDNOSTEK
    # ─────────────────────────────────────────────────────────────────────────

    def _get_all_units_raw(self) -> Dict:
        if self._units is None:
            data = self._load_yaml("units.yaml")
            self._units = data.get("units", {}) or {}
            self._abilities = data.get("abilities", {}) or {}
        return self._units

    def load_unit(self, unit_id: str) -> Dict:
        """
        Wczytuje definicję jednostki z uzupełnionymi defaults.

        Args:
            unit_id: Nazwa jednostki (klucz w units.yaml)

        Returns:
            Dict: Pełna definicja jednostki ze wszystkimi statami

        Raises:
            KeyError: Jeśli jednostka nie istnieje
        """
        units = self._get_all_units_raw()

        if unit_id not in units:
            raise KeyError(f"Unit '{unit_id}' not found in units.yaml")

        result = self._deep_merge(self.get_unit_defaults(), units[unit_id])
        result["id"] = unit_id
        result.setdefault("name", unit_id)
        return result

    def load_all_units(self) -> Dict[str, Dict]:
        """Wczytuje wszystkie definicje jednostek."""
        return {uid: self.load_unit(uid) for uid in self._get_all_units_raw()}

    # ─────────────────────────────────────────────────────────────────────────
    # ŁADOWANIE ABILITIES
    # ─────────────────────────────────────────────────────────────────────────

    def load_ability(self, ability_id: str) -> Dict:
        """
        Wczytuje definicję umiejętności (sekcja abilities w units.yaml).

        Raises:
            KeyError: Jeśli ability nie istnieje
        """
        self._get_all_units_raw()
        abilities = self._abilities or {}

        if ability_id not in abilities:
            raise KeyError(f"Ability '{ability_id}' not found in units.yaml")

        result = copy.deepcopy(abilities[ability_id])
        result["id"] = ability_id
        return result

    # ─────────────────────────────────────────────────────────────────────────
    # ŁADOWANIE ITEMS / AUGMENTS
    # ─────────────────────────────────────────────────────────────────────────

    def _get_all_items_raw(self) -> Dict:
        if self._items is None:
            data = self._load_yaml("items.yaml")
            self._items = data.get("items", {}) or {}
        return self._items

    def load_item(self, item_id: str) -> Dict:
        """
        Wczytuje definicję przedmiotu.

        Raises:
            KeyError: Jeśli item nie istnieje
        """
        items = self._get_all_items_raw()

        if item_id not in items:
            raise KeyError(f"Item '{item_id}' not found in items.yaml")

        result = copy.deepcopy(items[item_id])
        result["id"] = item_id
        return result

    def load_all_items(self) -> Dict[str, Dict]:
        return {iid: self.load_item(iid) for iid in self._get_all_items_raw()}

    def _get_all_augments_raw(self) -> Dict:
        if self._augments is None:
            data = self._load_yaml("augments.yaml")
            self._augments = data.get("augments", {}) or {}
        return self._augments

    def load_augment(self, augment_id: str) -> Dict:
        """
        Wczytuje definicję augmentu.

        Raises:
            KeyError: Jeśli augment nie istnieje
        """
        augments = self._get_all_augments_raw()

        if augment_id not in augments:
            raise KeyError(f"Augment '{augment_id}' not found in augments.yaml")

        result = copy.deepcopy(augments[augment_id])
        result["id"] = augment_id
        return result

    def load_all_augments(self) -> Dict[str, Dict]:
        return {aid: self.load_augment(aid) for aid in self._get_all_augments_raw()}

    # ─────────────────────────────────────────────────────────────────────────
    # HELPERY
    # ─────────────────────────────────────────────────────────────────────────

    @staticmethod
    def _deep_merge(base: Dict, override: Dict) -> Dict:
        """
        Głęboko łączy dwa słowniki.

        Override nadpisuje wartości w base.
        Nested dicts są merge'owane rekurencyjnie.
        """
        result = copy.deepcopy(base)

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = ConfigLoader._deep_merge(result[key], value)
            else:
                result[key] = copy.deepcopy(value)

        return result

    def reload(self) -> None:
        """Czyści cache i wymusza ponowne wczytanie plików."""
        self._defaults = None
        self._units = None
        self._abilities = None
        self._items = None
        self._augments = None
