"""
Core module - fundamenty symulacji.

Zawiera:
- GameRNG: Deterministyczny generator losowości
- Stats / StatType: Warstwowa tabela statystyk
- ConfigLoader: Wczytywanie YAML z merge defaults
- ContentRegistry / ContentLibrary: Wstrzykiwane rejestry treści
"""

from .rng import GameRNG
from .stats import Stats, StatType, ATTACK_SPEED_CAP, parse_stat_map
from .config_loader import ConfigLoader
from .registry import ContentRegistry, ContentLibrary

__all__ = [
    "GameRNG",
    "Stats", "StatType", "ATTACK_SPEED_CAP", "parse_stat_map",
    "ConfigLoader",
    "ContentRegistry", "ContentLibrary",
]
