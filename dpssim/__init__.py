"""
dpssim - symulator DPS jednej jednostki TFT.

Jednostka z itemami atakuje nieruchome cele w pętli ticków;
wynik pozwala porównać buildy itemów na tym samym seedzie.

Podpakiety:
- core: RNG, tabela statystyk, loader YAML, rejestry treści
- combat: pipeline obrażeń, rzuty na crit
- effects: buffy i BuffManager
- units: jednostka, cel, maszyna stanów castowania
- abilities: umiejętności i ich efekty
- items: itemy, hooki, augmenty
- events: log zdarzeń
- simulation: pętla ticków, wyniki, porównanie buildów
"""

from .core import ConfigLoader, ContentLibrary, ContentRegistry, GameRNG, Stats, StatType
from .combat import DamageType
from .units import Role, Target, Unit, UnitDefinition
from .simulation import SimulationConfig, SimulationResult, Simulator, compare_builds

__version__ = "0.1.0"

__all__ = [
    "ConfigLoader", "ContentLibrary", "ContentRegistry", "GameRNG", "Stats", "StatType",
    "DamageType",
    "Role", "Target", "Unit", "UnitDefinition",
    "SimulationConfig", "SimulationResult", "Simulator", "compare_builds",
    "__version__",
]
