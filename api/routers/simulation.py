"""
Simulation router - uruchamianie symulacji i porównanie buildów.
"""

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from typing import List, Dict, Any, Optional

from dpssim.core.registry import ContentLibrary
from dpssim.simulation import SimulationConfig, compare_builds
from dpssim.units.target import Target
from ..content import get_library


router = APIRouter()


# ═══════════════════════════════════════════════════════════════════════════
# REQUEST/RESPONSE MODELS
# ═══════════════════════════════════════════════════════════════════════════

class TargetSpec(BaseModel):
    """Manekin przyjmujący obrażenia."""
    name: str = "Frontline Tank"
    hp: float = 50000
    armor: float = 100
    magic_resist: float = 50
    damage_reduction: float = 0.0


class SimulationRequest(BaseModel):
    """Request do pojedynczej symulacji."""
    unit: str = "Yunara"
    star_level: int = Field(default=2, ge=1, le=3)
    items: List[str] = []
    augments: List[str] = []
    targets: List[TargetSpec] = Field(default_factory=lambda: [TargetSpec()])
    duration_ms: int = 30000
    tick_interval_ms: int = 17
    seed: Optional[int] = None
    include_log: bool = False


class BuildSpec(BaseModel):
    label: str
    items: List[str]


class CompareRequest(BaseModel):
    """Request do porównania buildów (ten sam seed dla każdego)."""
    unit: str = "Yunara"
    star_level: int = Field(default=2, ge=1, le=3)
    builds: List[BuildSpec]
    augments: List[str] = []
    target: TargetSpec = Field(default_factory=TargetSpec)
    duration_ms: int = 30000
    seed: Optional[int] = None


# ═══════════════════════════════════════════════════════════════════════════
# ENDPOINTS
# ═══════════════════════════════════════════════════════════════════════════

def _run(library, unit, star_level, builds, targets, config, seed, augments):
    try:
        return compare_builds(
            library, unit, star_level, builds, targets, config, seed=seed, augments=augments,
        )
    except KeyError as e:
        raise HTTPException(status_code=404, detail=e.args[0])


@router.post("/simulate")
async def simulate(
    request: SimulationRequest,
    library: ContentLibrary = Depends(get_library),
) -> Dict[str, Any]:
    """
    Uruchamia jedną symulację.

    Returns:
        SimulationResult.to_dict() (+ damage_log gdy include_log)
    """
    targets = [Target.from_dict(t.model_dump()) for t in request.targets]
    config = SimulationConfig(request.duration_ms, request.tick_interval_ms)
    results = _run(
        library, request.unit, request.star_level, [("build", request.items)],
        targets, config, request.seed, request.augments,
    )
    _, result = results[0]
    return result.to_dict(include_log=request.include_log)


@router.post("/compare")
async def compare(
    request: CompareRequest,
    library: ContentLibrary = Depends(get_library),
) -> Dict[str, Any]:
    """
    Porównuje buildy itemów.

    Returns:
        Dict z seedem i listą wyników posortowaną jak w requeście
    """
    config = SimulationConfig(request.duration_ms)
    results = _run(
        library, request.unit, request.star_level,
        [(b.label, b.items) for b in request.builds],
        request.target.model_dump(), config, request.seed, request.augments,
    )
    return {
        "unit": request.unit,
        "star_level": request.star_level,
        "seed": results[0][1].seed if results else request.seed,
        "results": [{"label": label, **result.to_dict()} for label, result in results],
    }
