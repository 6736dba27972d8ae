"""
Units router - lista dostępnych jednostek.
"""

from fastapi import APIRouter, Depends, HTTPException
from typing import List, Dict, Any

from dpssim.core.registry import ContentLibrary
from ..content import get_library


router = APIRouter()


@router.get("/units")
async def get_units(library: ContentLibrary = Depends(get_library)) -> List[Dict[str, Any]]:
    """
    Zwraca listę wszystkich dostępnych jednostek.

    Returns:
        Lista jednostek z rolą, statami (listy per gwiazdka) i nazwą ability.
    """
    return [definition.to_dict() for definition in library.units]


@router.get("/units/{name}")
async def get_unit(name: str, library: ContentLibrary = Depends(get_library)) -> Dict[str, Any]:
    definition, found = library.units.get(name)
    if not found:
        raise HTTPException(status_code=404, detail=f"Unit '{name}' not found")
    return definition.to_dict()
