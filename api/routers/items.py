"""
Items router - lista przedmiotów i augmentów.
"""

from fastapi import APIRouter, Depends, HTTPException
from typing import List, Dict, Any

from dpssim.core.registry import ContentLibrary
from ..content import get_library


router = APIRouter()


@router.get("/items")
async def get_items(library: ContentLibrary = Depends(get_library)) -> List[Dict[str, Any]]:
    """
    Zwraca listę wszystkich przedmiotów (posortowaną po nazwie).
    """
    result = [item.to_dict() for item in library.items]
    result.sort(key=lambda x: x["name"])
    return result


@router.get("/items/{name}")
async def get_item(name: str, library: ContentLibrary = Depends(get_library)) -> Dict[str, Any]:
    """
    Zwraca szczegóły przedmiotu.

    Raises:
        HTTPException 404: Nieznany item
    """
    item, found = library.items.get(name)
    if not found:
        raise HTTPException(status_code=404, detail=f"Item '{name}' not found")
    return item.to_dict()


@router.get("/augments")
async def get_augments(library: ContentLibrary = Depends(get_library)) -> List[Dict[str, Any]]:
    return [augment.to_dict() for augment in library.augments]
