"""Walker colour, lookup and contact endpoints."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends

from ...core import NotFoundError, ValidationError
from ...services import WalkerRegistry, walker_to_dict
from ..deps import get_walker_registry

router = APIRouter(prefix="/api", tags=["walkers"])


@router.get("/walker-color/{name}")
def get_walker_color(
    name: str, walkers: WalkerRegistry = Depends(get_walker_registry)
) -> Dict[str, int]:
    """Colour index for a name; first sight registers the name."""

    return {"colorIndex": walkers.get_color_index(name)}


@router.get("/walkers")
def list_walkers(
    walkers: WalkerRegistry = Depends(get_walker_registry),
) -> List[Dict[str, Any]]:
    return [walker_to_dict(walker) for walker in walkers.list()]


@router.get("/walkers/search")
def search_walkers(
    q: Optional[str] = None, walkers: WalkerRegistry = Depends(get_walker_registry)
) -> List[Dict[str, Any]]:
    """Case-insensitive name search for autocomplete."""

    return [walker_to_dict(walker) for walker in walkers.search(q)]


@router.post("/walkers/update")
def update_walker(
    body: Dict[str, Any] = Body(...),
    walkers: WalkerRegistry = Depends(get_walker_registry),
) -> Dict[str, Any]:
    """Register a walker or replace their contact details."""

    contact = body.get("contact", body.get("phone"))
    if contact is not None and not isinstance(contact, str):
        raise ValidationError("contact must be a string")
    return walker_to_dict(walkers.upsert(body.get("name"), contact))


@router.get("/walkers/{name}")
def get_walker(
    name: str, walkers: WalkerRegistry = Depends(get_walker_registry)
) -> Dict[str, Any]:
    walker = walkers.get(name)
    if walker is None:
        raise NotFoundError("Walker not found")
    return walker_to_dict(walker)


__all__ = ["router"]
