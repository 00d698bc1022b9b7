"""
Reflection API endpoints.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends

from transformation.api.deps import get_store, handle_errors, not_found
from transformation.models import EntityKind
from transformation.schemas import parse_create, parse_update
from transformation.storage import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["reflections"])


@router.get("/reflections")
@router.get("/reflections/{date}")
def get_reflections(
    date: Optional[str] = None,
    store: RecordStore = Depends(get_store),
) -> List[Dict[str, Any]]:
    """Get reflections, optionally only those written on ``date``."""
    with handle_errors("Failed to fetch reflections"):
        filters = {"date": date} if date else None
        return [r.to_dict() for r in store.list(EntityKind.REFLECTION, filters)]


@router.get("/reflections-all")
def get_all_reflections(store: RecordStore = Depends(get_store)) -> List[Dict[str, Any]]:
    """Get every reflection, newest first."""
    with handle_errors("Failed to fetch all reflections"):
        return [r.to_dict() for r in store.list(EntityKind.REFLECTION)]


@router.post("/reflections")
def create_reflection(
    body: Any = Body(default=None),
    store: RecordStore = Depends(get_store),
) -> Dict[str, Any]:
    with handle_errors("Failed to create reflection"):
        reflection = store.create(EntityKind.REFLECTION, parse_create(EntityKind.REFLECTION, body))
        logger.info(f"Created reflection {reflection.id} for prompt {reflection.prompt_id}")
        return reflection.to_dict()


@router.put("/reflections/{reflection_id}")
def update_reflection(
    reflection_id: str,
    body: Any = Body(default=None),
    store: RecordStore = Depends(get_store),
) -> Dict[str, Any]:
    with handle_errors("Failed to update reflection"):
        changes = parse_update(EntityKind.REFLECTION, body)
        reflection = store.update(EntityKind.REFLECTION, reflection_id, changes)
        if reflection is None:
            raise not_found(EntityKind.REFLECTION, reflection_id)
        return reflection.to_dict()


@router.delete("/reflections/{reflection_id}")
def delete_reflection(reflection_id: str, store: RecordStore = Depends(get_store)) -> Dict[str, bool]:
    with handle_errors("Failed to delete reflection"):
        if not store.delete(EntityKind.REFLECTION, reflection_id):
            raise not_found(EntityKind.REFLECTION, reflection_id)
        return {"success": True}
