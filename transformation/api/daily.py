"""
Daily entry API endpoints.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends

from transformation.api.deps import get_store, handle_errors, not_found
from transformation.models import EntityKind
from transformation.schemas import parse_create, parse_update
from transformation.storage import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["daily"])


@router.get("/daily-all")
def get_all_daily_entries(store: RecordStore = Depends(get_store)) -> List[Dict[str, Any]]:
    """Get every daily entry, newest date first."""
    with handle_errors("Failed to fetch all daily entries"):
        return [entry.to_dict() for entry in store.list(EntityKind.DAILY)]


@router.get("/daily/{date}")
def get_daily_entry(date: str, store: RecordStore = Depends(get_store)) -> Optional[Dict[str, Any]]:
    """Get the entry for a date, or null when the day has no entry yet."""
    with handle_errors("Failed to fetch daily entry"):
        entry = store.get_by_key(EntityKind.DAILY, date)
        return entry.to_dict() if entry else None


@router.post("/daily")
def create_daily_entry(
    body: Any = Body(default=None),
    store: RecordStore = Depends(get_store),
) -> Dict[str, Any]:
    with handle_errors("Failed to create daily entry"):
        entry = store.create(EntityKind.DAILY, parse_create(EntityKind.DAILY, body))
        logger.info(f"Created daily entry {entry.id} for {entry.date}")
        return entry.to_dict()


@router.put("/daily/{entry_id}")
def update_daily_entry(
    entry_id: str,
    body: Any = Body(default=None),
    store: RecordStore = Depends(get_store),
) -> Dict[str, Any]:
    with handle_errors("Failed to update daily entry"):
        entry = store.update(EntityKind.DAILY, entry_id, parse_update(EntityKind.DAILY, body))
        if entry is None:
            raise not_found(EntityKind.DAILY, entry_id)
        return entry.to_dict()


@router.delete("/daily-entries/{entry_id}")
def delete_daily_entry(entry_id: str, store: RecordStore = Depends(get_store)) -> Dict[str, bool]:
    with handle_errors("Failed to delete daily entry"):
        if not store.delete(EntityKind.DAILY, entry_id):
            raise not_found(EntityKind.DAILY, entry_id)
        logger.info(f"Deleted daily entry {entry_id}")
        return {"success": True}


@router.get("/daily-week/{week_start}/{week_end}")
def get_daily_entries_for_week(
    week_start: str,
    week_end: str,
    store: RecordStore = Depends(get_store),
) -> List[Dict[str, Any]]:
    """
    Get entries dated within ``[week_start, week_end]``.

    An inverted range is not an error; it simply matches nothing.
    """
    with handle_errors("Failed to fetch weekly entries"):
        entries = store.list_for_date_range(EntityKind.DAILY, week_start, week_end)
        return [entry.to_dict() for entry in entries]
