"""
Tasks API endpoints.

Weekly goals. Deleting a task only marks it inactive; every read here
returns active tasks only.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, Query

from transformation.api.deps import get_store, handle_errors, not_found
from transformation.models import EntityKind
from transformation.schemas import parse_completion, parse_create, parse_update
from transformation.storage import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tasks"])


@router.get("/tasks")
def get_tasks(
    week_start: Optional[str] = Query(
        default=None,
        alias="weekStart",
        description="Only tasks for the week starting on this date (YYYY-MM-DD)"
    ),
    store: RecordStore = Depends(get_store),
) -> List[Dict[str, Any]]:
    """
    Get active tasks, optionally for one week.

    Args:
        week_start: Week start date filter

    Returns:
        List of active tasks, newest first
    """
    with handle_errors("Failed to fetch tasks"):
        filters = {"week_start": week_start} if week_start else None
        tasks = store.list(EntityKind.TASK, filters)
        return [task.to_dict() for task in tasks]


@router.get("/tasks-all")
def get_all_tasks(store: RecordStore = Depends(get_store)) -> List[Dict[str, Any]]:
    """Get every active task, newest first."""
    with handle_errors("Failed to fetch all tasks"):
        return [task.to_dict() for task in store.list(EntityKind.TASK)]


@router.post("/tasks")
def create_task(
    body: Any = Body(default=None),
    store: RecordStore = Depends(get_store),
) -> Dict[str, Any]:
    """
    Create a task.

    Raises:
        ValidationError: 400 if title or weekStart is missing or mistyped
    """
    with handle_errors("Failed to create task"):
        task = store.create(EntityKind.TASK, parse_create(EntityKind.TASK, body))
        logger.info(f"Created task {task.id} for week {task.week_start}")
        return task.to_dict()


@router.put("/tasks/{task_id}")
def update_task(
    task_id: str,
    body: Any = Body(default=None),
    store: RecordStore = Depends(get_store),
) -> Dict[str, Any]:
    """
    Partially update a task.

    Raises:
        ValidationError: 400 on a mistyped field
        NotFoundError: 404 if the task does not exist
    """
    with handle_errors("Failed to update task"):
        task = store.update(EntityKind.TASK, task_id, parse_update(EntityKind.TASK, body))
        if task is None:
            raise not_found(EntityKind.TASK, task_id)
        return task.to_dict()


@router.delete("/tasks/{task_id}")
def delete_task(task_id: str, store: RecordStore = Depends(get_store)) -> Dict[str, bool]:
    """
    Soft-delete a task.

    Raises:
        NotFoundError: 404 if the task does not exist or is already deleted
    """
    with handle_errors("Failed to delete task"):
        if not store.delete(EntityKind.TASK, task_id):
            raise not_found(EntityKind.TASK, task_id)
        logger.info(f"Deactivated task {task_id}")
        return {"success": True}


@router.patch("/tasks/{task_id}/complete")
def set_task_completion(
    task_id: str,
    body: Any = Body(default=None),
    store: RecordStore = Depends(get_store),
) -> Dict[str, Any]:
    """
    Set ``isCompleted`` from a ``{"completed": bool}`` body.

    Raises:
        ValidationError: 400 if ``completed`` is missing or not a boolean
        NotFoundError: 404 if the task does not exist
    """
    with handle_errors("Failed to update task completion"):
        completed = parse_completion(body)
        task = store.update(EntityKind.TASK, task_id, {"is_completed": completed})
        if task is None:
            raise not_found(EntityKind.TASK, task_id)
        return task.to_dict()
