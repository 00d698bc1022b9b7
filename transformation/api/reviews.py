"""
Weekly review API endpoints.
"""

import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends

from transformation.api.deps import get_store, handle_errors, not_found
from transformation.models import EntityKind
from transformation.schemas import parse_create, parse_update
from transformation.storage import RecordStore

logger = logging.getLogger(__name__)

router = APIRouter(tags=["weekly-reviews"])


@router.get("/weekly-review/{week_start}")
def get_weekly_review(week_start: str, store: RecordStore = Depends(get_store)) -> Optional[Dict[str, Any]]:
    """Get the review for the week starting on ``week_start``, or null."""
    with handle_errors("Failed to fetch weekly review"):
        review = store.get_by_key(EntityKind.REVIEW, week_start)
        return review.to_dict() if review else None


@router.get("/weekly-reviews-all")
def get_all_weekly_reviews(store: RecordStore = Depends(get_store)) -> List[Dict[str, Any]]:
    """Get every weekly review, newest first."""
    with handle_errors("Failed to fetch all weekly reviews"):
        return [review.to_dict() for review in store.list(EntityKind.REVIEW)]


@router.post("/weekly-review")
def create_weekly_review(
    body: Any = Body(default=None),
    store: RecordStore = Depends(get_store),
) -> Dict[str, Any]:
    with handle_errors("Failed to create weekly review"):
        review = store.create(EntityKind.REVIEW, parse_create(EntityKind.REVIEW, body))
        logger.info(f"Created weekly review {review.id} for {review.week_start}")
        return review.to_dict()


@router.put("/weekly-review/{review_id}")
def update_weekly_review(
    review_id: str,
    body: Any = Body(default=None),
    store: RecordStore = Depends(get_store),
) -> Dict[str, Any]:
    with handle_errors("Failed to update weekly review"):
        review = store.update(EntityKind.REVIEW, review_id, parse_update(EntityKind.REVIEW, body))
        if review is None:
            raise not_found(EntityKind.REVIEW, review_id)
        return review.to_dict()


@router.delete("/weekly-review/{review_id}")
def delete_weekly_review(review_id: str, store: RecordStore = Depends(get_store)) -> Dict[str, bool]:
    with handle_errors("Failed to delete weekly review"):
        if not store.delete(EntityKind.REVIEW, review_id):
            raise not_found(EntityKind.REVIEW, review_id)
        return {"success": True}
