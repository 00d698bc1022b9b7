"""
Shared route dependencies and the handler error boundary.
"""

import logging
from contextlib import contextmanager

from fastapi import HTTPException, Request

from transformation.errors import NotFoundError, ValidationError
from transformation.models import EntityKind, entity_type
from transformation.storage import RecordStore

logger = logging.getLogger(__name__)


def get_store(request: Request) -> RecordStore:
    """Record store attached to the application at startup."""
    return request.app.state.store


@contextmanager
def handle_errors(failure_message: str):
    """
    Map everything but client errors onto a generic 500.

    ValidationError, NotFoundError and HTTPException pass through to the
    application's exception handlers. Anything else, including StoreError,
    is logged with its traceback and reported to the client only as
    ``failure_message``.
    """
    try:
        yield
    except (ValidationError, NotFoundError, HTTPException):
        raise
    except Exception as e:
        logger.error(f"{failure_message}: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail=failure_message)


def not_found(kind: EntityKind, record_id: str) -> NotFoundError:
    return NotFoundError(f"{entity_type(kind).label} not found", kind=EntityKind(kind).value, record_id=record_id)
