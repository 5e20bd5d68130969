"""
Helper Functions for Fleet Dashboard Services
=============================================

Shared utilities used by the service modules and routes.

Store Errors:
-------------
`store_errors()` wraps a block of ORM work and converts SQLAlchemy failures
into the dashboard's error taxonomy:

- StaleDataError (optimistic-lock miss on a versioned row) -> ConflictError
- any other SQLAlchemyError -> InternalError

The session is rolled back before the domain error is raised. Nothing is
retried.

    with store_errors(db, "approve task"):
        db.commit()

Identifiers:
------------
`new_entity_id("vehicle")` -> "vehicle-1a2b3c4d"
"""

import logging
import uuid
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from ..errors import ConflictError, InternalError


logger = logging.getLogger(__name__)


@contextmanager
def store_errors(db: Session, action: str) -> Iterator[None]:
    try:
        yield
    except StaleDataError as exc:
        db.rollback()
        logger.warning("Concurrent update detected while trying to %s", action)
        raise ConflictError(f"Concurrent update while trying to {action}; reload and retry") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Database error while trying to %s: %s", action, exc, exc_info=True)
        raise InternalError(f"Failed to {action}") from exc


def new_entity_id(prefix: str) -> str:
    """Short prefixed identifier for user-created vehicles and POIs."""
    return f"{prefix}-{uuid.uuid4().hex[:8]}"
