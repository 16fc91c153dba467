import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from farmlink.errors import StorageFailure

logger = logging.getLogger(__name__)


def is_present(value) -> bool:
    return isinstance(value, str) and bool(value.strip())


@contextmanager
def storage_guard(db: Session, action: str, message: str = "Server error."):
    """Roll back and re-raise database errors as a generic StorageFailure."""
    try:
        yield
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Storage failure while trying to %s", action)
        raise StorageFailure(message)
