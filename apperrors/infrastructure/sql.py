"""
Adapter: Error persistence.

Stores an ``Error`` as an opaque JSON column through SQLAlchemy. The column
holds exactly what ``Error.value()`` produces and is read back with
``Error.scan()``, so the same lossy cause handling applies.
"""

import logging
from typing import Optional

from sqlalchemy import LargeBinary
from sqlalchemy.types import TypeDecorator

from apperrors.domain.error import Error

logger = logging.getLogger(__name__)


class ErrorType(TypeDecorator):
    """Column type persisting an Error as JSON bytes."""

    impl = LargeBinary
    cache_ok = True

    def process_bind_param(self, value: Optional[Error], dialect) -> Optional[bytes]:
        """Encode an Error for storage. None is stored as NULL."""
        if value is None:
            return None
        return value.value()

    def process_result_value(self, value, dialect) -> Optional[Error]:
        """Decode a stored column value. NULL reads back as None."""
        if value is None:
            return None
        error = Error()
        error.scan(value)
        logger.debug("Loaded stored error: code=%s", error.code)
        return error
