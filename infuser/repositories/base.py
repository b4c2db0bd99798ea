"""Row store contract consumed by record associations."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional, Sequence, Type, TypeVar

from infuser.models.base import Record

RecordType = TypeVar("RecordType", bound=Record)


class RowStore(ABC):
    """Base class for row stores.

    Provides:
    - Equality-filtered row lookup (``fetch``), implemented by subclasses
    - Turning a fetched row into a record (``materialize``)
    - Structured logging for store operations
    """

    provider = "rowstore"

    def __init__(self, correlation_id: Optional[str] = None):
        """Initialize store.

        Args:
            correlation_id: Optional correlation ID for logging
        """
        self.correlation_id = correlation_id
        self.logger = logging.getLogger(self.__class__.__name__)

    @abstractmethod
    def fetch(self, record_type: Type[Record], filters: Mapping[str, Any]) -> Sequence[Mapping[str, Any]]:
        """Return rows of ``record_type`` whose attributes equal ``filters``.

        Args:
            record_type: Record class whose rows are requested
            filters: Attribute name to required value

        Returns:
            Rows in the store's natural order
        """

    def materialize(self, record_type: Type[RecordType], row: Mapping[str, Any]) -> RecordType:
        """Build a record from a fetched row, remembering this store."""
        return record_type.from_row(row, store=self)

    def fetch_records(self, record_type: Type[RecordType], filters: Mapping[str, Any]) -> list:
        """Fetch and materialize in one step."""
        return [self.materialize(record_type, row) for row in self.fetch(record_type, filters)]

    def find(self, record_type: Type[RecordType], identity: Any) -> Optional[RecordType]:
        """Get a record by primary key.

        Returns:
            Record instance or None if not found
        """
        rows = self.fetch(record_type, {record_type.__primary_key__: identity})
        found = self.materialize(record_type, rows[0]) if rows else None
        self._log_operation("find", model=record_type.__name__, id=identity, found=found is not None)
        return found

    def _log_operation(self, operation: str, **kwargs: Any) -> None:
        """Log store operation with structured fields.

        Args:
            operation: Name of the operation being performed
            **kwargs: Additional fields to include in log
        """
        log_data: Dict[str, Any] = {
            "correlation_id": self.correlation_id,
            "store": self.__class__.__name__,
            "operation": operation,
            **kwargs
        }
        self.logger.info(f"Store operation: {operation}", extra=log_data)
