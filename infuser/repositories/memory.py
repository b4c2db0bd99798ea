"""Row store kept in process memory."""

from typing import Any, Dict, List, Mapping, Optional, Type

from infuser.core.observability import log_store_call
from infuser.models.base import Record
from infuser.repositories.base import RowStore
from infuser.services.exceptions import StoreError, UnknownAttributeError


class InMemoryRowStore(RowStore):
    """Rows grouped by record type name, returned in insertion order."""

    provider = "memory"

    def __init__(self, correlation_id: Optional[str] = None):
        super().__init__(correlation_id)
        self._rows: Dict[str, List[Dict[str, Any]]] = {}

    def insert(self, record_type: Type[Record], row: Mapping[str, Any]) -> Dict[str, Any]:
        """Store a copy of ``row``; names must be declared by ``record_type``."""
        if record_type.is_strict():
            for name in row:
                if name not in record_type.schema():
                    raise UnknownAttributeError(record_type.__name__, name, self.correlation_id)
        stored = dict(row)
        self._rows.setdefault(record_type.__name__, []).append(stored)
        self._log_operation("insert", model=record_type.__name__, id=stored.get(record_type.__primary_key__))
        return stored

    def insert_many(self, record_type: Type[Record], rows) -> int:
        count = 0
        for row in rows:
            self.insert(record_type, row)
            count += 1
        return count

    def clear(self, record_type: Optional[Type[Record]] = None) -> None:
        if record_type is None:
            self._rows.clear()
        else:
            self._rows.pop(record_type.__name__, None)

    def fetch(self, record_type: Type[Record], filters: Mapping[str, Any]) -> List[Dict[str, Any]]:
        schema = record_type.schema()
        for field in filters:
            if field not in schema:
                raise StoreError(
                    f"cannot filter {record_type.__name__} on undeclared attribute '{field}'",
                    correlation_id=self.correlation_id,
                    details={"model": record_type.__name__, "field": field}
                )

        def _select() -> List[Dict[str, Any]]:
            return [
                dict(row)
                for row in self._rows.get(record_type.__name__, [])
                if all(row.get(field) == value for field, value in filters.items())
            ]

        results = log_store_call(self.provider, record_type.__name__, "fetch", self.correlation_id, _select)
        self._log_operation("fetch", model=record_type.__name__, filters=dict(filters), count=len(results))
        return results
