"""Row store backed by SQLAlchemy Core tables."""

from typing import Any, Dict, List, Mapping, Optional, Type

from sqlalchemy import MetaData, Table, insert, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from infuser.core.observability import log_store_call
from infuser.db.tables import metadata as default_metadata
from infuser.models.base import Record
from infuser.repositories.base import RowStore
from infuser.services.exceptions import StoreError


class SQLAlchemyRowStore(RowStore):
    """Row store reading the table named by each record type's ``__tablename__``.

    Rows come back in the database's natural order; no ORDER BY is applied.
    """

    provider = "sqlalchemy"

    def __init__(self, db: Session, metadata: Optional[MetaData] = None, correlation_id: Optional[str] = None):
        """Initialize store with database session and table metadata.

        Args:
            db: SQLAlchemy database session
            metadata: Table metadata; defaults to the package tables
            correlation_id: Optional correlation ID for logging
        """
        super().__init__(correlation_id)
        self.db = db
        self.metadata = metadata if metadata is not None else default_metadata

    def _table(self, record_type: Type[Record]) -> Table:
        name = record_type.__tablename__
        if not name or name not in self.metadata.tables:
            raise StoreError(
                f"no table mapped for {record_type.__name__}",
                correlation_id=self.correlation_id,
                details={"model": record_type.__name__, "table": name}
            )
        return self.metadata.tables[name]

    def _check_columns(self, table: Table, names) -> None:
        for name in names:
            if name not in table.c:
                raise StoreError(
                    f"table {table.name} has no column '{name}'",
                    correlation_id=self.correlation_id,
                    details={"table": table.name, "field": name}
                )

    def fetch(self, record_type: Type[Record], filters: Mapping[str, Any]) -> List[Dict[str, Any]]:
        table = self._table(record_type)
        self._check_columns(table, filters)

        query = select(table)
        for field, value in filters.items():
            query = query.where(table.c[field] == value)

        try:
            result = log_store_call(
                self.provider,
                table.name,
                "fetch",
                self.correlation_id,
                lambda: self.db.execute(query).mappings().all()
            )
        except SQLAlchemyError as e:
            self.logger.error(
                f"Failed to fetch {record_type.__name__}",
                extra={
                    "correlation_id": self.correlation_id,
                    "store": self.__class__.__name__,
                    "error": str(e)
                }
            )
            raise

        rows = [dict(row) for row in result]
        self._log_operation("fetch", model=record_type.__name__, filters=dict(filters), count=len(rows))
        return rows

    def insert(self, record_type: Type[Record], row: Mapping[str, Any]) -> Dict[str, Any]:
        """Insert a row and return it with its primary key filled in.

        Raises:
            SQLAlchemyError: On database operation failure
        """
        table = self._table(record_type)
        self._check_columns(table, row)

        try:
            result = self.db.execute(insert(table).values(**row))
            self.db.flush()
        except SQLAlchemyError as e:
            self.logger.error(
                f"Failed to insert {record_type.__name__}",
                extra={
                    "correlation_id": self.correlation_id,
                    "store": self.__class__.__name__,
                    "error": str(e)
                }
            )
            raise

        stored = dict(row)
        pk = record_type.__primary_key__
        if stored.get(pk) is None and result.inserted_primary_key:
            stored[pk] = result.inserted_primary_key[0]
        self._log_operation("insert", model=record_type.__name__, id=stored.get(pk))
        return stored

    def save(self, record: Record) -> Record:
        """Insert a new record's attributes and assign its identifier."""
        stored = self.insert(type(record), {k: v for k, v in record.to_dict().items() if v is not None})
        record.set(record.__primary_key__, stored[record.__primary_key__])
        record.bind_store(self)
        return record
