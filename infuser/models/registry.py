"""Process-wide table of record types and the default row store."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Dict, Optional, Type, Union

from infuser.services.exceptions import UnknownRecordTypeError

if TYPE_CHECKING:
    from infuser.models.base import Record
    from infuser.repositories.base import RowStore


class RecordRegistry:
    """Record types by class name, plus the row store used when an instance
    was not materialized by one.

    Types register themselves when their class is created, so every type must
    be imported before a string reference to it is resolved.
    """

    def __init__(self):
        self._types: Dict[str, Type["Record"]] = {}
        self._store: Optional["RowStore"] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    def register(self, record_type: Type["Record"]) -> None:
        name = record_type.__name__
        existing = self._types.get(name)
        if existing is not None and existing is not record_type:
            self.logger.warning(
                f"Record type {name} redefined",
                extra={"record_type": name, "record_module": record_type.__module__}
            )
        self._types[name] = record_type
        self.logger.debug(f"Registered record type {name}", extra={"record_type": name})

    def resolve(self, target: Union[str, Type["Record"]]) -> Type["Record"]:
        if isinstance(target, type):
            return target
        try:
            return self._types[target]
        except KeyError:
            raise UnknownRecordTypeError(target) from None

    def bind_store(self, store: Optional["RowStore"]) -> None:
        """Set (or clear, with ``None``) the default row store."""
        self._store = store
        self.logger.info(
            "Default row store bound",
            extra={"store": type(store).__name__ if store is not None else None}
        )

    @property
    def store(self) -> Optional["RowStore"]:
        return self._store


registry = RecordRegistry()
