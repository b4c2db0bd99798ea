"""Declarative record base class.

A record type declares its attribute names once and gets an accessor for
each of them, all backed by a single per-instance attribute store::

    class OrderItem(Record):
        __tablename__ = "order_items"
        __schema__ = ("item_name", "qty")

        invoice_items = has_many()

Declarations run when the class is created. Types must be fully declared
before instances are constructed; the per-type tables are not meant to change
afterwards.
"""

import keyword
import logging
import threading
from typing import Any, ClassVar, Dict, Mapping, Optional, Tuple, TYPE_CHECKING

from infuser.core.config import settings
from infuser.models.associations import HasMany
from infuser.models.registry import registry
from infuser.services.exceptions import (
    SchemaDefinitionError,
    StoreNotConfiguredError,
    UnknownAssociationError,
    UnknownAttributeError,
)

if TYPE_CHECKING:
    from infuser.repositories.base import RowStore

logger = logging.getLogger(__name__)


class SchemaAttribute:
    """Accessor generated for one declared attribute name."""

    def __init__(self, name: str):
        self.name = name

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return instance.get(self.name)

    def __set__(self, instance, value):
        instance.set(self.name, value)

    def __repr__(self) -> str:
        return f"SchemaAttribute({self.name!r})"


class Record:
    """Base class for every mapped record type."""

    __tablename__: ClassVar[Optional[str]] = None
    __primary_key__: ClassVar[str] = "id"
    __schema__: ClassVar[Tuple[str, ...]] = ()
    # None defers to settings.STRICT_ATTRIBUTES
    __strict__: ClassVar[Optional[bool]] = None

    _fields: ClassVar[Dict[str, SchemaAttribute]] = {}
    _associations: ClassVar[Dict[str, HasMany]] = {}

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls._fields = dict(cls._fields)
        cls._associations = dict(cls._associations)

        for name, value in list(cls.__dict__.items()):
            if isinstance(value, HasMany):
                value.check_binding(cls, name)
                cls._associations[name] = value

        if cls.__primary_key__ not in cls._fields:
            cls.define_schema(cls.__primary_key__)
        schema = cls.__dict__.get("__schema__")
        if schema is not None and not isinstance(schema, (tuple, list)):
            # ("name") without the trailing comma is a str
            raise SchemaDefinitionError(
                cls.__name__, f"__schema__ must be a tuple or list of names, got {type(schema).__name__}"
            )
        if schema:
            cls.define_schema(*schema)

        registry.register(cls)

    # ------------------------------------------------------------------
    # declaration
    # ------------------------------------------------------------------

    @classmethod
    def define_schema(cls, *names: str) -> None:
        """Declare attribute names and install an accessor for each.

        Names already declared are skipped, so repeated calls only ever add.

        Raises:
            SchemaDefinitionError: empty call, duplicate or invalid name, or a
                name that clashes with an existing member of the class
        """
        if not names:
            raise SchemaDefinitionError(cls.__name__, "define_schema requires at least one attribute name")

        seen = set()
        for name in names:
            if (
                not isinstance(name, str)
                or not name.isidentifier()
                or keyword.iskeyword(name)
                or name.startswith("_")
            ):
                raise SchemaDefinitionError(cls.__name__, f"invalid attribute name {name!r}")
            if name in seen:
                raise SchemaDefinitionError(cls.__name__, f"attribute '{name}' listed twice")
            seen.add(name)
            if name not in cls._fields and hasattr(cls, name):
                raise SchemaDefinitionError(cls.__name__, f"attribute '{name}' clashes with an existing member")

        added = [name for name in names if name not in cls._fields]
        for name in added:
            accessor = SchemaAttribute(name)
            cls._fields[name] = accessor
            setattr(cls, name, accessor)

        if added:
            logger.debug(
                f"Schema defined for {cls.__name__}",
                extra={"record_type": cls.__name__, "attributes": added}
            )

    @classmethod
    def add_association(
        cls,
        name: str,
        target: Any = None,
        foreign_key: Optional[str] = None
    ) -> HasMany:
        """Declare a one-to-many association outside the class body."""
        if not isinstance(name, str) or not name.isidentifier() or name.startswith("_"):
            raise SchemaDefinitionError(cls.__name__, f"invalid association name {name!r}")
        if hasattr(cls, name):
            raise SchemaDefinitionError(cls.__name__, f"association '{name}' clashes with an existing member")

        association = HasMany(target, foreign_key=foreign_key)
        setattr(cls, name, association)
        # type.__setattr__ does not call __set_name__
        association.__set_name__(cls, name)
        cls._associations[name] = association
        return association

    @classmethod
    def schema(cls) -> Tuple[str, ...]:
        """Declared attribute names in declaration order."""
        return tuple(cls._fields)

    @classmethod
    def associations(cls) -> Dict[str, HasMany]:
        return dict(cls._associations)

    @classmethod
    def is_strict(cls) -> bool:
        if cls.__strict__ is not None:
            return cls.__strict__
        return settings.STRICT_ATTRIBUTES

    # ------------------------------------------------------------------
    # construction
    # ------------------------------------------------------------------

    def __init__(self, **attributes: Any):
        self._init_state()
        for name, value in attributes.items():
            self.set(name, value)

    def _init_state(self, store: Optional["RowStore"] = None) -> None:
        self._attributes: Dict[str, Any] = {}
        self._association_cache: Dict[str, Tuple["Record", ...]] = {}
        self._store = store
        self._lock = threading.RLock()

    def __getstate__(self) -> Dict[str, Any]:
        # copies and unpickled records are detached from the row store
        return {
            "_attributes": self._attributes,
            "_association_cache": self._association_cache,
        }

    def __setstate__(self, state: Dict[str, Any]) -> None:
        self._init_state()
        self._attributes.update(state["_attributes"])
        self._association_cache.update(state["_association_cache"])

    @classmethod
    def from_row(cls, row: Mapping[str, Any], store: Optional["RowStore"] = None) -> "Record":
        """Build an instance straight from a row store mapping.

        Only the "name is declared" check is applied; values are taken as-is.
        """
        record = cls.__new__(cls)
        record._init_state(store)
        strict = cls.is_strict()
        for name, value in row.items():
            if strict and name not in cls._fields:
                raise UnknownAttributeError(cls.__name__, name)
            record._attributes[name] = value
        return record

    # ------------------------------------------------------------------
    # attribute store
    # ------------------------------------------------------------------

    def get(self, name: str) -> Any:
        """Read an attribute; declared names that were never set read as None."""
        if name in self._fields:
            return self._attributes.get(name)
        if not self.is_strict() and name in self._attributes:
            return self._attributes[name]
        raise UnknownAttributeError(type(self).__name__, name)

    def set(self, name: str, value: Any) -> None:
        if name == self.__primary_key__:
            # waits for an in-flight association load so it cannot cache
            # rows for the old identity under the new one
            with self._lock:
                self._change_identity(value)
                self._attributes[name] = value
        elif name in self._fields:
            self._attributes[name] = value
        elif not self.is_strict():
            self._attributes[name] = value
        else:
            raise UnknownAttributeError(type(self).__name__, name)

    def _change_identity(self, value: Any) -> None:
        current = self._attributes.get(self.__primary_key__)
        if value != current and self._association_cache:
            logger.debug(
                "Identity changed, association cache evicted",
                extra={
                    "record_type": type(self).__name__,
                    "old_id": current,
                    "new_id": value,
                    "associations": list(self._association_cache),
                }
            )
            self._association_cache.clear()

    def __getattr__(self, name: str) -> Any:
        # Only reached when normal lookup fails, i.e. for undeclared names
        if name.startswith("_"):
            raise AttributeError(name)
        return self.get(name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name.startswith("_") or name in self._fields or name in self._associations:
            object.__setattr__(self, name, value)
        else:
            self.set(name, value)

    @property
    def identity(self) -> Any:
        return self._attributes.get(self.__primary_key__)

    def to_dict(self) -> Dict[str, Any]:
        """Copy of the attribute store with every declared name present."""
        data = {name: self._attributes.get(name) for name in self._fields}
        for name, value in self._attributes.items():
            data.setdefault(name, value)
        return data

    # ------------------------------------------------------------------
    # associations
    # ------------------------------------------------------------------

    @property
    def row_store(self) -> Optional["RowStore"]:
        """Store that materialized this record, else the registry default."""
        return self._store if self._store is not None else registry.store

    def bind_store(self, store: Optional["RowStore"]) -> None:
        self._store = store

    def _require_store(self, association: str) -> "RowStore":
        store = self.row_store
        if store is None:
            raise StoreNotConfiguredError(type(self).__name__, association)
        return store

    def reload(self, name: Optional[str] = None) -> "Record":
        """Evict one association's cache entry, or all of them.

        The next access to an evicted association queries the row store again.
        """
        with self._lock:
            if name is None:
                self._association_cache.clear()
            elif name in self._associations:
                self._association_cache.pop(name, None)
            else:
                raise UnknownAssociationError(type(self).__name__, name)
        return self

    def is_loaded(self, name: str) -> bool:
        if name not in self._associations:
            raise UnknownAssociationError(type(self).__name__, name)
        return name in self._association_cache

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.__primary_key__}={self.identity!r}>"
