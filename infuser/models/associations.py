"""One-to-many associations loaded on first access and cached per instance."""

import logging
from typing import Any, Optional, Tuple, Type, Union

import inflection

from infuser.models.registry import registry
from infuser.services.exceptions import SchemaDefinitionError, UnresolvedOwnerError


class HasMany:
    """Descriptor for a one-to-many association.

    Reading the attribute on an instance returns a tuple of target records.
    The first read queries the owner's row store for every target row whose
    foreign key equals the owner's identifier; the result is kept on the
    instance until ``reload()`` or an identity change evicts it. Rows added to
    or removed from the store afterwards are not seen until then.
    """

    def __init__(self, target: Union[str, Type[Any], None] = None, *, foreign_key: Optional[str] = None):
        self._target = target
        self._foreign_key = foreign_key
        self.name: Optional[str] = None
        self.owner: Optional[type] = None
        self.logger = logging.getLogger(self.__class__.__name__)

    def __set_name__(self, owner: type, name: str) -> None:
        # first binding wins; Record.__init_subclass__ rejects any rebinding
        if self.owner is None:
            self.name = name
            self.owner = owner

    def check_binding(self, owner: type, name: str) -> None:
        if self.owner is not owner or self.name != name:
            bound = f"{self.owner.__name__}.{self.name}" if self.owner is not None else "nothing"
            raise SchemaDefinitionError(
                owner.__name__, f"association '{name}' is already bound to {bound}"
            )

    @property
    def target_name(self) -> str:
        if isinstance(self._target, type):
            return self._target.__name__
        if self._target:
            return self._target
        return inflection.camelize(inflection.singularize(self.name))

    @property
    def target(self) -> type:
        """Target record type, resolved through the registry on demand."""
        return registry.resolve(self._target if isinstance(self._target, type) else self.target_name)

    @property
    def foreign_key(self) -> str:
        if self._foreign_key:
            return self._foreign_key
        return f"{inflection.underscore(self.owner.__name__)}_id"

    def __get__(self, instance, owner):
        if instance is None:
            return self
        return self.load(instance)

    def __set__(self, instance, value):
        raise AttributeError(f"association '{self.name}' is read-only; call reload() to refresh it")

    def load(self, instance) -> Tuple[Any, ...]:
        cache = instance._association_cache
        if self.name in cache:
            return cache[self.name]

        with instance._lock:
            # another thread may have populated the slot while we waited
            if self.name in cache:
                return cache[self.name]

            owner_id = instance.identity
            if owner_id is None:
                raise UnresolvedOwnerError(
                    type(instance).__name__, self.name, instance.__primary_key__
                )

            target = self.target
            store = instance._require_store(self.name)
            rows = store.fetch(target, {self.foreign_key: owner_id})
            records = tuple(store.materialize(target, row) for row in rows)

            cache[self.name] = records
            self.logger.info(
                f"Association loaded: {type(instance).__name__}.{self.name}",
                extra={
                    "record_type": type(instance).__name__,
                    "association": self.name,
                    "target": target.__name__,
                    "foreign_key": self.foreign_key,
                    "owner_id": owner_id,
                    "count": len(records),
                }
            )
            return records

    def __repr__(self) -> str:
        return f"HasMany({self.target_name!r}, foreign_key={self._foreign_key!r})"


def has_many(target: Union[str, Type[Any], None] = None, *, foreign_key: Optional[str] = None) -> HasMany:
    """Declare a one-to-many association in a record class body.

    Args:
        target: Target record type or its class name; defaults to the
            camelized singular of the attribute name
        foreign_key: Attribute on the target holding the owner's identifier;
            defaults to ``<owner_type>_id``
    """
    return HasMany(target, foreign_key=foreign_key)
