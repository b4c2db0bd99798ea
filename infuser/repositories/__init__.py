from infuser.repositories.base import RowStore
from infuser.repositories.memory import InMemoryRowStore
from infuser.repositories.sqlalchemy_store import SQLAlchemyRowStore

__all__ = ["RowStore", "InMemoryRowStore", "SQLAlchemyRowStore"]
