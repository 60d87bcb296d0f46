"""
Base repository interface for data access layer.
This follows the Repository pattern to separate business logic from data access.
"""

from typing import Generic, TypeVar, Optional, Type, Mapping, Sequence, Any
from uuid import UUID
from sqlalchemy.orm import Session
from sqlalchemy.sql import func
from sqlalchemy.dialects import postgresql, sqlite
from abc import ABC

ModelType = TypeVar("ModelType")


class BaseRepository(Generic[ModelType], ABC):
    """
    Base repository providing keyed lookup and atomic upserts.
    All repositories should inherit from this class.
    """

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, entity_id: UUID) -> Optional[ModelType]:
        """
        Get entity by ID.

        Note: This is a fallback implementation. Subclasses should override
        this method with their specific ID field (period_id, reservation_id, etc.)

        Args:
            entity_id: Entity UUID

        Returns:
            Entity or None if not found
        """
        raise NotImplementedError(
            f"{self.__class__.__name__} must implement get_by_id() with specific ID field"
        )

    # ------------------------------------------------------------------
    # Atomic upsert
    # ------------------------------------------------------------------

    def _insert(self):
        """Dialect-specific INSERT construct supporting ON CONFLICT"""
        dialect = self.db.get_bind().dialect.name
        if dialect == "postgresql":
            return postgresql.insert(self.model)
        if dialect == "sqlite":
            return sqlite.insert(self.model)
        raise NotImplementedError(f"Upsert is not supported on dialect '{dialect}'")

    def upsert(
        self,
        values: Mapping[str, Any],
        conflict_columns: Sequence[str],
        update_columns: Sequence[str] = (),
        increment_columns: Sequence[str] = (),
        commit: bool = True,
    ) -> int:
        """
        Insert a row or resolve a unique-key conflict in a single statement.

        The store decides the outcome atomically, so concurrent writers on the
        same key end with exactly one row (last writer wins).

        Args:
            values: Column values for the insert
            conflict_columns: Columns of the unique key the conflict is detected on
            update_columns: Columns overwritten with the incoming value on conflict
            increment_columns: Columns incremented by the incoming value on conflict

            commit: Commit immediately; pass False to join a larger transaction

        When both update lists are empty the conflict is ignored (insert-if-absent).

        Returns:
            Number of rows inserted or updated (0 when a conflict was ignored)
        """
        stmt = self._insert().values(**values)
        table = self.model.__table__

        set_ = {name: stmt.excluded[name] for name in update_columns}
        for name in increment_columns:
            set_[name] = table.c[name] + stmt.excluded[name]

        if set_:
            if "updated_at" in table.c:
                set_["updated_at"] = func.now()
            stmt = stmt.on_conflict_do_update(index_elements=list(conflict_columns), set_=set_)
        else:
            stmt = stmt.on_conflict_do_nothing(index_elements=list(conflict_columns))

        result = self.db.execute(stmt)
        if commit:
            self.db.commit()
        return result.rowcount
