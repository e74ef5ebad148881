"""
Persistence interface used by the duplicate-ingredient consolidator.

The consolidator only talks to an IngredientStore, which keeps it independent
of the session the caller happens to hold and lets tests swap in an
in-memory store.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import List, Optional, Sequence

from sqlalchemy import func, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session as DBSession, SessionTransaction

from app.models import CookingSessionIngredient, Ingredient, Price, RecipeIngredient


# Tables holding an ingredient_id that must follow a merged ingredient
RECIPE_INGREDIENTS = "recipe_ingredients"
PRICES = "prices"
COOKING_SESSION_INGREDIENTS = "cooking_session_ingredients"

REFERENCING_TABLES = (RECIPE_INGREDIENTS, PRICES, COOKING_SESSION_INGREDIENTS)


@dataclass
class DuplicateGroup:
    """Live ingredients sharing one exact name."""

    name: str
    count: int
    ids: List[int] = field(default_factory=list)


class StoreError(Exception):
    """The underlying store rejected or failed an operation."""

    pass


class IngredientStore(ABC):
    """
    Abstract store for duplicate detection and merging.

    Mutating methods are only valid between begin() and commit()/rollback().
    Implementations raise StoreError for store-level failures.
    """

    @abstractmethod
    def find_ingredients_grouped_by_name(self) -> List[DuplicateGroup]:
        """
        Return every name shared by more than one live ingredient.

        Names are compared exactly. Groups are ordered by count descending,
        then name; ids within a group are ascending.
        """
        pass

    @abstractmethod
    def find_ingredients_by_name(self, name: str) -> List[Ingredient]:
        """Return live ingredients with exactly this name, ordered by id."""
        pass

    @abstractmethod
    def update_foreign_key(
        self,
        table: str,
        old_ids: Sequence[int],
        new_id: int,
        id_column: str = "ingredient_id",
    ) -> int:
        """Point every row of `table` referencing one of old_ids at new_id. Returns rows changed."""
        pass

    @abstractmethod
    def delete_ingredients(self, ids: Sequence[int]) -> int:
        """Soft-delete the given ingredients. Returns rows changed."""
        pass

    @abstractmethod
    def begin(self) -> None:
        pass

    @abstractmethod
    def commit(self) -> None:
        pass

    @abstractmethod
    def rollback(self) -> None:
        pass


class SqlAlchemyIngredientStore(IngredientStore):
    """
    IngredientStore over a SQLAlchemy session.

    The merge transaction is a SAVEPOINT inside the session's transaction:
    rollback() discards only the merge work, commit() releases the savepoint
    and commits the session.
    """

    MODELS = {
        RECIPE_INGREDIENTS: RecipeIngredient,
        PRICES: Price,
        COOKING_SESSION_INGREDIENTS: CookingSessionIngredient,
    }

    def __init__(self, db: DBSession, statement_timeout_ms: int = 0):
        self.db = db
        self.statement_timeout_ms = statement_timeout_ms
        self._transaction: Optional[SessionTransaction] = None

    def find_ingredients_grouped_by_name(self) -> List[DuplicateGroup]:
        count = func.count(Ingredient.id)
        try:
            rows = (
                self.db.query(Ingredient.name, count.label("count"))
                .filter(Ingredient.deleted_at.is_(None))
                .group_by(Ingredient.name)
                .having(count > 1)
                .order_by(count.desc(), Ingredient.name)
                .all()
            )

            groups = [DuplicateGroup(name=name, count=n) for name, n in rows]
            if not groups:
                return groups

            by_name = {group.name: group for group in groups}
            id_rows = (
                self.db.query(Ingredient.id, Ingredient.name)
                .filter(
                    Ingredient.name.in_(list(by_name)),
                    Ingredient.deleted_at.is_(None),
                )
                .order_by(Ingredient.id)
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreError(f"failed to find duplicate groups: {e}") from e

        for ingredient_id, name in id_rows:
            by_name[name].ids.append(ingredient_id)
        return groups

    def find_ingredients_by_name(self, name: str) -> List[Ingredient]:
        try:
            return (
                self.db.query(Ingredient)
                .filter(Ingredient.name == name, Ingredient.deleted_at.is_(None))
                .order_by(Ingredient.id)
                .all()
            )
        except SQLAlchemyError as e:
            raise StoreError(f"failed to find ingredients named {name!r}: {e}") from e

    def update_foreign_key(
        self,
        table: str,
        old_ids: Sequence[int],
        new_id: int,
        id_column: str = "ingredient_id",
    ) -> int:
        model = self.MODELS.get(table)
        if model is None:
            raise ValueError(f"Unknown referencing table: {table}")
        column = getattr(model, id_column)

        try:
            return (
                self.db.query(model)
                .filter(column.in_(list(old_ids)))
                .update({column: new_id}, synchronize_session=False)
            )
        except SQLAlchemyError as e:
            raise StoreError(f"failed to update {table}: {e}") from e

    def delete_ingredients(self, ids: Sequence[int]) -> int:
        try:
            return (
                self.db.query(Ingredient)
                .filter(Ingredient.id.in_(list(ids)), Ingredient.deleted_at.is_(None))
                .update(
                    {Ingredient.deleted_at: datetime.now(timezone.utc)},
                    synchronize_session=False,
                )
            )
        except SQLAlchemyError as e:
            raise StoreError(f"failed to delete ingredients: {e}") from e

    def begin(self) -> None:
        try:
            self._transaction = self.db.begin_nested()
            if self.statement_timeout_ms and self.db.get_bind().dialect.name == "postgresql":
                # SET LOCAL lasts until the enclosing transaction ends
                self.db.execute(
                    text(f"SET LOCAL statement_timeout = {int(self.statement_timeout_ms)}")
                )
        except SQLAlchemyError as e:
            raise StoreError(f"failed to begin transaction: {e}") from e

    def commit(self) -> None:
        try:
            self._transaction.commit()
            self.db.commit()
        except SQLAlchemyError as e:
            raise StoreError(f"failed to commit transaction: {e}") from e
        self._transaction = None

    def rollback(self) -> None:
        transaction, self._transaction = self._transaction, None
        try:
            if transaction is not None and transaction.is_active:
                transaction.rollback()
            else:
                self.db.rollback()
        finally:
            # Bulk updates bypass the identity map
            self.db.expire_all()
