"""Business logic for ingredient management."""

from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.ingredient import Ingredient


class IngredientService:
    """Service for ingredient-related operations."""

    @staticmethod
    def find_by_name(db: Session, name: str) -> Optional[Ingredient]:
        """Live ingredient with exactly this name (lowest id if there are duplicates)."""
        return (
            db.query(Ingredient)
            .filter(Ingredient.name == name, Ingredient.deleted_at.is_(None))
            .order_by(Ingredient.id)
            .first()
        )

    @staticmethod
    def create_ingredient(db: Session, name: str, type: str) -> Ingredient:
        """
        Create an ingredient with a trimmed name and type.

        Args:
            db: Database session
            name: Display name
            type: Category tag

        Returns:
            Created Ingredient object

        Raises:
            ValueError: if name or type is empty after trimming
            DuplicateIngredientError: if a live ingredient already has this name
        """
        name = (name or "").strip()
        type = (type or "").strip()

        if not name:
            raise ValueError("Name cannot be empty")
        if not type:
            raise ValueError("Type cannot be empty")

        existing = IngredientService.find_by_name(db, name)
        if existing:
            raise DuplicateIngredientError(name, existing.id)

        ingredient = Ingredient(name=name, type=type)
        db.add(ingredient)
        db.commit()
        db.refresh(ingredient)
        return ingredient

    @staticmethod
    def get_ingredient(db: Session, ingredient_id: int) -> Optional[Ingredient]:
        return (
            db.query(Ingredient)
            .filter(Ingredient.id == ingredient_id, Ingredient.deleted_at.is_(None))
            .first()
        )

    @staticmethod
    def get_ingredients(db: Session) -> List[Ingredient]:
        """All live ingredients, by name."""
        return (
            db.query(Ingredient)
            .filter(Ingredient.deleted_at.is_(None))
            .order_by(Ingredient.name, Ingredient.id)
            .all()
        )


# Singleton instance
ingredient_service = IngredientService()


class DuplicateIngredientError(Exception):
    """A live ingredient with this name already exists."""

    def __init__(self, name: str, existing_id: int):
        self.name = name
        self.existing_id = existing_id
        super().__init__(f"Ingredient with this name already exists: {name}")
