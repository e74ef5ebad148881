"""Business logic for recipes and their ingredient lines."""

from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy.orm import Session, selectinload

from app.models.ingredient import Ingredient
from app.models.recipe import Recipe
from app.models.recipe_ingredient import RecipeIngredient
from app.services.cost_service import RecipeCostService


class RecipeService:
    """Service for recipe-related operations."""

    @staticmethod
    def _live_recipes(db: Session):
        return (
            db.query(Recipe)
            .options(
                selectinload(Recipe.recipe_ingredients).joinedload(RecipeIngredient.ingredient)
            )
            .filter(Recipe.deleted_at.is_(None))
        )

    @staticmethod
    def create_recipe(db: Session, name: str) -> Recipe:
        name = (name or "").strip()
        if not name:
            raise ValueError("Name cannot be empty")

        recipe = Recipe(name=name)
        db.add(recipe)
        db.commit()
        db.refresh(recipe)
        return recipe

    @staticmethod
    def get_recipe(db: Session, recipe_id: int, with_costs: bool = True) -> Optional[Recipe]:
        """Get a live recipe by ID, with line and total costs filled in."""
        recipe = RecipeService._live_recipes(db).filter(Recipe.id == recipe_id).first()
        if recipe and with_costs:
            RecipeCostService.apply_costs(db, recipe)
        return recipe

    @staticmethod
    def get_recipes(
        db: Session,
        recipe_id: Optional[int] = None,
        ingredient_id: Optional[int] = None,
    ) -> List[Recipe]:
        """
        List live recipes with costs filled in.

        Args:
            db: Database session
            recipe_id: Only this recipe
            ingredient_id: Only recipes with a live line using this ingredient

        Returns:
            Recipes ordered by id
        """
        query = RecipeService._live_recipes(db)

        if recipe_id is not None:
            query = query.filter(Recipe.id == recipe_id)
        if ingredient_id is not None:
            query = query.filter(
                Recipe.id.in_(
                    db.query(RecipeIngredient.recipe_id).filter(
                        RecipeIngredient.ingredient_id == ingredient_id,
                        RecipeIngredient.deleted_at.is_(None),
                    )
                )
            )

        recipes = query.order_by(Recipe.id).all()
        return RecipeCostService.apply_costs_to_all(db, recipes)

    @staticmethod
    def delete_recipe(db: Session, recipe_id: int) -> bool:
        """
        Soft-delete a recipe.

        Returns:
            True if deleted, False if not found
        """
        recipe = (
            db.query(Recipe)
            .filter(Recipe.id == recipe_id, Recipe.deleted_at.is_(None))
            .first()
        )
        if not recipe:
            return False

        recipe.deleted_at = datetime.now(timezone.utc)
        db.commit()
        return True

    @staticmethod
    def add_ingredient_to_recipe(
        db: Session,
        recipe_id: int,
        ingredient_id: int,
        quantity: str,
        unit: Optional[str] = None,
    ) -> Optional[RecipeIngredient]:
        """
        Add an ingredient line to a recipe.

        The quantity is stored as entered; it is only parsed when costing.

        Returns:
            Created RecipeIngredient, or None if the recipe does not exist

        Raises:
            LookupError: if the ingredient does not exist
            ValueError: if quantity is empty
        """
        recipe = (
            db.query(Recipe)
            .filter(Recipe.id == recipe_id, Recipe.deleted_at.is_(None))
            .first()
        )
        if not recipe:
            return None

        quantity = (quantity or "").strip()
        if not quantity:
            raise ValueError("Quantity cannot be empty")

        ingredient = (
            db.query(Ingredient)
            .filter(Ingredient.id == ingredient_id, Ingredient.deleted_at.is_(None))
            .first()
        )
        if not ingredient:
            raise LookupError(f"Ingredient {ingredient_id} not found")

        line = RecipeIngredient(
            recipe_id=recipe_id,
            ingredient_id=ingredient_id,
            quantity=quantity,
            unit=unit,
        )
        db.add(line)
        db.commit()
        db.refresh(line)
        return line

    @staticmethod
    def remove_ingredient_from_recipe(
        db: Session, recipe_id: int, ingredient_id: int
    ) -> Optional[int]:
        """
        Soft-delete every line of a recipe that uses the given ingredient.

        Returns:
            Number of lines removed, or None if the recipe does not exist
        """
        recipe = (
            db.query(Recipe)
            .filter(Recipe.id == recipe_id, Recipe.deleted_at.is_(None))
            .first()
        )
        if not recipe:
            return None

        removed = (
            db.query(RecipeIngredient)
            .filter(
                RecipeIngredient.recipe_id == recipe_id,
                RecipeIngredient.ingredient_id == ingredient_id,
                RecipeIngredient.deleted_at.is_(None),
            )
            .update(
                {RecipeIngredient.deleted_at: datetime.now(timezone.utc)},
                synchronize_session=False,
            )
        )
        db.commit()
        return removed


# Singleton instance
recipe_service = RecipeService()
