"""Business logic for cooking sessions."""

from datetime import datetime, timezone
from typing import Dict, List, Optional

from sqlalchemy.orm import Session, selectinload

from app.models.cooking_session import CookingSession
from app.models.cooking_session_ingredient import CookingSessionIngredient
from app.models.ingredient import Ingredient
from app.models.recipe import Recipe


class CookingSessionService:
    """Service for cooking session operations."""

    @staticmethod
    def create_session(
        db: Session,
        recipe_id: int,
        yield_amount: str,
        session_date: Optional[datetime] = None,
        ingredients: Optional[List[Dict]] = None,
    ) -> CookingSession:
        """
        Record a cooking session with the ingredients it consumed.

        Args:
            db: Database session
            recipe_id: Recipe that was cooked
            yield_amount: Free-text yield (e.g. "12 portions")
            session_date: When it was cooked (defaults to now)
            ingredients: [{"ingredient_id", "quantity", "price", "unit"}, ...]

        Returns:
            Created CookingSession with ingredients loaded

        Raises:
            LookupError: if the recipe or an ingredient does not exist
            ValueError: if yield_amount is empty
        """
        yield_amount = (yield_amount or "").strip()
        if not yield_amount:
            raise ValueError("Yield cannot be empty")

        recipe = (
            db.query(Recipe)
            .filter(Recipe.id == recipe_id, Recipe.deleted_at.is_(None))
            .first()
        )
        if not recipe:
            raise LookupError(f"Recipe {recipe_id} not found")

        session = CookingSession(
            recipe_id=recipe_id,
            yield_amount=yield_amount,
            date=session_date or datetime.now(timezone.utc),
        )

        for item in ingredients or []:
            exists = (
                db.query(Ingredient.id)
                .filter(
                    Ingredient.id == item["ingredient_id"],
                    Ingredient.deleted_at.is_(None),
                )
                .first()
            )
            if not exists:
                raise LookupError(f"Ingredient {item['ingredient_id']} not found")

            session.ingredients.append(
                CookingSessionIngredient(
                    ingredient_id=item["ingredient_id"],
                    quantity=item["quantity"],
                    price=item["price"],
                    unit=item["unit"],
                )
            )

        db.add(session)
        db.commit()
        db.refresh(session)
        return session

    @staticmethod
    def get_sessions(db: Session) -> List[CookingSession]:
        """All live cooking sessions, newest first."""
        return (
            db.query(CookingSession)
            .options(
                selectinload(CookingSession.ingredients).joinedload(
                    CookingSessionIngredient.ingredient
                )
            )
            .filter(CookingSession.deleted_at.is_(None))
            .order_by(CookingSession.date.desc(), CookingSession.id.desc())
            .all()
        )


# Singleton instance
cooking_session_service = CookingSessionService()
