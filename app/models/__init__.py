"""
Database models for Kitchen Ledger.

Import all models here so init_db() registers them on Base.metadata.
"""

from app.database import Base
from app.models.ingredient import Ingredient
from app.models.price import Price, PriceUnit
from app.models.recipe import Recipe
from app.models.recipe_ingredient import RecipeIngredient
from app.models.cooking_session import CookingSession
from app.models.cooking_session_ingredient import CookingSessionIngredient

__all__ = [
    "Base",
    "Ingredient",
    "Price",
    "PriceUnit",
    "Recipe",
    "RecipeIngredient",
    "CookingSession",
    "CookingSessionIngredient",
]
