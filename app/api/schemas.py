"""
Pydantic response models shared by the JSON API routers.

All of them read straight from ORM objects (from_attributes), including the
non-persisted cost fields set by RecipeCostService.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict


class ORMModel(BaseModel):
    model_config = ConfigDict(from_attributes=True)


# --- Ingredients ---


class IngredientOut(ORMModel):
    id: int
    name: str
    type: str
    created_at: Optional[datetime] = None


class DuplicateGroupOut(BaseModel):
    name: str
    count: int
    ids: list[int]


class DuplicateReportOut(BaseModel):
    group_count: int
    groups: list[DuplicateGroupOut]


# --- Prices ---


class PriceOut(ORMModel):
    id: int
    ingredient_id: int
    price: float
    quantity: int
    unit: Optional[str] = None
    date: datetime
    ingredient: Optional[IngredientOut] = None


# --- Recipes ---


class RecipeIngredientOut(ORMModel):
    id: int
    recipe_id: int
    ingredient_id: int
    quantity: str
    unit: Optional[str] = None
    calculated_cost: Optional[float] = None
    ingredient: Optional[IngredientOut] = None


class RecipeOut(ORMModel):
    id: int
    name: str
    total_cost: float = 0.0
    recipe_ingredients: list[RecipeIngredientOut] = []


# --- Cooking sessions ---


class CookingSessionIngredientOut(ORMModel):
    id: int
    ingredient_id: int
    quantity: str
    price: float
    unit: str
    ingredient: Optional[IngredientOut] = None


class CookingSessionOut(ORMModel):
    id: int
    recipe_id: int
    date: datetime
    yield_amount: str
    ingredients: list[CookingSessionIngredientOut] = []
