"""API endpoints for recipes and recipe ingredients."""
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.schemas import RecipeIngredientOut, RecipeOut
from app.database import get_db
from app.services.recipe_service import recipe_service

router = APIRouter(prefix="/api/recipes", tags=["recipes"])


# =============================================================================
# Request/Response Models
# =============================================================================

class RecipeCreateRequest(BaseModel):
    name: str


class RecipeIngredientCreateRequest(BaseModel):
    ingredient_id: int
    quantity: str  # Kept as entered, e.g. "1,5"
    unit: Optional[str] = None


# =============================================================================
# Recipes
# =============================================================================

@router.get("", response_model=list[RecipeOut])
def list_recipes(
    recipe_id: Optional[int] = Query(None),
    ingredient_id: Optional[int] = Query(None),
    db: Session = Depends(get_db),
):
    """
    List recipes with per-line and total costs from the latest prices.

    Lines whose cost cannot be computed are returned with calculated_cost null
    and left out of total_cost.
    """
    return recipe_service.get_recipes(db, recipe_id=recipe_id, ingredient_id=ingredient_id)


@router.get("/{recipe_id}", response_model=RecipeOut)
def get_recipe(recipe_id: int, db: Session = Depends(get_db)):
    recipe = recipe_service.get_recipe(db, recipe_id)
    if not recipe:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return recipe


@router.post("", response_model=RecipeOut, status_code=status.HTTP_201_CREATED)
def create_recipe(request: RecipeCreateRequest, db: Session = Depends(get_db)):
    try:
        return recipe_service.create_recipe(db, request.name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.delete("/{recipe_id}")
def delete_recipe(recipe_id: int, db: Session = Depends(get_db)):
    if not recipe_service.delete_recipe(db, recipe_id):
        raise HTTPException(status_code=404, detail="Recipe not found")
    return {"message": "Recipe deleted successfully"}


# =============================================================================
# Recipe ingredients
# =============================================================================

@router.post(
    "/{recipe_id}/ingredients",
    response_model=RecipeIngredientOut,
    status_code=status.HTTP_201_CREATED,
)
def add_ingredient_to_recipe(
    recipe_id: int,
    request: RecipeIngredientCreateRequest,
    db: Session = Depends(get_db),
):
    try:
        line = recipe_service.add_ingredient_to_recipe(
            db,
            recipe_id=recipe_id,
            ingredient_id=request.ingredient_id,
            quantity=request.quantity,
            unit=request.unit,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    if line is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return line


@router.delete("/{recipe_id}/ingredients/{ingredient_id}")
def remove_ingredient_from_recipe(
    recipe_id: int, ingredient_id: int, db: Session = Depends(get_db)
):
    removed = recipe_service.remove_ingredient_from_recipe(db, recipe_id, ingredient_id)
    if removed is None:
        raise HTTPException(status_code=404, detail="Recipe not found")
    return {"message": "Ingredient deleted from recipe successfully"}
