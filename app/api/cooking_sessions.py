"""API endpoints for cooking sessions."""
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from app.api.schemas import CookingSessionOut
from app.database import get_db
from app.services.cooking_session_service import cooking_session_service

router = APIRouter(prefix="/api/cooking-sessions", tags=["cooking-sessions"])


class CookingSessionIngredientRequest(BaseModel):
    ingredient_id: int
    quantity: str
    price: float = Field(ge=0)
    unit: str


class CookingSessionCreateRequest(BaseModel):
    recipe_id: int
    yield_amount: str
    date: Optional[datetime] = None  # Defaults to now
    ingredients: List[CookingSessionIngredientRequest] = []


@router.post("", response_model=CookingSessionOut, status_code=status.HTTP_201_CREATED)
def create_cooking_session(
    request: CookingSessionCreateRequest, db: Session = Depends(get_db)
):
    try:
        return cooking_session_service.create_session(
            db,
            recipe_id=request.recipe_id,
            yield_amount=request.yield_amount,
            session_date=request.date,
            ingredients=[item.model_dump() for item in request.ingredients],
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@router.get("", response_model=list[CookingSessionOut])
def list_cooking_sessions(db: Session = Depends(get_db)):
    return cooking_session_service.get_sessions(db)
