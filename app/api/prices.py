"""API endpoints for ingredient prices."""
from datetime import date, datetime
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api.schemas import PriceOut
from app.database import get_db
from app.services.price_service import price_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/prices", tags=["prices"])


class PriceCreateRequest(BaseModel):
    ingredient_id: int
    price: float = Field(ge=0)
    quantity: int = Field(default=1, ge=1)
    unit: Optional[str] = None
    date: Optional[datetime] = None  # Defaults to now


@router.post("", response_model=PriceOut, status_code=status.HTTP_201_CREATED)
def add_price(request: PriceCreateRequest, db: Session = Depends(get_db)):
    """Record a new purchase price for an ingredient."""
    try:
        return price_service.add_price(
            db,
            ingredient_id=request.ingredient_id,
            price=request.price,
            quantity=request.quantity,
            unit=request.unit,
            price_date=request.date,
        )
    except LookupError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except SQLAlchemyError as e:
        logger.error("Failed to add price: %s", e)
        raise HTTPException(status_code=500, detail="Failed to add price")


@router.get("", response_model=list[PriceOut])
def list_prices(
    ingredient_id: Optional[int] = Query(None),
    on_date: Optional[date] = Query(None, alias="date", description="Purchase day, YYYY-MM-DD"),
    sort_column: Optional[str] = Query(None),
    sort_direction: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """
    List prices, newest first by default.

    sort_column (price|quantity|date|unit) and sort_direction (ASC|DESC) are
    only applied when both are valid.
    """
    return price_service.get_prices(
        db,
        ingredient_id=ingredient_id,
        on_date=on_date,
        sort_column=sort_column,
        sort_direction=sort_direction,
    )
