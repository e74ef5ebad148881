"""API endpoints for ingredient management."""
import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.api.schemas import DuplicateGroupOut, DuplicateReportOut, IngredientOut
from app.database import get_db
from app.services.consolidation_service import DuplicateConsolidator, ScanFailedError
from app.services.ingredient_service import DuplicateIngredientError, ingredient_service
from app.services.ingredient_store import SqlAlchemyIngredientStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/ingredients", tags=["ingredients"])


# =============================================================================
# Request/Response Models
# =============================================================================

class IngredientCreateRequest(BaseModel):
    name: str
    type: str


# =============================================================================
# Endpoints
# =============================================================================

@router.post("", response_model=IngredientOut, status_code=status.HTTP_201_CREATED)
def create_ingredient(request: IngredientCreateRequest, db: Session = Depends(get_db)):
    """
    Create a new ingredient.

    Returns 409 with the existing ingredient's id if the name is taken.
    """
    try:
        return ingredient_service.create_ingredient(db, request.name, request.type)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except DuplicateIngredientError as e:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail={
                "error": "Ingredient with this name already exists",
                "field": "name",
                "value": e.name,
                "existing_id": e.existing_id,
            },
        )


@router.get("", response_model=list[IngredientOut])
def list_ingredients(db: Session = Depends(get_db)):
    return ingredient_service.get_ingredients(db)


@router.get("/check")
def check_ingredient_exists(name: str = Query(""), db: Session = Depends(get_db)):
    """
    Check whether a live ingredient with this (trimmed) name exists.

    Returns: {"exists": bool, "name": str, "existing_id"?: int, "type"?: str}
    """
    name = name.strip()
    if not name:
        raise HTTPException(status_code=400, detail="Name parameter is required")

    response = {"exists": False, "name": name}
    existing = ingredient_service.find_by_name(db, name)
    if existing:
        response.update(exists=True, existing_id=existing.id, type=existing.type)
    return response


@router.get("/duplicates", response_model=DuplicateReportOut)
def report_duplicates(db: Session = Depends(get_db)):
    """Read-only report of ingredient names shared by several live rows."""
    consolidator = DuplicateConsolidator(SqlAlchemyIngredientStore(db))
    try:
        report = consolidator.check_only()
    except ScanFailedError as e:
        logger.error("Duplicate scan failed: %s", e)
        raise HTTPException(status_code=500, detail="Failed to check duplicates")

    return DuplicateReportOut(
        group_count=report.group_count,
        groups=[
            DuplicateGroupOut(name=g.name, count=g.count, ids=g.ids)
            for g in report.groups
        ],
    )
