"""Business logic for ingredient price records."""

from datetime import date, datetime, time, timedelta, timezone
from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from app.models.ingredient import Ingredient
from app.models.price import Price


class PriceService:
    """Service for price-related operations."""

    SORT_COLUMNS = {
        "price": Price.price,
        "quantity": Price.quantity,
        "date": Price.date,
        "unit": Price.unit,
    }
    SORT_DIRECTIONS = {"ASC", "DESC"}

    @staticmethod
    def add_price(
        db: Session,
        ingredient_id: int,
        price: float,
        quantity: int = 1,
        unit: Optional[str] = None,
        price_date: Optional[datetime] = None,
    ) -> Price:
        """
        Record a purchase price for an ingredient.

        Args:
            db: Database session
            ingredient_id: Ingredient the price belongs to
            price: Amount paid
            quantity: Number of units purchased (>= 1)
            unit: Purchase unit (kg, g, l, ml, ...)
            price_date: Purchase date (defaults to now)

        Returns:
            Created Price object

        Raises:
            LookupError: if the ingredient does not exist
            ValueError: if price is negative or quantity is not positive
        """
        if price < 0:
            raise ValueError("Price cannot be negative")
        if quantity < 1:
            raise ValueError("Quantity must be at least 1")

        ingredient = (
            db.query(Ingredient)
            .filter(Ingredient.id == ingredient_id, Ingredient.deleted_at.is_(None))
            .first()
        )
        if not ingredient:
            raise LookupError(f"Ingredient {ingredient_id} not found")

        record = Price(
            ingredient_id=ingredient_id,
            price=price,
            quantity=quantity,
            unit=unit,
            date=price_date or datetime.now(timezone.utc),
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    @staticmethod
    def get_prices(
        db: Session,
        ingredient_id: Optional[int] = None,
        on_date: Optional[date] = None,
        sort_column: Optional[str] = None,
        sort_direction: Optional[str] = None,
    ) -> List[Price]:
        """
        List live prices, optionally filtered by ingredient and purchase day.

        Sorting falls back to newest first unless both sort_column and
        sort_direction are recognised.
        """
        query = (
            db.query(Price)
            .options(joinedload(Price.ingredient))
            .filter(Price.deleted_at.is_(None))
        )

        if ingredient_id is not None:
            query = query.filter(Price.ingredient_id == ingredient_id)
        if on_date is not None:
            day_start = datetime.combine(on_date, time.min)
            query = query.filter(
                Price.date >= day_start, Price.date < day_start + timedelta(days=1)
            )

        column = PriceService.SORT_COLUMNS.get(sort_column)
        if column is not None and sort_direction in PriceService.SORT_DIRECTIONS:
            query = query.order_by(column.asc() if sort_direction == "ASC" else column.desc())
        else:
            query = query.order_by(Price.date.desc())

        return query.all()


# Singleton instance
price_service = PriceService()
