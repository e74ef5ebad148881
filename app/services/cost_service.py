"""
Ingredient cost calculation.

compute_cost() turns a purchase record (price paid for N units) and a recipe
line (free-text quantity in some unit) into the money that line costs.
RecipeCostService applies it to every line of a recipe using the latest
price of each ingredient.
"""

import logging
import math
import re
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from app.models.price import Price, PriceUnit
from app.models.recipe import Recipe

logger = logging.getLogger(__name__)

# (purchased unit, needed unit) -> how many needed units one purchased unit holds
_SCALE_FACTORS = {
    (PriceUnit.KILOGRAM, PriceUnit.GRAM): 1000,
    (PriceUnit.GRAM, PriceUnit.GRAM): 1,
    (PriceUnit.LITER, PriceUnit.MILLILITER): 1000,
    (PriceUnit.MILLILITER, PriceUnit.MILLILITER): 1,
}

# Plain decimal/scientific literal; float() alone would also accept padding, "1_000" and "nan"
_NUMBER_RE = re.compile(r"[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?")


def parse_quantity(raw: str) -> float:
    """
    Parse a human-entered quantity, accepting a decimal comma ("1,5").

    Only the first comma is replaced, so "1,5,0" is rejected. Values that
    overflow a float ("1e400") are rejected too.

    Raises:
        InvalidQuantityError: if the string is not a number
    """
    if raw is None:
        raise InvalidQuantityError(raw)

    normalized = raw.replace(",", ".", 1)
    if not _NUMBER_RE.fullmatch(normalized):
        raise InvalidQuantityError(raw)
    value = float(normalized)
    if not math.isfinite(value):
        raise InvalidQuantityError(raw)
    return value


def compute_cost(
    unit_price: float,
    purchased_quantity: int,
    purchased_unit: str,
    needed_quantity: str,
    needed_unit: str,
) -> float:
    """
    Cost of `needed_quantity` `needed_unit` given `unit_price` paid for
    `purchased_quantity` `purchased_unit`.

    kg->g and l->ml are scaled by 1000. Any pair outside the mass/volume
    table is priced per purchased unit with no conversion.

    Raises:
        InvalidPurchaseQuantityError: if purchased_quantity is not positive
        InvalidQuantityError: if needed_quantity cannot be parsed
        CostCalculationError: if the cost overflows a float
    """
    quantity = parse_quantity(needed_quantity)

    if purchased_quantity is None or purchased_quantity <= 0:
        raise InvalidPurchaseQuantityError(purchased_quantity)

    scale = _SCALE_FACTORS.get((purchased_unit, needed_unit), 1)
    per_unit_price = unit_price / (purchased_quantity * scale)

    cost = per_unit_price * quantity
    if not math.isfinite(cost):
        raise CostCalculationError(f"cost out of range for quantity {needed_quantity!r}")
    return cost


def latest_price(db: Session, ingredient_id: int) -> Optional[Price]:
    """Most recent live price for an ingredient, by purchase date."""
    return (
        db.query(Price)
        .filter(Price.ingredient_id == ingredient_id, Price.deleted_at.is_(None))
        .order_by(Price.date.desc(), Price.id.desc())
        .first()
    )


class RecipeCostService:
    """Attaches computed costs to recipes for display."""

    @staticmethod
    def apply_costs(db: Session, recipe: Recipe) -> float:
        """
        Fill in calculated_cost on each recipe line and total_cost on the recipe.

        Lines without a price or with a quantity that cannot be costed are left
        at None and do not contribute to the total.

        Returns:
            The recipe total
        """
        total = 0.0
        for line in recipe.recipe_ingredients:
            line.calculated_cost = None

            price = latest_price(db, line.ingredient_id)
            if price is None:
                continue

            try:
                cost = compute_cost(
                    price.price, price.quantity, price.unit, line.quantity, line.unit
                )
            except CostCalculationError as e:
                logger.warning(
                    "Skipping cost for recipe %s line %s: %s", recipe.id, line.id, e
                )
                continue

            line.calculated_cost = cost
            total += cost

        recipe.total_cost = total
        return total

    @staticmethod
    def apply_costs_to_all(db: Session, recipes: Iterable[Recipe]) -> List[Recipe]:
        """Apply costs to several recipes, returning them as a list."""
        recipes = list(recipes)
        for recipe in recipes:
            RecipeCostService.apply_costs(db, recipe)
        return recipes


# Singleton instance
recipe_cost_service = RecipeCostService()


# =============================================================================
# CUSTOM EXCEPTIONS
# =============================================================================


class CostCalculationError(ValueError):
    """A recipe line cannot be costed."""

    pass


class InvalidQuantityError(CostCalculationError):
    """Recipe quantity is not a number."""

    def __init__(self, raw):
        self.raw = raw
        super().__init__(f"invalid recipe quantity: {raw!r}")


class InvalidPurchaseQuantityError(CostCalculationError):
    """Price record has a non-positive purchased quantity."""

    def __init__(self, quantity):
        self.quantity = quantity
        super().__init__(f"purchased quantity must be positive, got {quantity!r}")
