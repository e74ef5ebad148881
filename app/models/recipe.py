from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.database import Base


class Recipe(Base):
    """A recipe; its cost is derived from ingredient prices at read time."""

    __tablename__ = "recipes"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Not persisted, filled in by RecipeCostService
    total_cost = 0.0

    # Relationships
    recipe_ingredients = relationship(
        "RecipeIngredient",
        primaryjoin="and_(Recipe.id == RecipeIngredient.recipe_id, "
        "RecipeIngredient.deleted_at.is_(None))",
        order_by="RecipeIngredient.id",
        viewonly=True,
    )
    cooking_sessions = relationship("CookingSession", back_populates="recipe")
