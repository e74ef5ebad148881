from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.database import Base


class RecipeIngredient(Base):
    """Junction table linking recipes to ingredients with the quantity each recipe needs."""
    __tablename__ = "recipe_ingredients"

    id = Column(Integer, primary_key=True)
    recipe_id = Column(Integer, ForeignKey('recipes.id'), nullable=False)
    ingredient_id = Column(Integer, ForeignKey('ingredients.id'), nullable=False)
    quantity = Column(String(50), nullable=False)  # Free text, may use a decimal comma ("1,5")
    unit = Column(String(20))
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Not persisted, filled in by RecipeCostService
    calculated_cost = None

    # Relationships
    recipe = relationship("Recipe")
    ingredient = relationship("Ingredient", back_populates="recipe_ingredients")

    __table_args__ = (
        Index('idx_recipe_ingredients_recipe_id', 'recipe_id'),
        Index('idx_recipe_ingredients_ingredient_id', 'ingredient_id'),
    )
