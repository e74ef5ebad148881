from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.database import Base


class CookingSessionIngredient(Base):
    """Ingredient actually consumed by a cooking session, priced at the time of cooking."""
    __tablename__ = "cooking_session_ingredients"

    id = Column(Integer, primary_key=True)
    cooking_session_id = Column(
        Integer, ForeignKey('cooking_sessions.id', ondelete='CASCADE'), nullable=False
    )
    ingredient_id = Column(Integer, ForeignKey('ingredients.id'), nullable=False)
    quantity = Column(String(50), nullable=False)
    price = Column(Float, nullable=False)
    unit = Column(String(20), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    cooking_session = relationship("CookingSession", back_populates="ingredients")
    ingredient = relationship("Ingredient", back_populates="cooking_session_ingredients")

    __table_args__ = (
        Index('idx_cooking_session_ingredients_session_id', 'cooking_session_id'),
        Index('idx_cooking_session_ingredients_ingredient_id', 'ingredient_id'),
    )
