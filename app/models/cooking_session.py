from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.database import Base


class CookingSession(Base):
    """A batch of a recipe cooked on a given date."""

    __tablename__ = "cooking_sessions"

    id = Column(Integer, primary_key=True)
    recipe_id = Column(Integer, ForeignKey("recipes.id"), nullable=False)
    date = Column(DateTime(timezone=True), nullable=False)
    yield_amount = Column(String(100), nullable=False)  # e.g. "12 portions"
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    recipe = relationship("Recipe", back_populates="cooking_sessions")
    ingredients = relationship(
        "CookingSessionIngredient",
        back_populates="cooking_session",
        cascade="all, delete-orphan",
        order_by="CookingSessionIngredient.id",
    )

    __table_args__ = (
        Index("idx_cooking_sessions_recipe_id", "recipe_id"),
        Index("idx_cooking_sessions_date", "date"),
    )
