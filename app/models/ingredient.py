from sqlalchemy import Column, Integer, String, DateTime, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.database import Base


class Ingredient(Base):
    """Purchasable raw material, identified by its display name."""
    __tablename__ = "ingredients"

    id = Column(Integer, primary_key=True)
    # Intended to be unique among live rows; only the API enforces it
    name = Column(String(255), nullable=False)
    type = Column(String(100), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    prices = relationship("Price", back_populates="ingredient")
    recipe_ingredients = relationship("RecipeIngredient", back_populates="ingredient")
    cooking_session_ingredients = relationship(
        "CookingSessionIngredient", back_populates="ingredient"
    )

    __table_args__ = (
        Index('idx_ingredients_name', 'name'),
        Index('idx_ingredients_deleted_at', 'deleted_at'),
    )

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def __repr__(self):
        return f"<Ingredient(id={self.id}, name={self.name!r})>"
