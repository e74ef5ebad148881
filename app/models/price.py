from sqlalchemy import Column, Integer, String, DateTime, Float, ForeignKey, Index
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from app.database import Base


class PriceUnit:
    """Purchase units with a known scale relationship to recipe units."""
    KILOGRAM = "kg"
    GRAM = "g"
    LITER = "l"
    MILLILITER = "ml"


class Price(Base):
    """Historical purchase price for an ingredient."""
    __tablename__ = "prices"

    id = Column(Integer, primary_key=True)
    ingredient_id = Column(Integer, ForeignKey('ingredients.id'), nullable=False)
    price = Column(Float, nullable=False)  # Amount paid for `quantity` units
    quantity = Column(Integer, nullable=False, default=1)  # Number of `unit`s purchased
    unit = Column(String(20))  # kg, g, l, ml or any other free-form unit
    date = Column(DateTime(timezone=True), nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    deleted_at = Column(DateTime(timezone=True), nullable=True)

    # Relationships
    ingredient = relationship("Ingredient", back_populates="prices")

    __table_args__ = (
        Index('idx_prices_ingredient_id', 'ingredient_id'),
        Index('idx_prices_date', 'date'),
    )
