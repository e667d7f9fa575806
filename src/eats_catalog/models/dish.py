"""
Dish data model.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eats_catalog.models.base import Base

if TYPE_CHECKING:
    from eats_catalog.models.restaurant import RestaurantModel


class DishModel(Base):
    """SQLAlchemy ORM model for Dish."""

    __tablename__ = "dishes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    restaurant_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("restaurants.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    price: Mapped[float] = mapped_column(Numeric(10, 2, asdecimal=False), nullable=False)
    photo: Mapped[Optional[str]] = mapped_column(String(2048), nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    restaurant: Mapped["RestaurantModel"] = relationship("RestaurantModel", back_populates="dishes")

    def __repr__(self) -> str:
        return f"<DishModel(id={self.id}, restaurant_id={self.restaurant_id}, name='{self.name}')>"


# Pydantic models for API


class DishCreate(BaseModel):
    """Schema for adding a dish to a restaurant.

    Required fields are optional here so the add-dish workflow can report
    them as a bad request instead of a schema error.
    """

    restaurant_id: Optional[int] = Field(None, description="Parent restaurant ID")
    name: Optional[str] = Field(None, max_length=255, description="Dish name")
    description: Optional[str] = Field(None, description="Dish description")
    price: Optional[float] = Field(None, ge=0, description="Dish price")
    photo: Optional[str] = Field(None, max_length=2048, description="Photo URL")


class DishUpdate(BaseModel):
    """Schema for updating a dish."""

    id: int
    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    photo: Optional[str] = Field(None, max_length=2048)


class DishDelete(BaseModel):
    """Schema for deleting a dish."""

    id: int


class DishResponse(BaseModel):
    """Schema for dish response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    restaurant_id: int
    name: str
    description: Optional[str] = None
    price: float
    photo: Optional[str] = None
    created_at: datetime
    updated_at: datetime
