"""
Restaurant data model and its keyword index.
"""

from datetime import datetime
from typing import Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import JSON, DateTime, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from eats_catalog.models.base import Base

if TYPE_CHECKING:
    from eats_catalog.models.dish import DishModel


class RestaurantModel(Base):
    """SQLAlchemy ORM model for Restaurant."""

    __tablename__ = "restaurants"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    owner_id: Mapped[int] = mapped_column(Integer, nullable=False, index=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # word -> occurrence count; keys are only present with a count >= 1
    keywords: Mapped[dict] = mapped_column(JSON, default=dict, nullable=False)

    # Optimistic lock for keyword read-modify-write cycles
    version: Mapped[int] = mapped_column(Integer, nullable=False, default=1)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False
    )

    dishes: Mapped[list["DishModel"]] = relationship(
        "DishModel",
        back_populates="restaurant",
        cascade="all, delete-orphan",
        order_by="DishModel.id",
    )

    __mapper_args__ = {"version_id_col": version}

    def __repr__(self) -> str:
        return f"<RestaurantModel(id={self.id}, owner_id={self.owner_id}, name='{self.name}')>"


# Pydantic models for API


class RestaurantCreate(BaseModel):
    """Schema for creating a restaurant."""

    name: Optional[str] = Field(None, max_length=255, description="Restaurant name")
    description: Optional[str] = Field(None, description="Restaurant description")


class RestaurantResponse(BaseModel):
    """Schema for restaurant response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    owner_id: int
    name: str
    description: Optional[str] = None
    keywords: dict[str, int] = Field(default_factory=dict)
    dishes: list["DishResponse"] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime


class BrowseRestaurantsInput(BaseModel):
    """Schema for public restaurant browsing."""

    query: Optional[str] = Field(None, description="Free-text search query")
    limit: Optional[int] = Field(None, description="Page size")
    offset: int = Field(0, description="Page number, zero based")


from eats_catalog.models.dish import DishResponse  # noqa: E402

RestaurantResponse.model_rebuild()
