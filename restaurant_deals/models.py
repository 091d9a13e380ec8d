"""
Persistence and response models for restaurant deals.
Uses SQLModel for database ORM and Pydantic for API responses.
"""

from datetime import time
from typing import List, Optional
from sqlmodel import SQLModel, Field, Relationship
from pydantic import BaseModel
from pydantic import Field as PydanticField

from .domain import Deal, Restaurant
from .util.time_utils import format_clock


# Database Models (SQLModel)
class RestaurantCuisineLink(SQLModel, table=True):
    """Many-to-many link between restaurants and cuisines."""
    __tablename__ = "restaurant_cuisine"

    restaurant_id: Optional[int] = Field(default=None, foreign_key="restaurant.id", primary_key=True)
    cuisine_id: Optional[int] = Field(default=None, foreign_key="cuisine.id", primary_key=True)


class SuburbEntity(SQLModel, table=True):
    """Suburb a restaurant is located in."""
    __tablename__ = "suburb"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True)

    # Relationships
    restaurants: List["RestaurantEntity"] = Relationship(back_populates="suburb")


class CuisineEntity(SQLModel, table=True):
    """Cuisine category."""
    __tablename__ = "cuisine"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True)

    # Relationships
    restaurants: List["RestaurantEntity"] = Relationship(
        back_populates="cuisines", link_model=RestaurantCuisineLink
    )


class RestaurantEntity(SQLModel, table=True):
    """Stored restaurant with its opening hours."""
    __tablename__ = "restaurant"

    id: Optional[int] = Field(default=None, primary_key=True)
    object_id: str = Field(unique=True, index=True)
    name: Optional[str] = Field(default=None)
    address1: Optional[str] = Field(default=None)
    image_link: Optional[str] = Field(default=None)
    open_time: Optional[time] = Field(default=None)
    close_time: Optional[time] = Field(default=None)
    suburb_id: Optional[int] = Field(default=None, foreign_key="suburb.id")

    # Relationships
    suburb: Optional[SuburbEntity] = Relationship(back_populates="restaurants")
    cuisines: List[CuisineEntity] = Relationship(
        back_populates="restaurants", link_model=RestaurantCuisineLink
    )
    deals: List["DealEntity"] = Relationship(back_populates="restaurant")


class DealEntity(SQLModel, table=True):
    """Stored deal; a null window means always available."""
    __tablename__ = "deal"

    id: Optional[int] = Field(default=None, primary_key=True)
    object_id: str = Field(index=True)
    discount: int = Field(default=0)
    dine_in: bool = Field(default=False)
    lightning: bool = Field(default=False)
    qty_left: int = Field(default=0)
    available_from: Optional[time] = Field(default=None)
    available_to: Optional[time] = Field(default=None)
    restaurant_id: int = Field(foreign_key="restaurant.id")

    # Relationships
    restaurant: RestaurantEntity = Relationship(back_populates="deals")


# Pydantic models for API responses (camelCase on the wire)
class ActiveDealResponse(BaseModel):
    """One live deal together with its restaurant."""
    restaurant_object_id: str = PydanticField(alias="restaurantObjectId")
    restaurant_name: Optional[str] = PydanticField(default=None, alias="restaurantName")
    restaurant_address1: Optional[str] = PydanticField(default=None, alias="restaurantAddress1")
    restaurant_suburb: Optional[str] = PydanticField(default=None, alias="restaurantSuburb")
    restaurant_open: Optional[str] = PydanticField(default=None, alias="restaurantOpen")
    restaurant_close: Optional[str] = PydanticField(default=None, alias="restaurantClose")
    deal_object_id: str = PydanticField(alias="dealObjectId")
    discount: int
    dine_in: bool = PydanticField(alias="dineIn")
    lightning: bool
    qty_left: int = PydanticField(alias="qtyLeft")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_pair(cls, restaurant: Restaurant, deal: Deal) -> "ActiveDealResponse":
        hours = restaurant.hours
        return cls(
            restaurant_object_id=restaurant.object_id,
            restaurant_name=restaurant.name,
            restaurant_address1=restaurant.address1,
            restaurant_suburb=restaurant.suburb,
            restaurant_open=format_clock(hours.start) if hours else None,
            restaurant_close=format_clock(hours.end) if hours else None,
            deal_object_id=deal.object_id,
            discount=deal.discount,
            dine_in=deal.dine_in,
            lightning=deal.lightning,
            qty_left=deal.qty_left,
        )


class ActiveDealListResponse(BaseModel):
    """Envelope for the active-deal list."""
    deals: List[ActiveDealResponse]


class PeakTimeResponse(BaseModel):
    """Peak deal window; start/end are null when there are no deals."""
    peak_time_start: Optional[str] = PydanticField(default=None, alias="peakTimeStart")
    peak_time_end: Optional[str] = PydanticField(default=None, alias="peakTimeEnd")
    count: int

    model_config = {"populate_by_name": True}
