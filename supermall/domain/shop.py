"""
Shop Domain Models

Shops and the reviews attached to shops or products.
"""
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict, model_validator


class Review(BaseModel):
    """
    Review domain model - a rating left on a product or a shop

    Exactly one of product_id / shop_id is set.
    """

    id: str = Field(..., description="Review ID")
    user_id: Optional[str] = Field(None, description="Author")
    product_id: Optional[str] = Field(None, description="Reviewed product")
    shop_id: Optional[str] = Field(None, description="Reviewed shop")
    rating: int = Field(..., description="Stars", ge=1, le=5)
    comment: Optional[str] = Field(None, description="Free text")
    created_at: Optional[datetime] = Field(None, description="When the review was left")

    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="after")
    def check_target(self):
        if bool(self.product_id) == bool(self.shop_id):
            raise ValueError("review must target exactly one of product_id or shop_id")
        return self


def average_rating(reviews: List[Review]) -> Optional[float]:
    """Average of review ratings rounded to one decimal, None without reviews"""
    if not reviews:
        return None
    return round(sum(r.rating for r in reviews) / len(reviews), 1)


class Shop(BaseModel):
    """
    Shop domain model - a storefront inside the mall

    Fields:
        id: Shop ID
        name: Shop name
        description: Shop description
        category_id / category_name: Category the shop belongs to
        location_name: Mall location label (floor, wing)
        lat / lng: Coordinates for distance sorting (optional)
        is_open: Whether the shop is currently open
        rating: Stored average rating (0-5)
        image_url: Cover image
        offer_count: Number of offers attached to the shop (computed)
        distance_km: Distance from the caller, filled in by distance sorting
    """

    id: str = Field(..., description="Shop ID")
    name: str = Field(..., description="Shop name", min_length=1)
    description: Optional[str] = Field(None, description="Shop description")
    category_id: Optional[str] = Field(None, description="Category ID")
    category_name: Optional[str] = Field(None, description="Category name")
    location_name: Optional[str] = Field(None, description="Location label")
    lat: Optional[float] = Field(None, description="Latitude")
    lng: Optional[float] = Field(None, description="Longitude")
    is_open: bool = Field(False, description="Open right now")
    rating: Optional[float] = Field(None, description="Average rating", ge=0, le=5)
    image_url: Optional[str] = Field(None, description="Cover image URL")
    offer_count: int = Field(0, description="Attached offers", ge=0)
    distance_km: Optional[float] = Field(None, description="Distance from the caller")
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def coords(self) -> Optional[dict]:
        if self.lat is None or self.lng is None:
            return None
        return {"lat": self.lat, "lng": self.lng}

    @property
    def status_label(self) -> str:
        return "Open" if self.is_open else "Closed"

    def to_dict(self) -> dict:
        data = self.model_dump()
        data["status"] = self.status_label
        return data
