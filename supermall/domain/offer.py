"""
Offer Domain Model

A time-boxed discount published by a shop (or the mall) for a category.
"""
from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class Offer(BaseModel):
    """
    Offer domain model

    Fields:
        id: Offer ID
        title: Headline shown to shoppers
        description: Details (optional)
        discount: Discount percentage, strictly positive
        start_date: First day the offer can be redeemed (optional)
        end_date: Expiry date, last day the offer can be redeemed (optional)
        category_id / shop_id / floor_id: What the offer is attached to
        is_active: Admin switch
        image_url: Banner image
        created_at: Creation timestamp, used by the "newest" sort
    """

    id: str = Field(..., description="Offer ID")
    title: str = Field(..., description="Offer title", min_length=1)
    description: Optional[str] = Field(None, description="Offer description")
    discount: float = Field(..., description="Discount percentage", gt=0, le=100)
    start_date: Optional[date] = Field(None, description="Start date")
    end_date: Optional[date] = Field(None, description="Expiry date")
    category_id: Optional[str] = Field(None, description="Category ID")
    shop_id: Optional[str] = Field(None, description="Shop ID")
    floor_id: Optional[str] = Field(None, description="Mall floor ID")
    is_active: bool = Field(True, description="Active flag")
    image_url: Optional[str] = Field(None, description="Banner image URL")
    created_at: Optional[datetime] = Field(None, description="Creation timestamp")

    model_config = ConfigDict(from_attributes=True)

    def is_expired(self, today: Optional[date] = None) -> bool:
        """An offer without an end date never expires"""
        today = today or date.today()
        return self.end_date is not None and self.end_date < today

    def has_started(self, today: Optional[date] = None) -> bool:
        today = today or date.today()
        return self.start_date is None or self.start_date <= today

    def is_redeemable(self, today: Optional[date] = None) -> bool:
        return self.is_active and self.has_started(today) and not self.is_expired(today)

    def to_dict(self) -> dict:
        data = self.model_dump()
        data["expired"] = self.is_expired()
        return data
