"""
Catalog reference entities: categories and mall locations
"""
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict


class Category(BaseModel):
    """
    Category domain model - groups shops, products and offers

    Fields:
        id: Category ID
        name: Display name
        description: Optional description
        product_count: Number of products in the category (computed by the query)
    """

    id: str = Field(..., description="Category ID")
    name: str = Field(..., description="Category name", min_length=1)
    description: Optional[str] = Field(None, description="Category description")
    product_count: int = Field(0, description="Products in this category", ge=0)

    model_config = ConfigDict(from_attributes=True)

    def matches(self, term: str) -> bool:
        """Case-insensitive substring match on name or description"""
        needle = term.lower()
        return needle in self.name.lower() or needle in (self.description or "").lower()


class Location(BaseModel):
    """Mall location (floor / wing) with optional coordinates"""

    id: str
    name: str
    floor: Optional[str] = None
    lat: Optional[float] = None
    lng: Optional[float] = None

    model_config = ConfigDict(from_attributes=True)
