"""
Product Domain Model

Represents a product sold by a shop in SuperMall.
This is the single source of truth for product data structure.
"""
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict


CENT = Decimal("0.01")


def apply_discount(price: Decimal, discount: float) -> Decimal:
    """Price after a percentage discount, rounded to paise"""
    if not discount:
        return price
    factor = (Decimal(100) - Decimal(str(discount))) / Decimal(100)
    return (price * factor).quantize(CENT, rounding=ROUND_HALF_UP)


class ProductVariant(BaseModel):
    """A purchasable variant (size, colour) with its own price"""

    id: str
    name: str
    price: Decimal = Field(..., ge=0)


class Product(BaseModel):
    """
    Product domain model - represents a product in a shop's catalog

    Fields:
        id: Product ID
        shop_id: Owning shop
        category_id / category_name: Product category
        name: Product name
        description: Product description (optional)
        brand: Brand (optional)
        sku: Stock Keeping Unit (optional)

        # Pricing
        price: List price
        discount: Discount percentage (0-100)
        price_per_unit: Optional unit price label ("₹20/100g")

        # Inventory
        stock: Units on hand (in_stock is derived from it)

        # Ratings (aggregated by the query)
        avg_rating: Average review rating
        reviews_count: Number of reviews

        # Media and relations
        image_url: Main image
        images: Gallery images
        variants: Purchasable variants
        related_product_ids: Products shown as "related"
    """

    id: str = Field(..., description="Product ID")
    shop_id: Optional[str] = Field(None, description="Owning shop ID")
    category_id: Optional[str] = Field(None, description="Category ID")
    category_name: Optional[str] = Field(None, description="Category name")
    name: str = Field(..., description="Product name", min_length=1)
    description: Optional[str] = Field(None, description="Product description")
    brand: Optional[str] = Field(None, description="Brand")
    sku: Optional[str] = Field(None, description="Stock Keeping Unit")

    price: Decimal = Field(..., description="List price", ge=0)
    discount: float = Field(0, description="Discount percentage", ge=0, le=100)
    price_per_unit: Optional[str] = Field(None, description="Unit price label")

    stock: int = Field(0, description="Units on hand")

    avg_rating: Optional[float] = Field(None, description="Average rating", ge=0, le=5)
    reviews_count: int = Field(0, description="Number of reviews", ge=0)

    image_url: Optional[str] = Field(None, description="Main image URL")
    images: List[str] = Field(default_factory=list, description="Gallery images")
    variants: List[ProductVariant] = Field(default_factory=list, description="Variants")
    related_product_ids: List[str] = Field(default_factory=list, description="Related products")

    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def in_stock(self) -> bool:
        return self.stock > 0

    @property
    def has_discount(self) -> bool:
        return self.discount > 0

    @property
    def sale_price(self) -> Decimal:
        """Price after discount, rounded to paise"""
        return apply_discount(self.price, self.discount)

    def to_dict(self) -> dict:
        """
        Convert to dictionary with computed fields

        Decimal prices become floats for JSON.
        """
        data = self.model_dump()
        data["price"] = float(self.price)
        data["sale_price"] = float(self.sale_price)
        data["in_stock"] = self.in_stock
        data["has_discount"] = self.has_discount
        data["variants"] = [
            {**variant, "price": float(variant["price"])} for variant in data["variants"]
        ]
        return data
