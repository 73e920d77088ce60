"""
User-owned entities: profile, wishlist, cart and favorite shops
"""
from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field, ConfigDict

from supermall.domain.product import apply_discount


class UserProfile(BaseModel):
    """
    Profile row kept next to the auth provider's user

    Fields:
        id: Auth user id
        email: Sign-in email
        username: Public handle
        role: "user" or "admin"
        two_factor_enabled: Whether login requires an emailed code
        join_date: Sign-up timestamp
    """

    id: str
    email: str
    username: Optional[str] = None
    role: str = "user"
    two_factor_enabled: bool = False
    join_date: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class WishlistItem(BaseModel):
    user_id: str
    product_id: str
    added_at: Optional[datetime] = None


class Favorite(BaseModel):
    user_id: str
    shop_id: str
    added_at: Optional[datetime] = None


class CartItem(BaseModel):
    """
    Cart line joined with the product it points to

    product_name / price / discount / stock come from the products table so
    the cart can be priced without a second lookup.
    """

    user_id: str
    product_id: str
    quantity: int = Field(..., ge=1)
    product_name: Optional[str] = None
    price: Optional[Decimal] = None
    discount: float = 0
    stock: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def unit_price(self) -> Decimal:
        """Discounted price of one unit"""
        return apply_discount(self.price or Decimal("0"), self.discount)

    @property
    def line_total(self) -> Decimal:
        return self.unit_price * self.quantity

    @property
    def in_stock(self) -> bool:
        return (self.stock or 0) >= self.quantity

    def to_dict(self) -> dict:
        return {
            "product_id": self.product_id,
            "product_name": self.product_name,
            "quantity": self.quantity,
            "price": float(self.price) if self.price is not None else None,
            "discount": self.discount,
            "unit_price": float(self.unit_price),
            "line_total": float(self.line_total),
            "in_stock": self.in_stock,
        }
