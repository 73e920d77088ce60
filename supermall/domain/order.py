"""
Order Domain Models

Represents order-related entities in SuperMall.
These are the single source of truth for order data structure.
"""
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional, List

from pydantic import BaseModel, Field, ConfigDict


class OrderStatus(str, Enum):
    """Lifecycle states an admin can move an order through"""

    PENDING = "Pending"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"


ORDER_STATUSES = [s.value for s in OrderStatus]


class OrderItem(BaseModel):
    """
    Order Item domain model - a line in an order

    Fields:
        product_id: Product bought (None if the product was deleted since)
        product_name: Product name at order time
        quantity: Units ordered
        unit_price: Discounted price per unit at order time
        total: quantity * unit_price
    """

    id: Optional[str] = Field(None, description="Order item ID")
    order_id: Optional[str] = Field(None, description="Parent order ID")
    product_id: Optional[str] = Field(None, description="Product ID")
    product_name: str = Field(..., description="Product name at order time")
    quantity: int = Field(..., description="Quantity ordered", ge=1)
    unit_price: Decimal = Field(..., description="Price per unit", ge=0)
    total: Decimal = Field(..., description="Total for line item", ge=0)

    model_config = ConfigDict(from_attributes=True)

    def to_dict(self) -> dict:
        """Convert to dictionary with Decimal to float conversion"""
        data = self.model_dump()
        data["unit_price"] = float(self.unit_price)
        data["total"] = float(self.total)
        return data


class Order(BaseModel):
    """
    Order domain model

    Fields:
        id: Order ID
        user_id: Buyer
        customer_name: Buyer display name at order time
        status: One of OrderStatus
        total: Sum of line totals
        items: Order lines
        created_at: Order date
    """

    id: str = Field(..., description="Order ID")
    user_id: str = Field(..., description="Buyer user ID")
    customer_name: Optional[str] = Field(None, description="Buyer name")
    status: OrderStatus = Field(OrderStatus.PENDING, description="Order status")
    total: Decimal = Field(..., description="Order total", ge=0)
    items: List[OrderItem] = Field(default_factory=list, description="Order lines")
    created_at: Optional[datetime] = Field(None, description="Order date")
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

    @property
    def can_cancel(self) -> bool:
        return self.status == OrderStatus.PENDING

    def to_dict(self) -> dict:
        data = self.model_dump(exclude={"items"})
        data["status"] = self.status.value
        data["total"] = float(self.total)
        data["can_cancel"] = self.can_cancel
        data["items"] = [item.to_dict() for item in self.items]
        return data
