"""
Cart Service
Cart lines, quantities and checkout

Checkout turns the cart into a Pending order at discounted unit prices.
Stock decrement, order insert and cart clearing commit in one transaction
(see OrderRepository.create).
"""
import logging
from decimal import Decimal
from typing import Any, Dict, List, Optional

from supermall.core.errors import ConflictError, NotFoundError, ValidationError
from supermall.core.logging_config import log_action
from supermall.domain.order import Order, OrderItem
from supermall.domain.user import CartItem
from supermall.repositories.cart_repository import CartRepository
from supermall.repositories.order_repository import OrderRepository
from supermall.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class CartService:

    def __init__(
        self,
        repo: Optional[CartRepository] = None,
        product_repo: Optional[ProductRepository] = None,
        order_repo: Optional[OrderRepository] = None,
    ):
        self.repo = repo or CartRepository()
        self.product_repo = product_repo or ProductRepository()
        self.order_repo = order_repo or OrderRepository()

    def get_cart(self, user_id: str) -> Dict[str, Any]:
        """Cart lines with line totals and the cart subtotal"""
        items = self.repo.find_items(user_id)
        subtotal = sum((item.line_total for item in items), Decimal("0"))
        return {
            "items": [item.to_dict() for item in items],
            "item_count": sum(item.quantity for item in items),
            "subtotal": float(subtotal),
        }

    def add_item(self, user_id: str, product_id: str, quantity: int = 1) -> int:
        """
        Add a product, merging with an existing line

        Returns:
            Resulting quantity of the line
        """
        if quantity < 1:
            raise ValidationError("Quantity must be at least 1")
        product = self.product_repo.find_by_id(product_id)
        if not product:
            raise NotFoundError(f"Product {product_id} not found")
        if not product.in_stock:
            raise ValidationError(f"{product.name} is out of stock")

        new_quantity = self.repo.add(user_id, product_id, quantity)
        log_action("Cart item added", user_id=user_id, product_id=product_id, quantity=new_quantity)
        return new_quantity

    def update_quantity(self, user_id: str, product_id: str, quantity: int) -> None:
        """Set a line's quantity, 0 removes the line"""
        if quantity < 0:
            raise ValidationError("Quantity cannot be negative")
        if quantity == 0:
            self.remove_item(user_id, product_id)
            return
        if not self.repo.set_quantity(user_id, product_id, quantity):
            raise NotFoundError("Product is not in the cart")
        log_action("Cart quantity updated", user_id=user_id, product_id=product_id, quantity=quantity)

    def remove_item(self, user_id: str, product_id: str) -> None:
        if not self.repo.remove(user_id, product_id):
            raise NotFoundError("Product is not in the cart")
        log_action("Cart item removed", user_id=user_id, product_id=product_id)

    def checkout(self, user_id: str, customer_name: Optional[str] = None) -> Order:
        """
        Place an order for everything in the cart

        Raises:
            ValidationError: Empty cart
            ConflictError: A line exceeds available stock, checked up front or while
                the order was being placed
        """
        items = self.repo.find_items(user_id)
        if not items:
            raise ValidationError("Your cart is empty")

        short = [item.product_name for item in items if not item.in_stock]
        if short:
            raise ConflictError(f"Not enough stock for: {', '.join(short)}")

        order = self.order_repo.create(
            user_id=user_id,
            customer_name=customer_name,
            items=to_order_items(items),
            clear_cart=True,
        )
        log_action("Order placed", user_id=user_id, order_id=order.id, total=float(order.total))
        return order


def to_order_items(items: List[CartItem]) -> List[OrderItem]:
    return [
        OrderItem(
            product_id=item.product_id,
            product_name=item.product_name or item.product_id,
            quantity=item.quantity,
            unit_price=item.unit_price,
            total=item.line_total,
        )
        for item in items
    ]
