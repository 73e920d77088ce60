"""
Order Service
Order history, cancellation, reorder and admin status updates
"""
import logging
from typing import List, Optional

from supermall.core.errors import ConflictError, NotFoundError, PermissionDeniedError, ValidationError
from supermall.core.logging_config import log_action
from supermall.domain.order import ORDER_STATUSES, Order, OrderItem, OrderStatus
from supermall.repositories.order_repository import OrderRepository
from supermall.repositories.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class OrderService:

    def __init__(
        self,
        repo: Optional[OrderRepository] = None,
        product_repo: Optional[ProductRepository] = None,
    ):
        self.repo = repo or OrderRepository()
        self.product_repo = product_repo or ProductRepository()

    def list_user_orders(self, user_id: str) -> List[Order]:
        return self.repo.find_by_user(user_id)

    def get_order(self, order_id: str, user_id: Optional[str] = None) -> Order:
        """
        Fetch an order; when ``user_id`` is given the order must belong to it
        """
        order = self.repo.find_by_id(order_id)
        if not order:
            raise NotFoundError(f"Order {order_id} not found")
        if user_id is not None and order.user_id != user_id:
            raise PermissionDeniedError("This order belongs to another user")
        return order

    def cancel_order(self, user_id: str, order_id: str) -> Order:
        """
        Only Pending orders can be cancelled

        Raises:
            ValidationError: The order is not Pending
            ConflictError: The order left Pending before the cancel was written
        """
        order = self.get_order(order_id, user_id)
        if not order.can_cancel:
            raise ValidationError(f"Only pending orders can be cancelled (order is {order.status.value})")

        if not self.repo.cancel_if_pending(order_id):
            raise ConflictError(f"Order {order_id} is no longer pending and cannot be cancelled")
        log_action("Order cancelled", user_id=user_id, order_id=order_id)
        return order.model_copy(update={"status": OrderStatus.CANCELLED})

    def reorder(self, user_id: str, order_id: str, customer_name: Optional[str] = None) -> Order:
        """
        Place a new Pending order with the items of a previous one

        Items are re-priced at today's discounted price. Items whose product
        no longer exists are skipped.

        Raises:
            ValidationError: If none of the items can be ordered again
        """
        previous = self.get_order(order_id, user_id)

        product_ids = [item.product_id for item in previous.items if item.product_id]
        products = {p.id: p for p in self.product_repo.find_by_ids(product_ids)}

        items = []
        for item in previous.items:
            product = products.get(item.product_id)
            if not product:
                logger.info(f"Reorder {order_id}: skipping removed product {item.product_id}")
                continue
            unit_price = product.sale_price
            items.append(OrderItem(
                product_id=product.id,
                product_name=product.name,
                quantity=item.quantity,
                unit_price=unit_price,
                total=unit_price * item.quantity,
            ))

        if not items:
            raise ValidationError("None of the products in this order are available anymore")

        order = self.repo.create(
            user_id=user_id,
            customer_name=customer_name or previous.customer_name,
            items=items,
        )
        log_action("Order reordered", user_id=user_id, from_order_id=order_id, order_id=order.id)
        return order

    def update_status(self, order_id: str, status: str, admin_id: Optional[str] = None) -> Order:
        """
        Admin status change

        Raises:
            ValidationError: If status is not one of ORDER_STATUSES
        """
        if status not in ORDER_STATUSES:
            raise ValidationError(f"Invalid status '{status}', expected one of {', '.join(ORDER_STATUSES)}")

        order = self.get_order(order_id)
        self.repo.update_status(order_id, status)
        log_action("Order status updated", order_id=order_id, status=status, admin_id=admin_id)
        return order.model_copy(update={"status": OrderStatus(status)})
