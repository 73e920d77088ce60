"""
Order Repository - Data Access Layer for Orders

Handles all database queries for orders and returns Order domain models.
Order creation (checkout and reorder) runs in a single transaction.
"""
from decimal import Decimal
from typing import Dict, List, Optional, Any

from supermall.core.database import db_cursor
from supermall.core.errors import ConflictError
from supermall.domain.order import Order, OrderItem, OrderStatus


class OrderRepository:
    """
    Repository for Order data access

    All SQL queries for orders are centralized here.
    Returns Order domain models with their items.
    """

    SELECT = """
        SELECT id, user_id, customer_name, status, total, created_at, updated_at
        FROM orders
    """

    def _attach_items(self, cursor, rows: List[Dict[str, Any]]) -> List[Order]:
        """Load the items of every order in ``rows`` with one query"""
        if not rows:
            return []

        cursor.execute("""
            SELECT id, order_id, product_id, product_name, quantity, unit_price, total
            FROM order_items
            WHERE order_id = ANY(%s)
            ORDER BY id
        """, ([row["id"] for row in rows],))

        items_by_order: Dict[str, List[OrderItem]] = {}
        for item in cursor.fetchall():
            items_by_order.setdefault(item["order_id"], []).append(OrderItem(**item))

        orders = []
        for row in rows:
            order_dict = dict(row)
            order_dict["items"] = items_by_order.get(row["id"], [])
            orders.append(Order(**order_dict))
        return orders

    def find_by_id(self, order_id: str) -> Optional[Order]:
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " WHERE id = %s", (order_id,))
            row = cursor.fetchone()
            if not row:
                return None
            return self._attach_items(cursor, [row])[0]

    def find_by_user(self, user_id: str) -> List[Order]:
        """Orders of a user, newest first"""
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " WHERE user_id = %s ORDER BY created_at DESC", (user_id,))
            return self._attach_items(cursor, cursor.fetchall())

    def find_all(self, limit: int = 100) -> List[Order]:
        """Most recent orders across all users (admin dashboard)"""
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " ORDER BY created_at DESC LIMIT %s", (limit,))
            return self._attach_items(cursor, cursor.fetchall())

    def create(
        self,
        user_id: str,
        customer_name: Optional[str],
        items: List[OrderItem],
        clear_cart: bool = False,
    ) -> Order:
        """
        Create a Pending order in one transaction

        Stock of every product is decremented with a guarded UPDATE; if any
        product does not have enough stock the whole transaction rolls back.

        Args:
            user_id: Buyer
            customer_name: Buyer display name at order time
            items: Priced order lines (unit_price already discounted)
            clear_cart: Also empty the user's cart (checkout)

        Raises:
            ConflictError: If a product is out of stock
        """
        total = sum((item.total for item in items), Decimal("0"))

        with db_cursor(commit=True) as cursor:
            for item in items:
                cursor.execute("""
                    UPDATE products SET stock = stock - %s
                    WHERE id = %s AND stock >= %s
                """, (item.quantity, item.product_id, item.quantity))
                if cursor.rowcount == 0:
                    raise ConflictError(f"Not enough stock for {item.product_name}")

            cursor.execute("""
                INSERT INTO orders (user_id, customer_name, status, total)
                VALUES (%s, %s, 'Pending', %s)
                RETURNING id, user_id, customer_name, status, total, created_at, updated_at
            """, (user_id, customer_name, total))
            order_row = cursor.fetchone()

            saved_items = []
            for item in items:
                cursor.execute("""
                    INSERT INTO order_items
                        (order_id, product_id, product_name, quantity, unit_price, total)
                    VALUES (%s, %s, %s, %s, %s, %s)
                    RETURNING id, order_id, product_id, product_name, quantity, unit_price, total
                """, (
                    order_row["id"], item.product_id, item.product_name,
                    item.quantity, item.unit_price, item.total,
                ))
                saved_items.append(OrderItem(**cursor.fetchone()))

            if clear_cart:
                cursor.execute("DELETE FROM cart_items WHERE user_id = %s", (user_id,))

        return Order(**dict(order_row), items=saved_items)

    def update_status(self, order_id: str, status: str) -> bool:
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                UPDATE orders SET status = %s, updated_at = NOW()
                WHERE id = %s
            """, (status, order_id))
            return cursor.rowcount > 0

    def cancel_if_pending(self, order_id: str) -> bool:
        """Cancel only while the order is still Pending; False when it moved on or does not exist"""
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                UPDATE orders SET status = %s, updated_at = NOW()
                WHERE id = %s AND status = %s
            """, (OrderStatus.CANCELLED.value, order_id, OrderStatus.PENDING.value))
            return cursor.rowcount > 0

    def total_sales(self) -> Decimal:
        """Sum of order totals, cancelled orders excluded"""
        with db_cursor() as cursor:
            cursor.execute("""
                SELECT COALESCE(SUM(total), 0) AS total_sales
                FROM orders
                WHERE status <> 'Cancelled'
            """)
            return Decimal(cursor.fetchone()["total_sales"])

    def top_products(self, limit: int = 5) -> List[Dict[str, Any]]:
        """Best selling products by revenue, cancelled orders excluded"""
        with db_cursor() as cursor:
            cursor.execute("""
                SELECT
                    oi.product_id,
                    MAX(oi.product_name) AS product_name,
                    SUM(oi.quantity)::INTEGER AS units_sold,
                    SUM(oi.total) AS revenue
                FROM order_items oi
                JOIN orders o ON o.id = oi.order_id
                WHERE o.status <> 'Cancelled'
                GROUP BY oi.product_id
                ORDER BY revenue DESC
                LIMIT %s
            """, (limit,))
            return [
                {
                    "product_id": row["product_id"],
                    "product_name": row["product_name"],
                    "units_sold": row["units_sold"],
                    "revenue": float(row["revenue"]),
                }
                for row in cursor.fetchall()
            ]
