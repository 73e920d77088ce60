"""
Cart Repository - Data Access Layer for cart lines
"""
from typing import List

from supermall.core.database import db_cursor
from supermall.domain.user import CartItem


class CartRepository:
    """
    Repository for CartItem data access

    Cart lines are returned joined with their product so the service can
    price them without another query.
    """

    def find_items(self, user_id: str) -> List[CartItem]:
        with db_cursor() as cursor:
            cursor.execute("""
                SELECT
                    ci.user_id, ci.product_id, ci.quantity,
                    p.name AS product_name, p.price, p.discount, p.stock
                FROM cart_items ci
                JOIN products p ON p.id = ci.product_id
                WHERE ci.user_id = %s
                ORDER BY ci.added_at
            """, (user_id,))
            return [CartItem(**row) for row in cursor.fetchall()]

    def add(self, user_id: str, product_id: str, quantity: int = 1) -> int:
        """
        Add a product to the cart, merging with an existing line

        Returns:
            The resulting quantity of the line
        """
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                INSERT INTO cart_items (user_id, product_id, quantity)
                VALUES (%s, %s, %s)
                ON CONFLICT (user_id, product_id)
                DO UPDATE SET quantity = cart_items.quantity + EXCLUDED.quantity
                RETURNING quantity
            """, (user_id, product_id, quantity))
            return cursor.fetchone()["quantity"]

    def set_quantity(self, user_id: str, product_id: str, quantity: int) -> bool:
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                UPDATE cart_items SET quantity = %s
                WHERE user_id = %s AND product_id = %s
            """, (quantity, user_id, product_id))
            return cursor.rowcount > 0

    def remove(self, user_id: str, product_id: str) -> bool:
        with db_cursor(commit=True) as cursor:
            cursor.execute(
                "DELETE FROM cart_items WHERE user_id = %s AND product_id = %s",
                (user_id, product_id),
            )
            return cursor.rowcount > 0
