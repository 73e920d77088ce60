"""
Wishlist Repository - wishlist items and shared wishlist links
"""
from typing import List, Optional

from supermall.core.database import db_cursor
from supermall.domain.user import WishlistItem


class WishlistRepository:
    """Repository for a user's wishlist"""

    def find_items(self, user_id: str) -> List[WishlistItem]:
        with db_cursor() as cursor:
            cursor.execute("""
                SELECT user_id, product_id, added_at
                FROM wishlist_items
                WHERE user_id = %s
                ORDER BY added_at DESC
            """, (user_id,))
            return [WishlistItem(**row) for row in cursor.fetchall()]

    def find_product_ids(self, user_id: str) -> List[str]:
        return [item.product_id for item in self.find_items(user_id)]

    def contains(self, user_id: str, product_id: str) -> bool:
        with db_cursor() as cursor:
            cursor.execute("""
                SELECT EXISTS (
                    SELECT 1 FROM wishlist_items WHERE user_id = %s AND product_id = %s
                ) AS present
            """, (user_id, product_id))
            return bool(cursor.fetchone()["present"])

    def add(self, user_id: str, product_id: str) -> None:
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                INSERT INTO wishlist_items (user_id, product_id)
                VALUES (%s, %s)
                ON CONFLICT (user_id, product_id) DO NOTHING
            """, (user_id, product_id))

    def remove(self, user_id: str, product_id: str) -> bool:
        with db_cursor(commit=True) as cursor:
            cursor.execute(
                "DELETE FROM wishlist_items WHERE user_id = %s AND product_id = %s",
                (user_id, product_id),
            )
            return cursor.rowcount > 0

    # ========================================
    # Shared wishlists
    # ========================================

    def create_share(self, token: str, user_id: str, product_ids: List[str]) -> None:
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                INSERT INTO wishlist_shares (token, user_id, product_ids)
                VALUES (%s, %s, %s)
            """, (token, user_id, list(product_ids)))

    def find_share(self, token: str) -> Optional[List[str]]:
        """Product ids frozen into a share link, None for an unknown token"""
        with db_cursor() as cursor:
            cursor.execute(
                "SELECT product_ids FROM wishlist_shares WHERE token = %s",
                (token,),
            )
            row = cursor.fetchone()
            return list(row["product_ids"]) if row else None
