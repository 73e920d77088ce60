"""
Comparison Repository - per-user list of products being compared
"""
from typing import List

from supermall.core.database import db_cursor


class ComparisonRepository:

    def find_product_ids(self, user_id: str) -> List[str]:
        with db_cursor() as cursor:
            cursor.execute("""
                SELECT product_id FROM product_comparisons
                WHERE user_id = %s
                ORDER BY added_at
            """, (user_id,))
            return [row["product_id"] for row in cursor.fetchall()]

    def add(self, user_id: str, product_id: str) -> None:
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                INSERT INTO product_comparisons (user_id, product_id)
                VALUES (%s, %s)
                ON CONFLICT (user_id, product_id) DO NOTHING
            """, (user_id, product_id))

    def remove(self, user_id: str, product_id: str) -> bool:
        with db_cursor(commit=True) as cursor:
            cursor.execute(
                "DELETE FROM product_comparisons WHERE user_id = %s AND product_id = %s",
                (user_id, product_id),
            )
            return cursor.rowcount > 0

    def clear(self, user_id: str) -> int:
        with db_cursor(commit=True) as cursor:
            cursor.execute("DELETE FROM product_comparisons WHERE user_id = %s", (user_id,))
            return cursor.rowcount
