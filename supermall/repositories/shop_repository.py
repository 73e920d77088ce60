"""
Shop Repository - Data Access Layer for Shops

Handles all database queries for shops, shop reviews and favorite shops,
and returns Shop / Review domain models.
"""
from typing import Dict, List, Optional, Any

from supermall.core.database import db_cursor
from supermall.domain.shop import Shop, Review


SHOP_COLUMNS = {
    "name", "description", "category_id", "location_name",
    "lat", "lng", "is_open", "rating", "image_url",
}


class ShopRepository:
    """
    Repository for Shop data access

    All SQL queries for shops are centralized here.
    Returns Shop domain models, not raw dictionaries.
    """

    SELECT = """
        SELECT
            s.id, s.name, s.description, s.category_id,
            c.name AS category_name,
            s.location_name, s.lat, s.lng, s.is_open, s.rating,
            s.image_url, s.created_at,
            (SELECT COUNT(*) FROM offers o WHERE o.shop_id = s.id)::INTEGER AS offer_count
        FROM shops s
        LEFT JOIN categories c ON c.id = s.category_id
    """

    def find_all(self) -> List[Shop]:
        """All shops ordered by name, filtering happens in the service layer"""
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " ORDER BY s.name")
            return [Shop(**row) for row in cursor.fetchall()]

    def find_by_id(self, shop_id: str) -> Optional[Shop]:
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " WHERE s.id = %s", (shop_id,))
            row = cursor.fetchone()
            return Shop(**row) if row else None

    def create(self, data: Dict[str, Any]) -> str:
        """Insert a shop, returns its id"""
        fields = [key for key in data if key in SHOP_COLUMNS]
        placeholders = ", ".join(["%s"] * len(fields))
        with db_cursor(commit=True) as cursor:
            cursor.execute(
                f"INSERT INTO shops ({', '.join(fields)}) VALUES ({placeholders}) RETURNING id",
                [data[key] for key in fields],
            )
            return cursor.fetchone()["id"]

    def update(self, shop_id: str, data: Dict[str, Any]) -> bool:
        """Partial update, returns False when the shop does not exist"""
        fields = [key for key in data if key in SHOP_COLUMNS]
        if not fields:
            return self.find_by_id(shop_id) is not None

        set_clause = ", ".join(f"{key} = %s" for key in fields)
        with db_cursor(commit=True) as cursor:
            cursor.execute(
                f"UPDATE shops SET {set_clause}, updated_at = NOW() WHERE id = %s",
                [data[key] for key in fields] + [shop_id],
            )
            return cursor.rowcount > 0

    def delete(self, shop_id: str) -> bool:
        with db_cursor(commit=True) as cursor:
            cursor.execute("DELETE FROM shops WHERE id = %s", (shop_id,))
            return cursor.rowcount > 0

    def has_stock(self, shop_id: str) -> bool:
        """True when any product of the shop has stock left"""
        with db_cursor() as cursor:
            cursor.execute("""
                SELECT EXISTS (
                    SELECT 1 FROM products WHERE shop_id = %s AND stock > 0
                ) AS in_stock
            """, (shop_id,))
            return bool(cursor.fetchone()["in_stock"])

    # ========================================
    # Reviews
    # ========================================

    def find_reviews(self, shop_id: str) -> List[Review]:
        with db_cursor() as cursor:
            cursor.execute("""
                SELECT id, user_id, product_id, shop_id, rating, comment, created_at
                FROM reviews
                WHERE shop_id = %s
                ORDER BY created_at DESC
            """, (shop_id,))
            return [Review(**row) for row in cursor.fetchall()]

    # ========================================
    # Favorites
    # ========================================

    def add_favorite(self, user_id: str, shop_id: str) -> None:
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                INSERT INTO favorites (user_id, shop_id)
                VALUES (%s, %s)
                ON CONFLICT (user_id, shop_id) DO NOTHING
            """, (user_id, shop_id))

    def remove_favorite(self, user_id: str, shop_id: str) -> None:
        with db_cursor(commit=True) as cursor:
            cursor.execute(
                "DELETE FROM favorites WHERE user_id = %s AND shop_id = %s",
                (user_id, shop_id),
            )

    def find_favorite_ids(self, user_id: str) -> List[str]:
        with db_cursor() as cursor:
            cursor.execute(
                "SELECT shop_id FROM favorites WHERE user_id = %s ORDER BY added_at",
                (user_id,),
            )
            return [row["shop_id"] for row in cursor.fetchall()]
