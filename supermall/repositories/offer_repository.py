"""
Offer Repository - Data Access Layer for Offers and redemptions
"""
from typing import Dict, List, Optional, Any

from supermall.core.database import db_cursor
from supermall.domain.offer import Offer


OFFER_COLUMNS = {
    "title", "description", "discount", "start_date", "end_date",
    "category_id", "shop_id", "floor_id", "is_active", "image_url",
}


class OfferRepository:
    """
    Repository for Offer data access

    Returns Offer domain models. Filtering by validity and discount is done
    by the offer listing pipeline, not in SQL.
    """

    SELECT = """
        SELECT
            id, title, description, discount, start_date, end_date,
            category_id, shop_id, floor_id, is_active, image_url, created_at
        FROM offers
    """

    def find_all(self) -> List[Offer]:
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " ORDER BY created_at DESC")
            return [Offer(**row) for row in cursor.fetchall()]

    def find_by_id(self, offer_id: str) -> Optional[Offer]:
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " WHERE id = %s", (offer_id,))
            row = cursor.fetchone()
            return Offer(**row) if row else None

    def find_by_shop(self, shop_id: str) -> List[Offer]:
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " WHERE shop_id = %s ORDER BY created_at DESC", (shop_id,))
            return [Offer(**row) for row in cursor.fetchall()]

    def find_by_floor(self, floor_id: str) -> List[Offer]:
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " WHERE floor_id = %s ORDER BY created_at DESC", (floor_id,))
            return [Offer(**row) for row in cursor.fetchall()]

    def create(self, data: Dict[str, Any]) -> Offer:
        fields = [key for key in data if key in OFFER_COLUMNS]
        placeholders = ", ".join(["%s"] * len(fields))
        with db_cursor(commit=True) as cursor:
            cursor.execute(
                f"""
                INSERT INTO offers ({', '.join(fields)}) VALUES ({placeholders})
                RETURNING id, title, description, discount, start_date, end_date,
                          category_id, shop_id, floor_id, is_active, image_url, created_at
                """,
                [data[key] for key in fields],
            )
            return Offer(**cursor.fetchone())

    def update(self, offer_id: str, data: Dict[str, Any]) -> bool:
        """Partial update, returns False when the offer does not exist"""
        fields = [key for key in data if key in OFFER_COLUMNS]
        if not fields:
            return self.find_by_id(offer_id) is not None

        set_clause = ", ".join(f"{key} = %s" for key in fields)
        with db_cursor(commit=True) as cursor:
            cursor.execute(
                f"UPDATE offers SET {set_clause}, updated_at = NOW() WHERE id = %s",
                [data[key] for key in fields] + [offer_id],
            )
            return cursor.rowcount > 0

    def delete(self, offer_id: str) -> bool:
        with db_cursor(commit=True) as cursor:
            cursor.execute("DELETE FROM offers WHERE id = %s", (offer_id,))
            return cursor.rowcount > 0

    def record_redemption(self, user_id: str, offer_id: str) -> bool:
        """
        Record that a user redeemed an offer

        Returns:
            False if the user already redeemed this offer
        """
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                INSERT INTO offer_redemptions (user_id, offer_id)
                VALUES (%s, %s)
                ON CONFLICT (user_id, offer_id) DO NOTHING
            """, (user_id, offer_id))
            return cursor.rowcount > 0
