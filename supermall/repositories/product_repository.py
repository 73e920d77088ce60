"""
Product Repository - Data Access Layer for Products

Handles all database queries for products, product reviews and stock alerts,
and returns Product / Review domain models.
"""
from typing import List, Optional

from supermall.core.database import db_cursor
from supermall.domain.product import Product
from supermall.domain.shop import Review


class ProductRepository:
    """
    Repository for Product data access

    All SQL queries for products are centralized here.
    Ratings are aggregated from the reviews table in the same query.
    """

    SELECT = """
        SELECT
            p.id, p.shop_id, p.category_id,
            c.name AS category_name,
            p.name, p.description, p.brand, p.sku,
            p.price, p.discount, p.price_per_unit, p.stock,
            p.image_url,
            COALESCE(p.images, '{}') AS images,
            COALESCE(p.variants, '[]'::jsonb) AS variants,
            COALESCE(p.related_product_ids, '{}') AS related_product_ids,
            p.created_at,
            r.avg_rating,
            COALESCE(r.reviews_count, 0)::INTEGER AS reviews_count
        FROM products p
        LEFT JOIN categories c ON c.id = p.category_id
        LEFT JOIN (
            SELECT product_id,
                   ROUND(AVG(rating)::numeric, 1)::FLOAT AS avg_rating,
                   COUNT(*) AS reviews_count
            FROM reviews
            WHERE product_id IS NOT NULL
            GROUP BY product_id
        ) r ON r.product_id = p.id
    """

    def find_all(self) -> List[Product]:
        """All products, newest first; the listing pipeline runs in the service"""
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " ORDER BY p.created_at DESC, p.id")
            return [Product(**row) for row in cursor.fetchall()]

    def find_by_id(self, product_id: str) -> Optional[Product]:
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " WHERE p.id = %s", (product_id,))
            row = cursor.fetchone()
            return Product(**row) if row else None

    def find_by_ids(self, product_ids: List[str]) -> List[Product]:
        """
        Find several products at once

        Rows come back in the order of ``product_ids``; unknown ids are dropped.
        """
        if not product_ids:
            return []
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " WHERE p.id = ANY(%s)", (list(product_ids),))
            by_id = {row["id"]: Product(**row) for row in cursor.fetchall()}
        return [by_id[pid] for pid in product_ids if pid in by_id]

    def find_by_shop(self, shop_id: str) -> List[Product]:
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " WHERE p.shop_id = %s ORDER BY p.name", (shop_id,))
            return [Product(**row) for row in cursor.fetchall()]

    def find_by_categories(self, category_ids: List[str], limit: int = 10) -> List[Product]:
        """Top rated in-stock products of the given categories"""
        with db_cursor() as cursor:
            cursor.execute(
                self.SELECT + """
                WHERE p.category_id = ANY(%s) AND p.stock > 0
                ORDER BY r.avg_rating DESC NULLS LAST, p.name
                LIMIT %s
                """,
                (list(category_ids), limit),
            )
            return [Product(**row) for row in cursor.fetchall()]

    def find_top_rated(self, limit: int = 10) -> List[Product]:
        """Top rated in-stock products across the catalog"""
        with db_cursor() as cursor:
            cursor.execute(
                self.SELECT + """
                WHERE p.stock > 0
                ORDER BY r.avg_rating DESC NULLS LAST, p.name
                LIMIT %s
                """,
                (limit,),
            )
            return [Product(**row) for row in cursor.fetchall()]

    # ========================================
    # Reviews
    # ========================================

    def find_reviews(self, product_id: str) -> List[Review]:
        with db_cursor() as cursor:
            cursor.execute("""
                SELECT id, user_id, product_id, shop_id, rating, comment, created_at
                FROM reviews
                WHERE product_id = %s
                ORDER BY created_at DESC
            """, (product_id,))
            return [Review(**row) for row in cursor.fetchall()]

    # ========================================
    # Stock alerts
    # ========================================

    def add_stock_alert(self, user_id: str, product_id: str) -> None:
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                INSERT INTO stock_alerts (user_id, product_id)
                VALUES (%s, %s)
                ON CONFLICT (user_id, product_id) DO NOTHING
            """, (user_id, product_id))
