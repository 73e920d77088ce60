"""
Category Repository - Data Access Layer for categories and mall locations
"""
from typing import List, Optional

from supermall.core.database import db_cursor
from supermall.domain.catalog import Category, Location


class CategoryRepository:
    """
    Repository for Category data access

    Returns Category domain models with their product counts.
    """

    SELECT = """
        SELECT
            c.id, c.name, c.description,
            COUNT(p.id)::INTEGER AS product_count
        FROM categories c
        LEFT JOIN products p ON p.category_id = c.id
    """

    def find_all(self) -> List[Category]:
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " GROUP BY c.id ORDER BY c.name")
            return [Category(**row) for row in cursor.fetchall()]

    def find_by_id(self, category_id: str) -> Optional[Category]:
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " WHERE c.id = %s GROUP BY c.id", (category_id,))
            row = cursor.fetchone()
            return Category(**row) if row else None

    def create(self, name: str, description: Optional[str] = None) -> Category:
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                INSERT INTO categories (name, description)
                VALUES (%s, %s)
                RETURNING id, name, description, 0 AS product_count
            """, (name, description))
            return Category(**cursor.fetchone())

    def update(self, category_id: str, name: str, description: Optional[str] = None) -> bool:
        """Returns False when the category does not exist"""
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                UPDATE categories SET name = %s, description = %s
                WHERE id = %s
            """, (name, description, category_id))
            return cursor.rowcount > 0

    def delete(self, category_id: str) -> bool:
        with db_cursor(commit=True) as cursor:
            cursor.execute("DELETE FROM categories WHERE id = %s", (category_id,))
            return cursor.rowcount > 0


class LocationRepository:
    """Read-only access to mall locations"""

    def find_all(self) -> List[Location]:
        with db_cursor() as cursor:
            cursor.execute("""
                SELECT id, name, floor, lat, lng
                FROM locations
                ORDER BY floor NULLS LAST, name
            """)
            return [Location(**row) for row in cursor.fetchall()]
