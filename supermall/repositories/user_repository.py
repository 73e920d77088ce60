"""
User Repository - profiles kept next to the auth provider's users
"""
from typing import Optional

from supermall.core.database import db_cursor
from supermall.domain.user import UserProfile


class UserRepository:
    """Repository for UserProfile data access"""

    SELECT = """
        SELECT id, email, username, role, two_factor_enabled, join_date
        FROM profiles
    """

    def find_by_id(self, user_id: str) -> Optional[UserProfile]:
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " WHERE id = %s", (user_id,))
            row = cursor.fetchone()
            return UserProfile(**row) if row else None

    def find_by_email(self, email: str) -> Optional[UserProfile]:
        with db_cursor() as cursor:
            cursor.execute(self.SELECT + " WHERE LOWER(email) = LOWER(%s)", (email,))
            row = cursor.fetchone()
            return UserProfile(**row) if row else None

    def create_profile(self, user_id: str, email: str, username: str) -> UserProfile:
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                INSERT INTO profiles (id, email, username)
                VALUES (%s, %s, %s)
                RETURNING id, email, username, role, two_factor_enabled, join_date
            """, (user_id, email, username))
            return UserProfile(**cursor.fetchone())

    def set_two_factor(self, user_id: str, enabled: bool) -> bool:
        with db_cursor(commit=True) as cursor:
            cursor.execute(
                "UPDATE profiles SET two_factor_enabled = %s WHERE id = %s",
                (enabled, user_id),
            )
            return cursor.rowcount > 0

    def count(self) -> int:
        with db_cursor() as cursor:
            cursor.execute("SELECT COUNT(*)::INTEGER AS total FROM profiles")
            return cursor.fetchone()["total"]
