"""
Notification Repository - push subscriptions and the notification log
"""
from typing import Dict, List, Optional, Any

from psycopg2.extras import Json

from supermall.core.database import db_cursor


class NotificationRepository:

    def save_token(self, user_id: str, token: str) -> None:
        """One push token per user, the latest subscription wins"""
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                INSERT INTO notification_tokens (user_id, token)
                VALUES (%s, %s)
                ON CONFLICT (user_id)
                DO UPDATE SET token = EXCLUDED.token, subscribed_at = NOW()
            """, (user_id, token))

    def find_token(self, user_id: str) -> Optional[str]:
        with db_cursor() as cursor:
            cursor.execute(
                "SELECT token FROM notification_tokens WHERE user_id = %s",
                (user_id,),
            )
            row = cursor.fetchone()
            return row["token"] if row else None

    def create(self, user_id: str, title: str, body: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                INSERT INTO notifications (user_id, title, body, data)
                VALUES (%s, %s, %s, %s)
                RETURNING id, user_id, title, body, data, created_at
            """, (user_id, title, body, Json(data or {})))
            return dict(cursor.fetchone())

    def find_by_user(self, user_id: str, limit: int = 50) -> List[Dict[str, Any]]:
        with db_cursor() as cursor:
            cursor.execute("""
                SELECT id, user_id, title, body, data, created_at
                FROM notifications
                WHERE user_id = %s
                ORDER BY created_at DESC
                LIMIT %s
            """, (user_id, limit))
            return [dict(row) for row in cursor.fetchall()]
