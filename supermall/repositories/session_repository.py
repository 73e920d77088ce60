"""
Session Repository - short lived server-side state

- two_factor_challenges: pending logins waiting for an emailed code
- chat_sessions: chatbot conversation context
"""
from datetime import datetime
from typing import Dict, Optional, Any

from psycopg2.extras import Json

from supermall.core.database import db_cursor


class TwoFactorRepository:
    """Pending two-factor challenges, one per email"""

    def save(
        self,
        email: str,
        code_hash: str,
        access_token: str,
        refresh_token: Optional[str],
        expires_at: datetime,
    ) -> None:
        """Store a challenge, replacing any previous one for the email"""
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                INSERT INTO two_factor_challenges
                    (email, code_hash, access_token, refresh_token, attempts, expires_at)
                VALUES (%s, %s, %s, %s, 0, %s)
                ON CONFLICT (email) DO UPDATE SET
                    code_hash = EXCLUDED.code_hash,
                    access_token = EXCLUDED.access_token,
                    refresh_token = EXCLUDED.refresh_token,
                    attempts = 0,
                    expires_at = EXCLUDED.expires_at
            """, (email.lower(), code_hash, access_token, refresh_token, expires_at))

    def find(self, email: str) -> Optional[Dict[str, Any]]:
        with db_cursor() as cursor:
            cursor.execute("""
                SELECT email, code_hash, access_token, refresh_token, attempts, expires_at
                FROM two_factor_challenges
                WHERE email = %s
            """, (email.lower(),))
            row = cursor.fetchone()
            return dict(row) if row else None

    def increment_attempts(self, email: str) -> None:
        with db_cursor(commit=True) as cursor:
            cursor.execute(
                "UPDATE two_factor_challenges SET attempts = attempts + 1 WHERE email = %s",
                (email.lower(),),
            )

    def delete(self, email: str) -> None:
        with db_cursor(commit=True) as cursor:
            cursor.execute("DELETE FROM two_factor_challenges WHERE email = %s", (email.lower(),))


class ChatSessionRepository:
    """Chatbot context per session id"""

    def get_context(self, session_id: str) -> Dict[str, Any]:
        with db_cursor() as cursor:
            cursor.execute(
                "SELECT context FROM chat_sessions WHERE session_id = %s",
                (session_id,),
            )
            row = cursor.fetchone()
            return dict(row["context"]) if row and row["context"] else {}

    def save_context(self, session_id: str, user_id: Optional[str], context: Dict[str, Any]) -> None:
        with db_cursor(commit=True) as cursor:
            cursor.execute("""
                INSERT INTO chat_sessions (session_id, user_id, context, updated_at)
                VALUES (%s, %s, %s, NOW())
                ON CONFLICT (session_id) DO UPDATE SET
                    user_id = COALESCE(EXCLUDED.user_id, chat_sessions.user_id),
                    context = EXCLUDED.context,
                    updated_at = NOW()
            """, (session_id, user_id, Json(context)))
