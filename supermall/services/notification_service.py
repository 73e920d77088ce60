"""
Notification Service
Push token subscriptions and user notifications

Notifications are persisted to the notifications table, which the client
polls, and logged. No push provider is called from here.
"""
import logging
from typing import Any, Dict, List, Optional

from supermall.core.errors import ValidationError
from supermall.core.logging_config import log_action
from supermall.repositories.notification_repository import NotificationRepository

logger = logging.getLogger(__name__)


class NotificationService:

    def __init__(self, repo: Optional[NotificationRepository] = None):
        self.repo = repo or NotificationRepository()

    def subscribe(self, user_id: str, token: str) -> None:
        if not token or not token.strip():
            raise ValidationError("Notification token is required")
        self.repo.save_token(user_id, token.strip())
        log_action("Notifications subscribed", user_id=user_id)

    def send(self, user_id: str, title: str, body: str, data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Persist and log a notification for a user"""
        if not title or not body:
            raise ValidationError("Notification title and body are required")

        token = self.repo.find_token(user_id)
        if not token:
            logger.debug(f"User {user_id} has no push token, notification stored only")

        notification = self.repo.create(user_id, title, body, data)
        log_action("Notification sent", user_id=user_id, title=title, has_token=bool(token))
        return notification

    def list_notifications(self, user_id: str) -> List[Dict[str, Any]]:
        return self.repo.find_by_user(user_id)
