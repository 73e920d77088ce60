"""
Notifications API Endpoints
"""
import logging
from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from supermall.core.auth import TokenUser, get_current_user, require_admin
from supermall.core.errors import SuperMallError, to_http_exception
from supermall.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter()


class SubscribeRequest(BaseModel):
    token: str = Field(..., min_length=1, description="Push token of the device")


class NotificationRequest(BaseModel):
    user_id: str
    title: str = Field(..., min_length=1)
    body: str = Field(..., min_length=1)
    data: Optional[Dict[str, Any]] = None


@router.post("/subscribe")
async def subscribe(payload: SubscribeRequest, user: TokenUser = Depends(get_current_user)):
    try:
        NotificationService().subscribe(user.id, payload.token)
        return {"status": "success", "message": "Subscribed to notifications"}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error subscribing {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error subscribing: {str(e)}")


@router.get("/")
async def get_notifications(user: TokenUser = Depends(get_current_user)):
    try:
        notifications = NotificationService().list_notifications(user.id)
        return {"status": "success", "count": len(notifications), "data": notifications}
    except Exception as e:
        logger.error(f"Error fetching notifications for {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching notifications: {str(e)}")


@router.post("/send", status_code=201)
async def send_notification(payload: NotificationRequest, admin: TokenUser = Depends(require_admin)):
    try:
        notification = NotificationService().send(payload.user_id, payload.title, payload.body, payload.data)
        return {"status": "success", "data": notification}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error sending notification to {payload.user_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error sending notification: {str(e)}")
