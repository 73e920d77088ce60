"""
Orders API Endpoints
Order history, cancellation and reorder for shoppers, status updates for admins
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from supermall.core.auth import TokenUser, get_current_user, require_admin
from supermall.core.errors import SuperMallError, to_http_exception
from supermall.services.order_service import OrderService

logger = logging.getLogger(__name__)

router = APIRouter()


class StatusUpdate(BaseModel):
    status: str


@router.get("/")
async def get_my_orders(user: TokenUser = Depends(get_current_user)):
    try:
        orders = OrderService().list_user_orders(user.id)
        return {"status": "success", "count": len(orders), "data": [o.to_dict() for o in orders]}
    except Exception as e:
        logger.error(f"Error fetching orders for {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching orders: {str(e)}")


@router.get("/{order_id}")
async def get_order(order_id: str, user: TokenUser = Depends(get_current_user)):
    try:
        owner = None if user.role == "admin" else user.id
        order = OrderService().get_order(order_id, owner)
        return {"status": "success", "data": order.to_dict()}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error fetching order {order_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching order: {str(e)}")


@router.post("/{order_id}/cancel")
async def cancel_order(order_id: str, user: TokenUser = Depends(get_current_user)):
    try:
        order = OrderService().cancel_order(user.id, order_id)
        return {"status": "success", "data": order.to_dict()}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error cancelling order {order_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error cancelling order: {str(e)}")


@router.post("/{order_id}/reorder", status_code=201)
async def reorder(order_id: str, user: TokenUser = Depends(get_current_user)):
    try:
        order = OrderService().reorder(user.id, order_id, user.name or user.email)
        return {"status": "success", "data": order.to_dict()}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error reordering {order_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error placing order: {str(e)}")


@router.put("/{order_id}/status")
async def update_order_status(order_id: str, payload: StatusUpdate, admin: TokenUser = Depends(require_admin)):
    try:
        order = OrderService().update_status(order_id, payload.status, admin.id)
        return {"status": "success", "data": order.to_dict()}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error updating status of order {order_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating order status: {str(e)}")
