"""
Dashboard API Endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from supermall.core.auth import TokenUser, get_current_user, require_admin
from supermall.core.errors import SuperMallError, to_http_exception
from supermall.services.dashboard_service import DashboardService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/user")
async def get_user_dashboard(user: TokenUser = Depends(get_current_user)):
    """Profile, orders and wishlist of the caller"""
    try:
        return {"status": "success", "data": DashboardService().user_dashboard(user.id)}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error building dashboard for {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching dashboard: {str(e)}")


@router.get("/admin")
async def get_admin_dashboard(admin: TokenUser = Depends(require_admin)):
    """User count, total sales, recent orders and top products"""
    try:
        return {"status": "success", "data": DashboardService().admin_dashboard()}
    except Exception as e:
        logger.error(f"Error building admin dashboard: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching admin dashboard: {str(e)}")
