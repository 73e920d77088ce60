"""
Product Comparison API Endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from supermall.core.auth import TokenUser, get_current_user
from supermall.core.errors import SuperMallError, to_http_exception
from supermall.services.comparison_service import ComparisonService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def get_comparison(user: TokenUser = Depends(get_current_user)):
    """Comparison table of the caller's selected products"""
    try:
        return {"status": "success", "data": ComparisonService().view(user.id)}
    except Exception as e:
        logger.error(f"Error building comparison for {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching comparison: {str(e)}")


@router.post("/{product_id}", status_code=201)
async def add_to_comparison(product_id: str, user: TokenUser = Depends(get_current_user)):
    try:
        count = ComparisonService().add(user.id, product_id)
        return {"status": "success", "data": {"product_id": product_id, "count": count}}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error adding {product_id} to comparison of {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating comparison: {str(e)}")


@router.delete("/{product_id}")
async def remove_from_comparison(product_id: str, user: TokenUser = Depends(get_current_user)):
    try:
        ComparisonService().remove(user.id, product_id)
        return {"status": "success", "message": "Product removed from comparison"}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error removing {product_id} from comparison of {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating comparison: {str(e)}")


@router.delete("/")
async def clear_comparison(user: TokenUser = Depends(get_current_user)):
    try:
        removed = ComparisonService().clear(user.id)
        return {"status": "success", "data": {"removed": removed}}
    except Exception as e:
        logger.error(f"Error clearing comparison of {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error clearing comparison: {str(e)}")
