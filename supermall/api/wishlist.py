"""
Wishlist API Endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException

from supermall.core.auth import TokenUser, get_current_user
from supermall.core.errors import SuperMallError, to_http_exception
from supermall.services.wishlist_service import WishlistService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def get_wishlist(user: TokenUser = Depends(get_current_user)):
    try:
        products = WishlistService().list_wishlist(user.id)
        return {"status": "success", "count": len(products), "data": [p.to_dict() for p in products]}
    except Exception as e:
        logger.error(f"Error fetching wishlist for {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching wishlist: {str(e)}")


@router.post("/share")
async def share_wishlist(user: TokenUser = Depends(get_current_user)):
    """Create a public link to the current wishlist"""
    try:
        return {"status": "success", "data": WishlistService().create_share_link(user.id)}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error sharing wishlist for {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error sharing wishlist: {str(e)}")


@router.get("/shared/{token}")
async def get_shared_wishlist(token: str):
    """Public read of a shared wishlist"""
    try:
        products = WishlistService().get_shared(token)
        return {"status": "success", "count": len(products), "data": [p.to_dict() for p in products]}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error fetching shared wishlist: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching shared wishlist: {str(e)}")


@router.post("/{product_id}", status_code=201)
async def add_to_wishlist(product_id: str, user: TokenUser = Depends(get_current_user)):
    try:
        WishlistService().add(user.id, product_id)
        return {"status": "success", "data": {"product_id": product_id, "wishlisted": True}}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error adding {product_id} to wishlist of {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating wishlist: {str(e)}")


@router.delete("/{product_id}")
async def remove_from_wishlist(product_id: str, user: TokenUser = Depends(get_current_user)):
    try:
        WishlistService().remove(user.id, product_id)
        return {"status": "success", "data": {"product_id": product_id, "wishlisted": False}}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error removing {product_id} from wishlist of {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating wishlist: {str(e)}")


@router.post("/{product_id}/toggle")
async def toggle_wishlist(product_id: str, user: TokenUser = Depends(get_current_user)):
    try:
        wishlisted = WishlistService().toggle(user.id, product_id)
        return {"status": "success", "data": {"product_id": product_id, "wishlisted": wishlisted}}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error toggling {product_id} for {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating wishlist: {str(e)}")


@router.post("/{product_id}/move-to-cart")
async def move_to_cart(product_id: str, user: TokenUser = Depends(get_current_user)):
    try:
        quantity = WishlistService().move_to_cart(user.id, product_id)
        return {"status": "success", "data": {"product_id": product_id, "cart_quantity": quantity}}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error moving {product_id} to cart for {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error moving to cart: {str(e)}")
