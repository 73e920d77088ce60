"""
Cart API Endpoints
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from supermall.core.auth import TokenUser, get_current_user
from supermall.core.errors import SuperMallError, to_http_exception
from supermall.services.cart_service import CartService

logger = logging.getLogger(__name__)

router = APIRouter()


class CartAdd(BaseModel):
    product_id: str
    quantity: int = Field(1, ge=1)


class QuantityUpdate(BaseModel):
    quantity: int = Field(..., ge=0, description="0 removes the line")


@router.get("/")
async def get_cart(user: TokenUser = Depends(get_current_user)):
    try:
        return {"status": "success", "data": CartService().get_cart(user.id)}
    except Exception as e:
        logger.error(f"Error fetching cart for {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching cart: {str(e)}")


@router.post("/", status_code=201)
async def add_to_cart(payload: CartAdd, user: TokenUser = Depends(get_current_user)):
    try:
        quantity = CartService().add_item(user.id, payload.product_id, payload.quantity)
        return {"status": "success", "data": {"product_id": payload.product_id, "quantity": quantity}}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error adding {payload.product_id} to cart of {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating cart: {str(e)}")


@router.put("/{product_id}")
async def update_cart_quantity(product_id: str, payload: QuantityUpdate, user: TokenUser = Depends(get_current_user)):
    try:
        CartService().update_quantity(user.id, product_id, payload.quantity)
        return {"status": "success", "data": {"product_id": product_id, "quantity": payload.quantity}}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error updating {product_id} in cart of {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating cart: {str(e)}")


@router.delete("/{product_id}")
async def remove_from_cart(product_id: str, user: TokenUser = Depends(get_current_user)):
    try:
        CartService().remove_item(user.id, product_id)
        return {"status": "success", "message": "Item removed from cart"}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error removing {product_id} from cart of {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating cart: {str(e)}")


@router.post("/checkout", status_code=201)
async def checkout(user: TokenUser = Depends(get_current_user)):
    """Turn the cart into a Pending order"""
    try:
        order = CartService().checkout(user.id, user.name or user.email)
        return {"status": "success", "data": order.to_dict()}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error during checkout for {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error placing order: {str(e)}")
