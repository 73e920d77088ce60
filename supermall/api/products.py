"""
Products API Endpoints
Product listing (filters, fuzzy search, sort, paging), product details,
products of a shop and stock alerts
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from supermall.core.auth import TokenUser, get_current_user, get_current_user_optional
from supermall.core.errors import SuperMallError, to_http_exception
from supermall.services.product_service import ProductService
from supermall.utils.filters import ProductFilters

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/")
async def get_products(
    category: Optional[str] = Query(None, description="Category ID"),
    min_price: float = Query(0, ge=0),
    max_price: Optional[float] = Query(None, ge=0),
    in_stock: bool = Query(False, description="Only products with stock"),
    rating_min: float = Query(0, ge=0, le=5),
    brand: Optional[str] = Query(None),
    discount_only: bool = Query(False),
    search: Optional[str] = Query(None, description="Fuzzy search on name, description, brand and SKU"),
    sort: str = Query("relevance", description="relevance | priceAsc | priceDesc | rating"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=100),
    user: Optional[TokenUser] = Depends(get_current_user_optional),
):
    """
    Get products with optional filters

    Signed-in callers get a ``wishlisted`` flag on every product.
    """
    try:
        filters = ProductFilters(
            category=category,
            min_price=min_price,
            max_price=max_price,
            in_stock_only=in_stock,
            rating_min=rating_min,
            brand=brand,
            discount_only=discount_only,
        )
        result, wishlisted = ProductService().list_products(
            filters=filters,
            search=search,
            sort=sort,
            page=page,
            page_size=page_size,
            user_id=user.id if user else None,
        )

        products_data = []
        for product in result.items:
            data = product.to_dict()
            data["wishlisted"] = product.id in wishlisted
            products_data.append(data)

        return {
            "status": "success",
            "total": result.total,
            "page": result.page,
            "page_size": result.page_size,
            "count": len(result.items),
            "end_reached": result.end_reached,
            "data": products_data,
        }
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error fetching products: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching products: {str(e)}")


@router.get("/by-ids")
async def get_products_by_ids(ids: List[str] = Query(..., description="Product IDs")):
    try:
        products = ProductService().get_products_by_ids(ids)
        return {"status": "success", "count": len(products), "data": [p.to_dict() for p in products]}
    except Exception as e:
        logger.error(f"Error fetching products by ids: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching products: {str(e)}")


@router.get("/shop/{shop_id}")
async def get_products_by_shop(shop_id: str):
    try:
        products = ProductService().get_products_by_shop(shop_id)
        return {"status": "success", "count": len(products), "data": [p.to_dict() for p in products]}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error fetching products of shop {shop_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching shop products: {str(e)}")


@router.get("/{product_id}")
async def get_product(product_id: str, user: Optional[TokenUser] = Depends(get_current_user_optional)):
    """Product with reviews, average rating and related products"""
    try:
        details = ProductService().get_product_details(product_id, user.id if user else None)
        return {
            "status": "success",
            "data": {
                **details["product"].to_dict(),
                "wishlisted": details["wishlisted"],
                "average_rating": details["average_rating"],
                "reviews": [r.model_dump() for r in details["reviews"]],
                "related": [p.to_dict() for p in details["related"]],
            },
        }
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error fetching product {product_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching product: {str(e)}")


@router.post("/{product_id}/stock-alert", status_code=201)
async def subscribe_stock_alert(product_id: str, user: TokenUser = Depends(get_current_user)):
    try:
        ProductService().subscribe_stock_alert(user.id, product_id)
        return {"status": "success", "message": "You will be notified when this product is back in stock"}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error subscribing stock alert for {product_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error subscribing to stock alert: {str(e)}")
