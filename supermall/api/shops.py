"""
Shops API Endpoints
Shop listing (filters, fuzzy search, rating/distance sort, paging), shop
details, reviews, inventory status, favorites and admin management
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from pydantic import BaseModel, Field

from supermall.core.auth import TokenUser, get_current_user, require_admin
from supermall.core.errors import SuperMallError, to_http_exception
from supermall.services.shop_service import ShopService
from supermall.utils.filters import ShopFilters

logger = logging.getLogger(__name__)

router = APIRouter()


# Request models
class ShopCreate(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None
    category_id: Optional[str] = None
    location_name: Optional[str] = None
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    is_open: bool = False
    image_url: Optional[str] = None


class ShopUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    category_id: Optional[str] = None
    location_name: Optional[str] = None
    lat: Optional[float] = Field(None, ge=-90, le=90)
    lng: Optional[float] = Field(None, ge=-180, le=180)
    is_open: Optional[bool] = None
    image_url: Optional[str] = None


class FavoriteUpdate(BaseModel):
    favorite: bool


@router.get("/")
async def get_shops(
    categories: Optional[List[str]] = Query(None, description="Category IDs (any of)"),
    location: Optional[str] = Query(None, description="Exact location label"),
    open_now: bool = Query(False),
    has_offers: bool = Query(False),
    min_rating: float = Query(0, ge=0, le=5),
    search: Optional[str] = Query(None, description="Fuzzy search on name, category and location"),
    sort: str = Query("rating", description="rating | distance"),
    lat: Optional[float] = Query(None, ge=-90, le=90, description="Caller latitude"),
    lng: Optional[float] = Query(None, ge=-180, le=180, description="Caller longitude"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=100),
):
    """
    List shops

    Distance sorting needs both lat and lng; without them shops keep
    their alphabetical order.
    """
    try:
        filters = ShopFilters(
            categories=categories or [],
            location=location,
            open_now=open_now,
            has_offers=has_offers,
            min_rating=min_rating,
        )
        user_location = {"lat": lat, "lng": lng} if lat is not None and lng is not None else None

        result = ShopService().list_shops(
            filters=filters,
            search=search,
            sort=sort,
            user_location=user_location,
            page=page,
            page_size=page_size,
        )

        return {
            "status": "success",
            "total": result.total,
            "page": result.page,
            "page_size": result.page_size,
            "count": len(result.items),
            "end_reached": result.end_reached,
            "data": [shop.to_dict() for shop in result.items],
        }
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error fetching shops: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching shops: {str(e)}")


@router.get("/favorites")
async def get_favorite_shops(user: TokenUser = Depends(get_current_user)):
    try:
        shops = ShopService().list_favorites(user.id)
        return {"status": "success", "count": len(shops), "data": [s.to_dict() for s in shops]}
    except Exception as e:
        logger.error(f"Error fetching favorites for {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching favorites: {str(e)}")


@router.get("/{shop_id}")
async def get_shop(shop_id: str):
    try:
        shop = ShopService().get_shop(shop_id)
        return {"status": "success", "data": shop.to_dict()}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error fetching shop {shop_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching shop: {str(e)}")


@router.get("/{shop_id}/offers")
async def get_shop_offers(shop_id: str):
    try:
        offers = ShopService().get_shop_offers(shop_id)
        return {"status": "success", "count": len(offers), "data": [o.to_dict() for o in offers]}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error fetching offers of shop {shop_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching shop offers: {str(e)}")


@router.get("/{shop_id}/reviews")
async def get_shop_reviews(shop_id: str):
    try:
        result = ShopService().get_shop_reviews(shop_id)
        return {
            "status": "success",
            "count": result["count"],
            "average_rating": result["average_rating"],
            "data": [r.model_dump() for r in result["reviews"]],
        }
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error fetching reviews of shop {shop_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching shop reviews: {str(e)}")


@router.get("/{shop_id}/inventory")
async def get_shop_inventory_status(shop_id: str):
    try:
        return {"status": "success", "data": ShopService().get_inventory_status(shop_id)}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error fetching inventory of shop {shop_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching inventory status: {str(e)}")


@router.put("/{shop_id}/favorite")
async def set_favorite_shop(shop_id: str, payload: FavoriteUpdate, user: TokenUser = Depends(get_current_user)):
    try:
        favorite = ShopService().set_favorite(user.id, shop_id, payload.favorite)
        return {"status": "success", "data": {"shop_id": shop_id, "favorite": favorite}}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error updating favorite {shop_id} for {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating favorite: {str(e)}")


# ============================================================================
# Admin
# ============================================================================

@router.post("/", status_code=201)
async def create_shop(payload: ShopCreate, admin: TokenUser = Depends(require_admin)):
    try:
        shop = ShopService().create_shop(payload.model_dump(exclude_none=True))
        return {"status": "success", "data": shop.to_dict()}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error creating shop: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating shop: {str(e)}")


@router.put("/{shop_id}")
async def update_shop(shop_id: str, payload: ShopUpdate, admin: TokenUser = Depends(require_admin)):
    try:
        shop = ShopService().update_shop(shop_id, payload.model_dump(exclude_unset=True))
        return {"status": "success", "data": shop.to_dict()}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error updating shop {shop_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating shop: {str(e)}")


@router.delete("/{shop_id}")
async def delete_shop(shop_id: str, admin: TokenUser = Depends(require_admin)):
    try:
        ShopService().delete_shop(shop_id)
        return {"status": "success", "message": f"Shop {shop_id} deleted"}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error deleting shop {shop_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting shop: {str(e)}")


@router.post("/{shop_id}/image")
async def upload_shop_image(
    shop_id: str,
    file: UploadFile = File(..., description="Shop cover image (image/*, max 5MB)"),
    admin: TokenUser = Depends(require_admin),
):
    try:
        content = await file.read()
        url = ShopService().upload_image(shop_id, file.filename, content, file.content_type)
        return {"status": "success", "data": {"shop_id": shop_id, "image_url": url}}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error uploading image for shop {shop_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error uploading image: {str(e)}")
