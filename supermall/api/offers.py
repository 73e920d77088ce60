"""
Offers API Endpoints
Offer listing (filters, search, sort, paging), floor offers, redemption,
share links and admin management
"""
import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, Query, UploadFile
from pydantic import BaseModel, Field

from supermall.core.auth import TokenUser, get_current_user, require_admin
from supermall.core.errors import SuperMallError, to_http_exception
from supermall.services.offer_service import OfferService
from supermall.utils.filters import OfferFilters

logger = logging.getLogger(__name__)

router = APIRouter()


# Request models
class OfferCreate(BaseModel):
    title: str
    description: Optional[str] = None
    discount: float = Field(..., description="Discount percentage")
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category_id: Optional[str] = None
    shop_id: Optional[str] = None
    floor_id: Optional[str] = None
    is_active: bool = True
    image_url: Optional[str] = None


class OfferUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    discount: Optional[float] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    category_id: Optional[str] = None
    shop_id: Optional[str] = None
    floor_id: Optional[str] = None
    is_active: Optional[bool] = None
    image_url: Optional[str] = None


@router.get("/")
async def get_offers(
    category: Optional[str] = Query(None, description="Category ID"),
    shop_id: Optional[str] = Query(None),
    valid_only: bool = Query(True, description="Hide expired offers"),
    min_discount: float = Query(0, ge=0, le=100),
    search: Optional[str] = Query(None, description="Search title and description"),
    sort: str = Query("expiryAsc", description="expiryAsc | discountDesc | newest"),
    page: int = Query(1, ge=1),
    page_size: Optional[int] = Query(None, ge=1, le=100),
):
    try:
        filters = OfferFilters(
            category=category,
            shop_id=shop_id,
            valid_only=valid_only,
            min_discount=min_discount,
        )
        result = OfferService().list_offers(
            filters=filters, search=search, sort=sort, page=page, page_size=page_size
        )
        return {
            "status": "success",
            "total": result.total,
            "page": result.page,
            "page_size": result.page_size,
            "count": len(result.items),
            "end_reached": result.end_reached,
            "data": [offer.to_dict() for offer in result.items],
        }
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error fetching offers: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching offers: {str(e)}")


@router.get("/floor/{floor_id}")
async def get_offers_by_floor(floor_id: str):
    try:
        offers = OfferService().get_offers_by_floor(floor_id)
        return {"status": "success", "count": len(offers), "data": [o.to_dict() for o in offers]}
    except Exception as e:
        logger.error(f"Error fetching offers of floor {floor_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching floor offers: {str(e)}")


@router.get("/{offer_id}")
async def get_offer(offer_id: str):
    try:
        offer = OfferService().get_offer(offer_id)
        return {"status": "success", "data": offer.to_dict()}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error fetching offer {offer_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching offer: {str(e)}")


@router.post("/{offer_id}/redeem")
async def redeem_offer(offer_id: str, user: TokenUser = Depends(get_current_user)):
    try:
        offer = OfferService().redeem_offer(user.id, offer_id)
        return {
            "status": "success",
            "message": f"Offer '{offer.title}' redeemed",
            "data": offer.to_dict(),
        }
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error redeeming offer {offer_id} for {user.id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error redeeming offer: {str(e)}")


@router.get("/{offer_id}/share")
async def share_offer(offer_id: str):
    try:
        return {"status": "success", "data": OfferService().share_link(offer_id)}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error sharing offer {offer_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error sharing offer: {str(e)}")


# ============================================================================
# Admin
# ============================================================================

@router.post("/", status_code=201)
async def create_offer(payload: OfferCreate, admin: TokenUser = Depends(require_admin)):
    try:
        offer = OfferService().create_offer(payload.model_dump(exclude_none=True))
        return {"status": "success", "data": offer.to_dict()}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error creating offer: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating offer: {str(e)}")


@router.put("/{offer_id}")
async def update_offer(offer_id: str, payload: OfferUpdate, admin: TokenUser = Depends(require_admin)):
    try:
        offer = OfferService().update_offer(offer_id, payload.model_dump(exclude_unset=True))
        return {"status": "success", "data": offer.to_dict()}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error updating offer {offer_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating offer: {str(e)}")


@router.delete("/{offer_id}")
async def delete_offer(offer_id: str, admin: TokenUser = Depends(require_admin)):
    try:
        OfferService().delete_offer(offer_id)
        return {"status": "success", "message": f"Offer {offer_id} deleted"}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error deleting offer {offer_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting offer: {str(e)}")


@router.post("/{offer_id}/image")
async def upload_offer_image(
    offer_id: str,
    file: UploadFile = File(..., description="Offer banner (image/*, max 5MB)"),
    admin: TokenUser = Depends(require_admin),
):
    try:
        content = await file.read()
        url = OfferService().upload_image(offer_id, file.filename, content, file.content_type)
        return {"status": "success", "data": {"offer_id": offer_id, "image_url": url}}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error uploading image for offer {offer_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error uploading image: {str(e)}")
