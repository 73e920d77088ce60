"""
Categories and Locations API Endpoints
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field

from supermall.core.auth import TokenUser, require_admin
from supermall.core.errors import SuperMallError, to_http_exception
from supermall.services.catalog_service import CategoryService, LocationService

logger = logging.getLogger(__name__)

router = APIRouter()
locations_router = APIRouter()


class CategoryPayload(BaseModel):
    name: str = Field(..., min_length=1)
    description: Optional[str] = None


@router.get("/")
async def get_categories(search: Optional[str] = Query(None, description="Substring of name or description")):
    """List categories with their product counts"""
    try:
        service = CategoryService()
        categories = service.search_categories(search)
        return {
            "status": "success",
            "count": len(categories),
            "data": [c.model_dump() for c in categories],
        }
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error fetching categories: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching categories: {str(e)}")


@router.get("/{category_id}")
async def get_category(category_id: str):
    try:
        category = CategoryService().get_category(category_id)
        return {"status": "success", "data": category.model_dump()}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error fetching category {category_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching category: {str(e)}")


@router.post("/", status_code=201)
async def create_category(payload: CategoryPayload, admin: TokenUser = Depends(require_admin)):
    try:
        category = CategoryService().create_category(payload.name, payload.description)
        return {"status": "success", "data": category.model_dump()}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error creating category: {e}")
        raise HTTPException(status_code=500, detail=f"Error creating category: {str(e)}")


@router.put("/{category_id}")
async def update_category(category_id: str, payload: CategoryPayload, admin: TokenUser = Depends(require_admin)):
    try:
        category = CategoryService().update_category(category_id, payload.name, payload.description)
        return {"status": "success", "data": category.model_dump()}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error updating category {category_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error updating category: {str(e)}")


@router.delete("/{category_id}")
async def delete_category(category_id: str, admin: TokenUser = Depends(require_admin)):
    try:
        CategoryService().delete_category(category_id)
        return {"status": "success", "message": f"Category {category_id} deleted"}
    except SuperMallError as e:
        raise to_http_exception(e)
    except Exception as e:
        logger.error(f"Error deleting category {category_id}: {e}")
        raise HTTPException(status_code=500, detail=f"Error deleting category: {str(e)}")


# ============================================================================
# Locations
# ============================================================================

@locations_router.get("/")
async def get_locations():
    """Mall locations (floors and wings) for the shop location filter"""
    try:
        locations = LocationService().list_locations()
        return {
            "status": "success",
            "count": len(locations),
            "data": [loc.model_dump() for loc in locations],
        }
    except Exception as e:
        logger.error(f"Error fetching locations: {e}")
        raise HTTPException(status_code=500, detail=f"Error fetching locations: {str(e)}")
