"""
Shop Service
Shop listing pipeline, shop details and favorites

Listing pipeline: filter -> fuzzy search -> sort (rating or distance) -> paginate.
"""
import logging
import math
from typing import Any, Dict, List, Optional

from supermall.core.config import settings
from supermall.core.errors import NotFoundError, ValidationError
from supermall.core.logging_config import log_action
from supermall.domain.offer import Offer
from supermall.domain.shop import Shop, average_rating
from supermall.repositories.offer_repository import OfferRepository
from supermall.repositories.shop_repository import ShopRepository
from supermall.services.storage_service import StorageService
from supermall.utils.filters import (
    Page,
    ShopFilters,
    SHOP_SORT_ORDERS,
    calculate_distance,
    filter_shops,
    paginate,
    search_shops,
    shop_coords,
    sort_shops_by_distance,
    sort_shops_by_rating,
)

logger = logging.getLogger(__name__)


class ShopService:

    def __init__(
        self,
        repo: Optional[ShopRepository] = None,
        offer_repo: Optional[OfferRepository] = None,
        storage: Optional[StorageService] = None,
    ):
        self.repo = repo or ShopRepository()
        self.offer_repo = offer_repo or OfferRepository()
        self.storage = storage or StorageService()

    def list_shops(
        self,
        filters: Optional[ShopFilters] = None,
        search: Optional[str] = None,
        sort: str = "rating",
        user_location: Optional[Dict[str, float]] = None,
        page: int = 1,
        page_size: Optional[int] = None,
    ) -> Page[Shop]:
        """
        Run the shop listing pipeline

        Args:
            filters: Category / location / open / offers / rating filters
            search: Fuzzy term over name, category and location
            sort: "rating" or "distance"
            user_location: {"lat", "lng"} of the caller, needed for distance
            page: 1-based page number
            page_size: Defaults to SHOP_PAGE_SIZE

        Returns:
            Page of shops; distance_km is set when a user location is given
        """
        if sort not in SHOP_SORT_ORDERS:
            raise ValidationError(f"Invalid sort '{sort}', expected one of {', '.join(SHOP_SORT_ORDERS)}")

        shops = self.repo.find_all()
        shops = filter_shops(shops, filters or ShopFilters())
        shops = search_shops(shops, search, settings.FUZZY_THRESHOLD)

        if user_location:
            shops = [self._with_distance(shop, user_location) for shop in shops]

        if sort == "distance" and user_location:
            shops = sort_shops_by_distance(shops, user_location)
        elif sort == "rating":
            shops = sort_shops_by_rating(shops)

        return paginate(shops, page, page_size or settings.SHOP_PAGE_SIZE)

    @staticmethod
    def _with_distance(shop: Shop, user_location: Dict[str, float]) -> Shop:
        distance = calculate_distance(user_location, shop_coords(shop))
        return shop.model_copy(
            update={"distance_km": None if math.isinf(distance) else round(distance, 2)}
        )

    def get_shop(self, shop_id: str) -> Shop:
        shop = self.repo.find_by_id(shop_id)
        if not shop:
            raise NotFoundError(f"Shop {shop_id} not found")
        return shop

    def get_shop_offers(self, shop_id: str) -> List[Offer]:
        self.get_shop(shop_id)
        return self.offer_repo.find_by_shop(shop_id)

    def get_shop_reviews(self, shop_id: str) -> Dict[str, Any]:
        """Reviews of a shop with their average rating"""
        self.get_shop(shop_id)
        reviews = self.repo.find_reviews(shop_id)
        return {
            "reviews": reviews,
            "average_rating": average_rating(reviews),
            "count": len(reviews),
        }

    def get_inventory_status(self, shop_id: str) -> Dict[str, Any]:
        self.get_shop(shop_id)
        in_stock = self.repo.has_stock(shop_id)
        return {"shop_id": shop_id, "in_stock": in_stock}

    # ========================================
    # Favorites
    # ========================================

    def set_favorite(self, user_id: str, shop_id: str, favorite: bool) -> bool:
        self.get_shop(shop_id)
        if favorite:
            self.repo.add_favorite(user_id, shop_id)
        else:
            self.repo.remove_favorite(user_id, shop_id)
        log_action("Favorite shop updated", user_id=user_id, shop_id=shop_id, favorite=favorite)
        return favorite

    def list_favorites(self, user_id: str) -> List[Shop]:
        favorite_ids = set(self.repo.find_favorite_ids(user_id))
        return [shop for shop in self.repo.find_all() if shop.id in favorite_ids]

    # ========================================
    # Admin
    # ========================================

    def create_shop(self, data: Dict[str, Any]) -> Shop:
        if not (data.get("name") or "").strip():
            raise ValidationError("Shop name is required")
        shop_id = self.repo.create(data)
        log_action("Shop created", shop_id=shop_id, name=data["name"])
        return self.get_shop(shop_id)

    def update_shop(self, shop_id: str, data: Dict[str, Any]) -> Shop:
        if "name" in data and not (data["name"] or "").strip():
            raise ValidationError("Shop name cannot be empty")
        if not self.repo.update(shop_id, data):
            raise NotFoundError(f"Shop {shop_id} not found")
        log_action("Shop updated", shop_id=shop_id, fields=sorted(data))
        return self.get_shop(shop_id)

    def delete_shop(self, shop_id: str) -> None:
        shop = self.get_shop(shop_id)
        if not self.repo.delete(shop_id):
            raise NotFoundError(f"Shop {shop_id} not found")

        path = self.storage.path_from_url(shop.image_url)
        if path:
            self.storage.delete_file(path)
        log_action("Shop deleted", shop_id=shop_id)

    def upload_image(self, shop_id: str, filename: str, content: bytes, content_type: Optional[str]) -> str:
        self.get_shop(shop_id)
        url = self.storage.upload_image(f"shops/{shop_id}", filename, content, content_type)
        self.repo.update(shop_id, {"image_url": url})
        return url
