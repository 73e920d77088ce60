"""
Offer Service
Offer listing pipeline, admin management and redemption

Listing pipeline: filters -> search -> sort -> paginate.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional
from urllib.parse import quote

from supermall.core.config import settings
from supermall.core.errors import ConflictError, NotFoundError, ValidationError
from supermall.core.logging_config import log_action
from supermall.domain.offer import Offer
from supermall.repositories.offer_repository import OfferRepository
from supermall.services.storage_service import StorageService
from supermall.utils.filters import (
    OFFER_SORT_ORDERS,
    OfferFilters,
    Page,
    filter_offers,
    paginate,
    search_offers,
    sort_offers,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ("title", "discount", "is_active")


def validate_offer_data(data: Dict[str, Any]) -> None:
    """
    Raises:
        ValidationError: On a missing title, a non-positive discount or an
            end date before the start date
    """
    if not (data.get("title") or "").strip():
        raise ValidationError("Offer title is required")
    discount = data.get("discount")
    if discount is None or discount <= 0 or discount > 100:
        raise ValidationError("Discount must be between 0 and 100")
    start, end = data.get("start_date"), data.get("end_date")
    if start and end and end < start:
        raise ValidationError("End date must be on or after the start date")


class OfferService:

    def __init__(self, repo: Optional[OfferRepository] = None, storage: Optional[StorageService] = None):
        self.repo = repo or OfferRepository()
        self.storage = storage or StorageService()

    def list_offers(
        self,
        filters: Optional[OfferFilters] = None,
        search: Optional[str] = None,
        sort: str = "expiryAsc",
        page: int = 1,
        page_size: Optional[int] = None,
        today: Optional[date] = None,
    ) -> Page[Offer]:
        if sort not in OFFER_SORT_ORDERS:
            raise ValidationError(f"Invalid sort '{sort}', expected one of {', '.join(OFFER_SORT_ORDERS)}")

        offers = self.repo.find_all()
        offers = filter_offers(offers, filters or OfferFilters(), today)
        offers = search_offers(offers, search)
        offers = sort_offers(offers, sort)
        return paginate(offers, page, page_size or settings.OFFER_PAGE_SIZE)

    def get_offers_by_floor(self, floor_id: str) -> List[Offer]:
        return self.repo.find_by_floor(floor_id)

    def get_offer(self, offer_id: str) -> Offer:
        offer = self.repo.find_by_id(offer_id)
        if not offer:
            raise NotFoundError(f"Offer {offer_id} not found")
        return offer

    def create_offer(self, data: Dict[str, Any]) -> Offer:
        validate_offer_data(data)
        offer = self.repo.create(data)
        log_action("Offer created", offer_id=offer.id, title=offer.title)
        return offer

    def update_offer(self, offer_id: str, data: Dict[str, Any]) -> Offer:
        """
        Apply a partial update, validated against the stored offer

        Raises:
            NotFoundError: Unknown offer
            ValidationError: A required field set to null, or the merged offer is invalid
        """
        cleared = [field for field in REQUIRED_FIELDS if field in data and data[field] is None]
        if cleared:
            raise ValidationError(f"Offer fields cannot be empty: {', '.join(cleared)}")

        merged = self.get_offer(offer_id).model_dump()
        merged.update(data)
        validate_offer_data(merged)
        if not self.repo.update(offer_id, data):
            raise NotFoundError(f"Offer {offer_id} not found")
        log_action("Offer updated", offer_id=offer_id, fields=sorted(data))
        return self.get_offer(offer_id)

    def delete_offer(self, offer_id: str) -> None:
        offer = self.get_offer(offer_id)
        if not self.repo.delete(offer_id):
            raise NotFoundError(f"Offer {offer_id} not found")

        path = self.storage.path_from_url(offer.image_url)
        if path:
            self.storage.delete_file(path)
        log_action("Offer deleted", offer_id=offer_id)

    def upload_image(self, offer_id: str, filename: str, content: bytes, content_type: Optional[str]) -> str:
        self.get_offer(offer_id)
        url = self.storage.upload_image(f"offers/{offer_id}", filename, content, content_type)
        self.repo.update(offer_id, {"image_url": url})
        return url

    def redeem_offer(self, user_id: str, offer_id: str, today: Optional[date] = None) -> Offer:
        """
        Redeem an offer once per user

        Raises:
            NotFoundError: Unknown offer
            ValidationError: Offer inactive, not started or expired
            ConflictError: Already redeemed by this user
        """
        offer = self.get_offer(offer_id)
        if not offer.is_active:
            raise ValidationError("This offer is not active")
        if not offer.has_started(today):
            raise ValidationError("This offer has not started yet")
        if offer.is_expired(today):
            raise ValidationError("This offer has expired")

        if not self.repo.record_redemption(user_id, offer_id):
            raise ConflictError("Offer already redeemed")

        log_action("Offer redeemed", user_id=user_id, offer_id=offer_id)
        return offer

    def share_link(self, offer_id: str) -> Dict[str, str]:
        offer = self.get_offer(offer_id)
        url = f"{settings.PUBLIC_APP_URL.rstrip('/')}/offers/{quote(offer.id)}"
        text = f"{offer.title}: {offer.discount:g}% off at SuperMall"
        log_action("Offer shared", offer_id=offer_id)
        return {"url": url, "text": text}
