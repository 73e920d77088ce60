"""
Product Service
Product listing pipeline and product details

Listing pipeline: filter -> fuzzy search -> sort -> paginate. The caller's
wishlist is looked up once so every product on the page can carry a
``wishlisted`` flag.
"""
import logging
from typing import Any, Dict, List, Optional, Set, Tuple

from supermall.core.config import settings
from supermall.core.errors import NotFoundError, ValidationError
from supermall.core.logging_config import log_action
from supermall.domain.product import Product
from supermall.domain.shop import average_rating
from supermall.repositories.product_repository import ProductRepository
from supermall.repositories.shop_repository import ShopRepository
from supermall.repositories.wishlist_repository import WishlistRepository
from supermall.utils.filters import (
    Page,
    ProductFilters,
    PRODUCT_SORT_ORDERS,
    filter_products,
    paginate,
    search_products,
    sort_products,
)

logger = logging.getLogger(__name__)

RELATED_LIMIT = 4


class ProductService:

    def __init__(
        self,
        repo: Optional[ProductRepository] = None,
        wishlist_repo: Optional[WishlistRepository] = None,
        shop_repo: Optional[ShopRepository] = None,
    ):
        self.repo = repo or ProductRepository()
        self.wishlist_repo = wishlist_repo or WishlistRepository()
        self.shop_repo = shop_repo or ShopRepository()

    def list_products(
        self,
        filters: Optional[ProductFilters] = None,
        search: Optional[str] = None,
        sort: str = "relevance",
        page: int = 1,
        page_size: Optional[int] = None,
        user_id: Optional[str] = None,
    ) -> Tuple[Page[Product], Set[str]]:
        """
        Run the product listing pipeline

        Returns:
            (page of products, ids on the caller's wishlist)
        """
        if sort not in PRODUCT_SORT_ORDERS:
            raise ValidationError(f"Invalid sort '{sort}', expected one of {', '.join(PRODUCT_SORT_ORDERS)}")

        products = self.repo.find_all()
        products = filter_products(products, filters or ProductFilters())
        products = search_products(products, search, settings.FUZZY_THRESHOLD)
        products = sort_products(products, sort)
        result = paginate(products, page, page_size or settings.PRODUCT_PAGE_SIZE)

        wishlisted = set(self.wishlist_repo.find_product_ids(user_id)) if user_id else set()
        return result, wishlisted

    def get_product(self, product_id: str) -> Product:
        product = self.repo.find_by_id(product_id)
        if not product:
            raise NotFoundError(f"Product {product_id} not found")
        return product

    def get_product_details(self, product_id: str, user_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Product with reviews, average rating and related products

        Related products come from ``related_product_ids``; without them, the
        best rated in-stock products of the same category are used.
        """
        product = self.get_product(product_id)
        reviews = self.repo.find_reviews(product_id)

        if product.related_product_ids:
            related = self.repo.find_by_ids(product.related_product_ids)
        elif product.category_id:
            related = [
                p for p in self.repo.find_by_categories([product.category_id], RELATED_LIMIT + 1)
                if p.id != product.id
            ]
        else:
            related = []

        wishlisted = bool(user_id) and self.wishlist_repo.contains(user_id, product_id)

        return {
            "product": product,
            "reviews": reviews,
            "average_rating": average_rating(reviews),
            "related": related[:RELATED_LIMIT],
            "wishlisted": wishlisted,
        }

    def get_products_by_shop(self, shop_id: str) -> List[Product]:
        if not self.shop_repo.find_by_id(shop_id):
            raise NotFoundError(f"Shop {shop_id} not found")
        return self.repo.find_by_shop(shop_id)

    def get_products_by_ids(self, product_ids: List[str]) -> List[Product]:
        return self.repo.find_by_ids(product_ids)

    def subscribe_stock_alert(self, user_id: str, product_id: str) -> None:
        """Ask to be notified when an out-of-stock product is back"""
        product = self.get_product(product_id)
        if product.in_stock:
            raise ValidationError(f"{product.name} is already in stock")
        self.repo.add_stock_alert(user_id, product_id)
        log_action("Stock alert subscribed", user_id=user_id, product_id=product_id)
