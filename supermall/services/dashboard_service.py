"""
Dashboard Service
Aggregates for the user and admin dashboards
"""
import logging
from typing import Any, Dict, Optional

from supermall.core.errors import NotFoundError
from supermall.repositories.order_repository import OrderRepository
from supermall.repositories.product_repository import ProductRepository
from supermall.repositories.user_repository import UserRepository
from supermall.repositories.wishlist_repository import WishlistRepository

logger = logging.getLogger(__name__)

TOP_PRODUCTS_LIMIT = 5
RECENT_ORDERS_LIMIT = 100


class DashboardService:

    def __init__(
        self,
        user_repo: Optional[UserRepository] = None,
        order_repo: Optional[OrderRepository] = None,
        wishlist_repo: Optional[WishlistRepository] = None,
        product_repo: Optional[ProductRepository] = None,
    ):
        self.user_repo = user_repo or UserRepository()
        self.order_repo = order_repo or OrderRepository()
        self.wishlist_repo = wishlist_repo or WishlistRepository()
        self.product_repo = product_repo or ProductRepository()

    def user_dashboard(self, user_id: str) -> Dict[str, Any]:
        """Profile, order history and wishlisted products of one user"""
        profile = self.user_repo.find_by_id(user_id)
        if not profile:
            raise NotFoundError("Profile not found")

        orders = self.order_repo.find_by_user(user_id)
        wishlist = self.product_repo.find_by_ids(self.wishlist_repo.find_product_ids(user_id))

        return {
            "profile": profile.model_dump(),
            "orders": [order.to_dict() for order in orders],
            "wishlist": [product.to_dict() for product in wishlist],
        }

    def admin_dashboard(self) -> Dict[str, Any]:
        """
        Store-wide figures

        total_sales excludes cancelled orders.
        """
        total_sales = self.order_repo.total_sales()
        orders = self.order_repo.find_all(limit=RECENT_ORDERS_LIMIT)
        logger.debug(f"Admin dashboard: {len(orders)} recent orders loaded")

        return {
            "user_count": self.user_repo.count(),
            "total_sales": float(total_sales),
            "orders": [order.to_dict() for order in orders],
            "top_products": self.order_repo.top_products(TOP_PRODUCTS_LIMIT),
        }
