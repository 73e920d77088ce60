"""
Wishlist Service
Wishlist management, move-to-cart and shareable wishlist links
"""
import logging
from typing import Dict, List, Optional

from supermall.core.config import settings
from supermall.core.errors import NotFoundError, ValidationError
from supermall.core.logging_config import log_action
from supermall.domain.product import Product
from supermall.repositories.cart_repository import CartRepository
from supermall.repositories.product_repository import ProductRepository
from supermall.repositories.wishlist_repository import WishlistRepository
from supermall.utils.auth_helpers import generate_secure_token

logger = logging.getLogger(__name__)

SHARE_TOKEN_LENGTH = 24


class WishlistService:

    def __init__(
        self,
        repo: Optional[WishlistRepository] = None,
        product_repo: Optional[ProductRepository] = None,
        cart_repo: Optional[CartRepository] = None,
    ):
        self.repo = repo or WishlistRepository()
        self.product_repo = product_repo or ProductRepository()
        self.cart_repo = cart_repo or CartRepository()

    def _require_product(self, product_id: str) -> Product:
        product = self.product_repo.find_by_id(product_id)
        if not product:
            raise NotFoundError(f"Product {product_id} not found")
        return product

    def list_wishlist(self, user_id: str) -> List[Product]:
        """Wishlisted products, most recently added first"""
        return self.product_repo.find_by_ids(self.repo.find_product_ids(user_id))

    def add(self, user_id: str, product_id: str) -> None:
        self._require_product(product_id)
        self.repo.add(user_id, product_id)
        log_action("Wishlist item added", user_id=user_id, product_id=product_id)

    def remove(self, user_id: str, product_id: str) -> None:
        if not self.repo.remove(user_id, product_id):
            raise NotFoundError("Product is not in the wishlist")
        log_action("Wishlist item removed", user_id=user_id, product_id=product_id)

    def toggle(self, user_id: str, product_id: str) -> bool:
        """Add or remove, returns True when the product ends up wishlisted"""
        if self.repo.contains(user_id, product_id):
            self.remove(user_id, product_id)
            return False
        self.add(user_id, product_id)
        return True

    def move_to_cart(self, user_id: str, product_id: str) -> int:
        """
        Move a wishlisted product into the cart

        Returns:
            Quantity of the product now in the cart
        """
        if not self.repo.contains(user_id, product_id):
            raise NotFoundError("Product is not in the wishlist")
        product = self._require_product(product_id)
        if not product.in_stock:
            raise ValidationError(f"{product.name} is out of stock")

        quantity = self.cart_repo.add(user_id, product_id, 1)
        self.repo.remove(user_id, product_id)
        log_action("Wishlist item moved to cart", user_id=user_id, product_id=product_id)
        return quantity

    def create_share_link(self, user_id: str) -> Dict[str, str]:
        """Freeze the current wishlist behind a random token"""
        product_ids = self.repo.find_product_ids(user_id)
        if not product_ids:
            raise ValidationError("Your wishlist is empty")

        token = generate_secure_token(SHARE_TOKEN_LENGTH)
        self.repo.create_share(token, user_id, product_ids)
        log_action("Wishlist shared", user_id=user_id, items=len(product_ids))
        return {
            "token": token,
            "url": f"{settings.PUBLIC_APP_URL.rstrip('/')}/wishlist/shared/{token}",
        }

    def get_shared(self, token: str) -> List[Product]:
        product_ids = self.repo.find_share(token)
        if product_ids is None:
            raise NotFoundError("Shared wishlist not found")
        return self.product_repo.find_by_ids(product_ids)
