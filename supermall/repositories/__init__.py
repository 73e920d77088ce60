"""
Repository Layer - Data Access

This layer handles all database queries and returns domain models.
Repositories abstract away SQL details from business logic.
"""
from supermall.repositories.category_repository import CategoryRepository, LocationRepository
from supermall.repositories.shop_repository import ShopRepository
from supermall.repositories.product_repository import ProductRepository
from supermall.repositories.offer_repository import OfferRepository
from supermall.repositories.user_repository import UserRepository
from supermall.repositories.wishlist_repository import WishlistRepository
from supermall.repositories.cart_repository import CartRepository
from supermall.repositories.order_repository import OrderRepository
from supermall.repositories.comparison_repository import ComparisonRepository
from supermall.repositories.notification_repository import NotificationRepository
from supermall.repositories.session_repository import TwoFactorRepository, ChatSessionRepository

__all__ = [
    'CategoryRepository',
    'LocationRepository',
    'ShopRepository',
    'ProductRepository',
    'OfferRepository',
    'UserRepository',
    'WishlistRepository',
    'CartRepository',
    'OrderRepository',
    'ComparisonRepository',
    'NotificationRepository',
    'TwoFactorRepository',
    'ChatSessionRepository',
]
