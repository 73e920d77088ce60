"""
Domain Layer - Business Entities

This layer contains Pydantic models representing business entities.
These models enforce type safety and validation across the application.
"""
from supermall.domain.catalog import Category, Location
from supermall.domain.shop import Shop, Review, average_rating
from supermall.domain.product import Product, ProductVariant
from supermall.domain.offer import Offer
from supermall.domain.user import UserProfile, WishlistItem, Favorite, CartItem
from supermall.domain.order import Order, OrderItem, OrderStatus, ORDER_STATUSES

__all__ = [
    'Category',
    'Location',
    'Shop',
    'Review',
    'average_rating',
    'Product',
    'ProductVariant',
    'Offer',
    'UserProfile',
    'WishlistItem',
    'Favorite',
    'CartItem',
    'Order',
    'OrderItem',
    'OrderStatus',
    'ORDER_STATUSES',
]
