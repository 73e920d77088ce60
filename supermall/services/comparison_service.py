"""
Comparison Service
Per-user product comparison list (at most MAX_COMPARE_PRODUCTS)
"""
import logging
from typing import Any, Dict, Optional

from supermall.core.config import settings
from supermall.core.errors import NotFoundError, ValidationError
from supermall.core.logging_config import log_action
from supermall.repositories.comparison_repository import ComparisonRepository
from supermall.repositories.product_repository import ProductRepository
from supermall.utils.comparison import (
    DEFAULT_ATTRIBUTES,
    build_comparison_table,
    compare_attributes,
    get_difference_highlights,
)

logger = logging.getLogger(__name__)


class ComparisonService:

    def __init__(
        self,
        repo: Optional[ComparisonRepository] = None,
        product_repo: Optional[ProductRepository] = None,
        max_products: Optional[int] = None,
    ):
        self.repo = repo or ComparisonRepository()
        self.product_repo = product_repo or ProductRepository()
        self.max_products = max_products or settings.MAX_COMPARE_PRODUCTS

    def add(self, user_id: str, product_id: str) -> int:
        """
        Add a product to the comparison list

        Returns:
            Number of products now being compared
        """
        current = self.repo.find_product_ids(user_id)
        if product_id in current:
            return len(current)
        if len(current) >= self.max_products:
            raise ValidationError(f"You can compare at most {self.max_products} products")
        if not self.product_repo.find_by_id(product_id):
            raise NotFoundError(f"Product {product_id} not found")

        self.repo.add(user_id, product_id)
        log_action("Comparison product added", user_id=user_id, product_id=product_id)
        return len(current) + 1

    def remove(self, user_id: str, product_id: str) -> None:
        if not self.repo.remove(user_id, product_id):
            raise NotFoundError("Product is not in the comparison")
        log_action("Comparison product removed", user_id=user_id, product_id=product_id)

    def clear(self, user_id: str) -> int:
        removed = self.repo.clear(user_id)
        log_action("Comparison cleared", user_id=user_id, removed=removed)
        return removed

    def view(self, user_id: str) -> Dict[str, Any]:
        """Comparison table plus the attributes that differ"""
        products = self.product_repo.find_by_ids(self.repo.find_product_ids(user_id))
        comparison = compare_attributes(products, [key for key, _ in DEFAULT_ATTRIBUTES])
        return {
            "product_ids": [p.id for p in products],
            "table": build_comparison_table(products),
            "differences": get_difference_highlights(comparison) if len(products) > 1 else [],
        }
