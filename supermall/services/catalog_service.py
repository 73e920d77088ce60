"""
Catalog Service
Categories and mall locations
"""
import logging
from typing import List, Optional

from supermall.core.errors import NotFoundError, ValidationError
from supermall.core.logging_config import log_action
from supermall.domain.catalog import Category, Location
from supermall.repositories.category_repository import CategoryRepository, LocationRepository

logger = logging.getLogger(__name__)


class CategoryService:

    def __init__(self, repo: Optional[CategoryRepository] = None):
        self.repo = repo or CategoryRepository()

    def list_categories(self) -> List[Category]:
        return self.repo.find_all()

    def get_category(self, category_id: str) -> Category:
        category = self.repo.find_by_id(category_id)
        if not category:
            raise NotFoundError(f"Category {category_id} not found")
        return category

    def search_categories(self, term: Optional[str]) -> List[Category]:
        """Case-insensitive substring search on name and description"""
        categories = self.list_categories()
        if not term or not term.strip():
            return categories
        return [c for c in categories if c.matches(term)]

    def create_category(self, name: str, description: Optional[str] = None) -> Category:
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        category = self.repo.create(name.strip(), description)
        log_action("Category created", category_id=category.id, name=category.name)
        return category

    def update_category(self, category_id: str, name: str, description: Optional[str] = None) -> Category:
        if not name or not name.strip():
            raise ValidationError("Category name is required")
        if not self.repo.update(category_id, name.strip(), description):
            raise NotFoundError(f"Category {category_id} not found")
        log_action("Category updated", category_id=category_id)
        return self.get_category(category_id)

    def delete_category(self, category_id: str) -> None:
        if not self.repo.delete(category_id):
            raise NotFoundError(f"Category {category_id} not found")
        log_action("Category deleted", category_id=category_id)


class LocationService:

    def __init__(self, repo: Optional[LocationRepository] = None):
        self.repo = repo or LocationRepository()

    def list_locations(self) -> List[Location]:
        return self.repo.find_all()
