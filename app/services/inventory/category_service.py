"""
Category Service - CRUD operations for product categories.
"""
from __future__ import annotations

import logging
from typing import Sequence

from sqlalchemy import func, select

from app.core.exceptions import ConflictError
from app.models.inventory_models import Category, Product
from app.models.inventory_schemas import CategoryCreate, CategoryUpdate
from app.services.inventory.base import BaseInventoryService

logger = logging.getLogger(__name__)


class CategoryService(BaseInventoryService):
    """Service for product category operations."""

    def _ensure_unique_name(self, name: str, exclude_id: int | None = None) -> None:
        stmt = select(Category.id).where(Category.name == name)
        if exclude_id is not None:
            stmt = stmt.where(Category.id != exclude_id)
        if self._db.scalar(stmt) is not None:
            raise ConflictError("Category with same name already exists", {"name": name})

    def create_category(self, data: CategoryCreate) -> Category:
        with self._atomic():
            self._ensure_unique_name(data.name)
            category = Category(name=data.name, description=data.description)
            self._db.add(category)
            self._db.flush()
            self._audit("create", "category", category.id, name=category.name)
        logger.info("Created category: %s (id=%s)", category.name, category.id)
        return category

    def get_category(self, category_id: int) -> Category:
        return self._get_or_404(Category, category_id)

    def list_categories(
        self,
        search: str | None = None,
        page: int = 1,
        page_size: int = 10,
    ) -> tuple[Sequence[Category], int]:
        stmt = select(Category)
        if search:
            stmt = stmt.where(Category.name.ilike(f"%{search}%"))
        total = self._db.scalar(select(func.count()).select_from(stmt.subquery())) or 0
        categories = self._db.scalars(
            stmt.order_by(Category.name).offset((page - 1) * page_size).limit(page_size)
        ).all()
        return categories, total

    def update_category(self, category_id: int, data: CategoryUpdate) -> Category:
        with self._atomic():
            category = self.get_category(category_id)
            update_data = data.model_dump(exclude_unset=True)
            if update_data.get("name") is None:
                update_data.pop("name", None)
            elif update_data["name"] != category.name:
                self._ensure_unique_name(update_data["name"], exclude_id=category.id)
            for key, value in update_data.items():
                setattr(category, key, value)
            self._audit("update", "category", category.id, changes=update_data)
        logger.info("Updated category: %s (id=%s)", category.name, category.id)
        return category

    def delete_category(self, category_id: int) -> None:
        """Delete a category that no product references."""
        with self._atomic():
            category = self.get_category(category_id)
            in_use = self._db.scalar(
                select(func.count(Product.id)).where(Product.category_id == category.id)
            )
            if in_use:
                raise ConflictError(
                    "Cannot delete category with associated products",
                    {"product_count": in_use},
                )
            self._db.delete(category)
            self._audit("delete", "category", category_id, name=category.name)
        logger.info("Deleted category: %s (id=%s)", category.name, category_id)
