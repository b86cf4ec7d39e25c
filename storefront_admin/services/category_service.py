import math
import re
from typing import Any, Callable, Dict, List, Optional, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from storefront_admin.core.config import CategorySettings, settings
from storefront_admin.domain.exceptions import (
    CategoryNotFound,
    InvalidCategoryData,
    PersistenceError,
)
from storefront_admin.domain.services.ancestor_path import AncestorPathMaintainer
from storefront_admin.domain.services.slug_generator import SlugGenerator
from storefront_admin.domain.services.tree_validator import TreeMutationValidator
from storefront_admin.domain.unit_of_work import UnitOfWork
from storefront_admin.models.category_model import Category, new_category_id
from storefront_admin.schemas.category_schema import CategorySchema
from storefront_admin.utils.cache import cache
from storefront_admin.utils.logger import get_logger

logger = get_logger("category_service")

R = TypeVar("R")

CACHE_PREFIX = "categories"
HTML_TAGS = re.compile(r"<[^>]*>")

# Plain attributes copied from an update payload; slug and parent_id have rules.
UPDATABLE_FIELDS = (
    "name",
    "description",
    "image",
    "meta_title",
    "meta_description",
    "sort_order",
    "is_active",
)


def _is_slug_conflict(exc: IntegrityError) -> bool:
    return "slug" in str(exc.orig).lower()


class CategoryService:
    def __init__(self, uow: UnitOfWork, config: Optional[CategorySettings] = None):
        self.uow = uow
        self.config = config or settings.category
        self.slugs = SlugGenerator(uow.categories, max_length=self.config.max_slug_length)
        self.paths = AncestorPathMaintainer(uow.categories)
        self.validator = TreeMutationValidator(
            uow.categories, deep_cycle_check=self.config.deep_cycle_check
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def list_categories(
        self,
        filters: Optional[CategorySchema.Filter] = None,
        page: int = 1,
        limit: Optional[int] = None,
        sort_by: str = "created_at",
        order: str = "desc",
    ) -> Dict[str, Any]:
        """Return one page of categories plus paging totals."""
        filters = filters or CategorySchema.Filter()
        if limit is None:
            limit = self.config.default_page_size
        if page < 1:
            raise InvalidCategoryData("page", "must be at least 1")
        if not 1 <= limit <= self.config.max_page_size:
            raise InvalidCategoryData(
                "limit", f"must be between 1 and {self.config.max_page_size}"
            )

        search = (filters.search or "").strip() or None
        items, total = self.uow.categories.filter_paginated(
            search=search,
            level=filters.level,
            is_active=filters.is_active,
            sort_by=sort_by,
            descending=order != "asc",
            offset=(page - 1) * limit,
            limit=limit,
        )
        return {
            "items": items,
            "total": total,
            "page": page,
            "limit": limit,
            "pages": math.ceil(total / limit),
        }

    def get(self, category_id: str) -> Category:
        """Get a specific category by ID."""
        category = self.uow.categories.get(category_id)
        if category is None:
            raise CategoryNotFound(category_id)
        return category

    def children(self, category_id: str) -> List[Category]:
        """Direct subcategories in display order."""
        parent = self.get(category_id)
        return self.uow.categories.children_of(parent.category_id)

    @cache.cacheable(lambda self: f"{CACHE_PREFIX}:tree")
    def tree(self) -> List[Dict[str, Any]]:
        """Return all root categories with their children as a nested tree."""
        categories = self.uow.categories.all_ordered()
        nodes = {
            cat.category_id: {
                "category_id": cat.category_id,
                "name": cat.name,
                "slug": cat.slug,
                "level": cat.level,
                "sort_order": cat.sort_order,
                "is_active": cat.is_active,
                "children": [],
            }
            for cat in categories
        }

        roots = []
        for cat in categories:
            parent = nodes.get(cat.parent_id) if cat.parent_id else None
            if parent is None:
                roots.append(nodes[cat.category_id])
            else:
                parent["children"].append(nodes[cat.category_id])

        reachable = set()
        stack = list(roots)
        while stack:
            node = stack.pop()
            reachable.add(node["category_id"])
            stack.extend(node["children"])
        detached = [cid for cid in nodes if cid not in reachable]
        if detached:
            logger.warning(
                f"Category tree omits {len(detached)} categories caught in a parent cycle: {detached}"
            )
        return roots

    @cache.cacheable(
        lambda self, category_id: f"{CACHE_PREFIX}:breadcrumb:{category_id}"
    )
    def breadcrumb(self, category_id: str) -> List[Dict[str, Any]]:
        """Root-to-self trail built from the materialized path."""
        category = self.get(category_id)
        return [dict(stub) for stub in category.ancestors] + [category.stub()]

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------
    def create(self, payload: CategorySchema.Create) -> Category:
        """Create a category under an optional parent."""
        data = payload.model_dump()
        data["name"] = (data["name"] or "").strip()
        self._validate_fields(data)

        category = self._run_in_transaction("create", lambda: self._create(data))
        logger.info(
            f"Created category {category.category_id} '{category.slug}' at level {category.level}"
        )
        return category

    def update(self, category_id: str, payload: CategorySchema.Update) -> Category:
        """Apply a partial update; only parent_id may be explicitly cleared."""
        changes = {
            field: value
            for field, value in payload.model_dump(exclude_unset=True).items()
            if value is not None or field == "parent_id"
        }
        if "name" in changes:
            changes["name"] = changes["name"].strip()
        self._validate_fields(changes)

        category = self._run_in_transaction(
            "update", lambda: self._update(category_id, changes)
        )
        logger.info(f"Updated category {category.category_id} '{category.slug}'")
        return category

    def delete(self, category_id: str) -> None:
        """Delete a category that has no subcategories."""
        self._run_in_transaction("delete", lambda: self._delete(category_id))
        logger.info(f"Deleted category {category_id}")

    # ------------------------------------------------------------------
    # Use-case bodies, each run inside one unit of work
    # ------------------------------------------------------------------
    def _create(self, data: Dict[str, Any]) -> Category:
        category_id = new_category_id()
        parent_id = data.get("parent_id")
        self.validator.check_parent(category_id, parent_id)
        path = self.paths.resolve(parent_id)

        category = Category(
            category_id=category_id,
            name=data["name"],
            description=data.get("description") or "",
            image=data.get("image") or "",
            parent_id=parent_id,
            meta_title=data.get("meta_title") or "",
            meta_description=data.get("meta_description") or "",
            sort_order=data.get("sort_order") or 0,
            is_active=data.get("is_active") is not False,
        )
        category.slug = self.slugs.generate(
            (data.get("slug") or "").strip() or data["name"]
        )
        self.paths.apply(category, path)
        self._apply_seo_defaults(category)

        self.uow.categories.add(category)
        return category

    def _update(self, category_id: str, changes: Dict[str, Any]) -> Category:
        category = self.get(category_id)

        parent_supplied = "parent_id" in changes
        new_parent_id = changes.get("parent_id")
        if parent_supplied:
            self.validator.check_parent(category.category_id, new_parent_id)
            path = self.paths.resolve(new_parent_id)

        old_slug = category.slug
        renamed = "name" in changes and changes["name"] != category.name
        pinned_slug = (changes.get("slug") or "").strip()
        parent_changed = parent_supplied and new_parent_id != category.parent_id

        for field in UPDATABLE_FIELDS:
            if field in changes:
                setattr(category, field, changes[field])

        if pinned_slug:
            category.slug = self.slugs.generate(pinned_slug, exclude_id=category.category_id)
        elif renamed:
            category.slug = self.slugs.generate(category.name, exclude_id=category.category_id)
        if pinned_slug or renamed:
            self._apply_seo_defaults(category)

        if parent_supplied:
            category.parent_id = new_parent_id
            self.paths.apply(category, path)

        path_changed = renamed or parent_changed or category.slug != old_slug
        if path_changed and self.config.cascade_ancestors:
            touched = self.paths.cascade(category)
            if touched:
                logger.info(
                    f"Re-resolved ancestor paths of {touched} descendants of {category.category_id}"
                )
        return category

    def _delete(self, category_id: str) -> None:
        category = self.get(category_id)
        self.validator.check_delete(category)
        self.uow.categories.delete(category)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _run_in_transaction(self, operation: str, body: Callable[[], R]) -> R:
        """Run ``body`` in a unit of work, retrying when a concurrent writer took the slug."""
        attempts = max(1, self.config.slug_retry_attempts)
        last_error: Optional[IntegrityError] = None
        for attempt in range(1, attempts + 1):
            try:
                with self.uow:
                    result = body()
                cache.invalidate(CACHE_PREFIX)
                return result
            except IntegrityError as exc:
                if not _is_slug_conflict(exc):
                    raise PersistenceError(operation, str(exc.orig)) from exc
                logger.warning(
                    f"Slug conflict on {operation} (attempt {attempt}/{attempts}), retrying"
                )
                last_error = exc
            except SQLAlchemyError as exc:
                logger.error(f"Database error on {operation}: {exc}")
                raise PersistenceError(operation, str(exc)) from exc
        raise PersistenceError(operation, "slug still in conflict after retries") from last_error

    def _validate_fields(self, data: Dict[str, Any]) -> None:
        cfg = self.config
        if "name" in data:
            name = data["name"]
            if not name:
                raise InvalidCategoryData("name", "Category name is required")
            if len(name) < cfg.min_name_length:
                raise InvalidCategoryData(
                    "name", f"Category name must be at least {cfg.min_name_length} characters"
                )
            if len(name) > cfg.max_name_length:
                raise InvalidCategoryData(
                    "name", f"Category name must be less than {cfg.max_name_length} characters"
                )

        limits = {
            "slug": cfg.max_slug_length,
            "description": cfg.max_description_length,
            "meta_title": cfg.max_meta_title_length,
            "meta_description": cfg.max_meta_description_length,
        }
        for field, limit in limits.items():
            value = data.get(field)
            if value and len(value) > limit:
                raise InvalidCategoryData(field, f"must be less than {limit} characters")

        sort_order = data.get("sort_order")
        if sort_order is not None and sort_order < 0:
            raise InvalidCategoryData("sort_order", "must be zero or greater")

    def _apply_seo_defaults(self, category: Category) -> None:
        if not category.meta_title:
            category.meta_title = category.name
        if not category.meta_description and category.description:
            plain = HTML_TAGS.sub("", category.description)
            category.meta_description = plain[: self.config.meta_description_excerpt] + "..."
