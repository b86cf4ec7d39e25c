from __future__ import annotations

from typing import List, Optional, Sequence, Set, Tuple

from sqlalchemy import and_, func, or_, select
from sqlalchemy.orm import Session

from storefront_admin.domain.repositories.base_sqlalchemy import SQLAlchemyRepository
from storefront_admin.models.category_model import Category
from storefront_admin.utils.logger import get_logger

logger = get_logger("category_repository")

SORTABLE_COLUMNS = {
    "created_at": Category.created_at,
    "updated_at": Category.updated_at,
    "name": Category.name,
    "slug": Category.slug,
    "level": Category.level,
    "sort_order": Category.sort_order,
}


class CategoryRepository(SQLAlchemyRepository[Category, str]):
    def __init__(self, db: Session):
        super().__init__(Category, db)

    # ---------- lookups ------------------------------------------------------
    def slugs_with_prefix(self, base: str, exclude_id: Optional[str] = None) -> Set[str]:
        """Slugs equal to ``base`` or of the form ``base-<anything>``."""
        stmt = select(Category.slug).where(
            or_(
                Category.slug == base,
                Category.slug.startswith(f"{base}-", autoescape=True),
            )
        )
        if exclude_id is not None:
            stmt = stmt.where(Category.category_id != exclude_id)
        return set(self.db.scalars(stmt).all())

    def children_of(self, parent_id: str) -> List[Category]:
        stmt = (
            select(Category)
            .where(Category.parent_id == parent_id)
            .order_by(Category.sort_order, Category.name)
        )
        return list(self.db.scalars(stmt).all())

    def count_children(self, parent_id: str) -> int:
        stmt = select(func.count(Category.category_id)).where(
            Category.parent_id == parent_id
        )
        return self.db.scalar(stmt) or 0

    def all_ordered(self) -> Sequence[Category]:
        stmt = select(Category).order_by(Category.sort_order, Category.name)
        return self.db.scalars(stmt).all()

    # ---------- listing ------------------------------------------------------
    def filter_paginated(
        self,
        *,
        search: Optional[str] = None,
        level: Optional[int] = None,
        is_active: Optional[bool] = None,
        sort_by: str = "created_at",
        descending: bool = True,
        offset: int = 0,
        limit: int = 10,
    ) -> Tuple[List[Category], int]:
        """Search OR-ed over name/description/slug, AND-ed with exact filters."""
        filters = []
        if search:
            filters.append(
                or_(
                    Category.name.icontains(search, autoescape=True),
                    Category.description.icontains(search, autoescape=True),
                    Category.slug.icontains(search, autoescape=True),
                )
            )
        if level is not None:
            filters.append(Category.level == level)
        if is_active is not None:
            filters.append(Category.is_active == is_active)

        where = and_(*filters) if filters else None

        count_stmt = select(func.count(Category.category_id))
        stmt = select(Category)
        if where is not None:
            count_stmt = count_stmt.where(where)
            stmt = stmt.where(where)

        column = SORTABLE_COLUMNS.get(sort_by, Category.created_at)
        ordering = column.desc() if descending else column.asc()
        # category_id keeps page boundaries stable when the sort key ties
        stmt = stmt.order_by(ordering, Category.category_id).offset(offset).limit(limit)

        total = self.db.scalar(count_stmt) or 0
        items = list(self.db.scalars(stmt).all())
        logger.debug(
            f"Repository: category filter search={search!r} level={level} "
            f"is_active={is_active} -> {len(items)} of {total}"
        )
        return items, total
