import uuid
from typing import Any

import sqlalchemy as sa
from sqlalchemy import JSON, Boolean, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from storefront_admin.db.base import Base, TimestampMixin


def new_category_id() -> str:
    return str(uuid.uuid4())


class Category(TimestampMixin, Base):
    """A node in the storefront category tree.

    ``ancestors`` is the materialized root-to-parent path, each entry a stub
    ``{"category_id", "name", "slug"}``; ``level`` always equals its length.
    """

    __tablename__ = "categories"
    __table_args__ = (
        sa.Index("idx_category_parent_sort", "parent_id", "sort_order"),
        sa.Index("idx_category_level", "level"),
        sa.Index("idx_category_is_active", "is_active"),
    )

    category_id: Mapped[str] = mapped_column(
        String(36), primary_key=True, default=new_category_id
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), unique=True, nullable=False)
    description: Mapped[str] = mapped_column(Text, default="", nullable=False)
    image: Mapped[str] = mapped_column(String(500), default="", nullable=False)

    parent_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("categories.category_id"), nullable=True, index=True
    )
    ancestors: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, default=list, nullable=False
    )
    level: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    meta_title: Mapped[str] = mapped_column(String(100), default="", nullable=False)
    meta_description: Mapped[str] = mapped_column(
        String(160), default="", nullable=False
    )

    def stub(self) -> dict[str, Any]:
        """The entry this node contributes to its children's ancestor paths."""
        return {"category_id": self.category_id, "name": self.name, "slug": self.slug}

    def __repr__(self) -> str:
        return f"<Category {self.slug!r} level={self.level}>"
