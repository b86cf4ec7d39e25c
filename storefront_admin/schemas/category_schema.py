from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, field_validator

NO_PARENT_MARKERS = {"", "none", "null", "undefined"}

SortField = Literal["created_at", "updated_at", "name", "slug", "level", "sort_order"]
SortOrder = Literal["asc", "desc"]


def _normalize_parent_id(value):
    # Admin forms submit "none"/"null" from the parent select
    if isinstance(value, str) and value.strip().lower() in NO_PARENT_MARKERS:
        return None
    return value


class CategorySchema:
    class Create(BaseModel):
        name: str
        slug: Optional[str] = None
        description: str = ""
        image: str = ""
        parent_id: Optional[str] = None
        meta_title: str = ""
        meta_description: str = ""
        sort_order: int = 0
        is_active: bool = True

        @field_validator("parent_id", mode="before")
        @classmethod
        def normalize_parent_id(cls, v):
            return _normalize_parent_id(v)

    class Update(BaseModel):
        name: Optional[str] = None
        slug: Optional[str] = None
        description: Optional[str] = None
        image: Optional[str] = None
        parent_id: Optional[str] = None
        meta_title: Optional[str] = None
        meta_description: Optional[str] = None
        sort_order: Optional[int] = None
        is_active: Optional[bool] = None

        @field_validator("parent_id", mode="before")
        @classmethod
        def normalize_parent_id(cls, v):
            return _normalize_parent_id(v)

    class Filter(BaseModel):
        search: Optional[str] = None
        level: Optional[int] = None
        is_active: Optional[bool] = None

    class Ancestor(BaseModel):
        category_id: str
        name: str
        slug: str

    class Out(BaseModel):
        category_id: str
        name: str
        slug: str
        description: str = ""
        image: str = ""
        parent_id: Optional[str] = None
        ancestors: List["CategorySchema.Ancestor"] = []
        level: int = 0
        sort_order: int = 0
        is_active: bool = True
        meta_title: str = ""
        meta_description: str = ""
        created_at: Optional[datetime] = None
        updated_at: Optional[datetime] = None

        model_config = ConfigDict(from_attributes=True)

    class Page(BaseModel):
        items: List["CategorySchema.Out"]
        total: int
        page: int
        limit: int
        pages: int

        model_config = ConfigDict(from_attributes=True)

    class TreeNode(BaseModel):
        category_id: str
        name: str
        slug: str
        level: int
        sort_order: int
        is_active: bool
        children: List["CategorySchema.TreeNode"] = []


CategorySchema.Out.model_rebuild()
CategorySchema.Page.model_rebuild()
CategorySchema.TreeNode.model_rebuild()
