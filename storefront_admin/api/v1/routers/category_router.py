from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from storefront_admin.api.v1.dependencies import get_category_service
from storefront_admin.core.config import settings
from storefront_admin.schemas.category_schema import CategorySchema, SortField, SortOrder
from storefront_admin.services.category_service import CategoryService
from storefront_admin.utils.logger import get_logger

logger = get_logger("category_router")


class CategoryRouter:
    def __init__(self):
        self.router = APIRouter(prefix="/categories", tags=["Categories"])
        self._register()

    def _register(self):
        # Static paths before /{category_id}
        self.router.get("/", response_model=CategorySchema.Page)(self._list_categories)
        self.router.post("/", response_model=CategorySchema.Out, status_code=status.HTTP_201_CREATED)(
            self._create_category
        )
        self.router.get("/tree", response_model=list[CategorySchema.TreeNode])(self._tree)
        self.router.get("/{category_id}", response_model=CategorySchema.Out)(self._get_category)
        self.router.get("/{category_id}/breadcrumb", response_model=list[CategorySchema.Ancestor])(
            self._breadcrumb
        )
        self.router.get("/{category_id}/children", response_model=list[CategorySchema.Out])(
            self._children
        )
        self.router.put("/{category_id}", response_model=CategorySchema.Out)(self._update_category)
        self.router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)(
            self._delete_category
        )

    async def _list_categories(
        self,
        search: Optional[str] = Query(None, description="Matches name, description or slug"),
        level: Optional[int] = Query(None, ge=0),
        is_active: Optional[bool] = Query(None),
        page: int = Query(1, ge=1),
        limit: int = Query(
            settings.category.default_page_size, ge=1, le=settings.category.max_page_size
        ),
        sort_by: SortField = Query("created_at"),
        order: SortOrder = Query("desc"),
        service: CategoryService = Depends(get_category_service),
    ):
        logger.info(f"Listing categories page={page} limit={limit}")
        filters = CategorySchema.Filter(search=search, level=level, is_active=is_active)
        return service.list_categories(filters, page=page, limit=limit, sort_by=sort_by, order=order)

    async def _create_category(
        self,
        payload: CategorySchema.Create,
        service: CategoryService = Depends(get_category_service),
    ):
        logger.info("Creating category")
        return service.create(payload)

    async def _tree(self, service: CategoryService = Depends(get_category_service)):
        logger.info("Listing category tree")
        return service.tree()

    async def _get_category(
        self, category_id: str, service: CategoryService = Depends(get_category_service)
    ):
        logger.info(f"Getting category {category_id}")
        return service.get(category_id)

    async def _breadcrumb(
        self, category_id: str, service: CategoryService = Depends(get_category_service)
    ):
        logger.info(f"Getting breadcrumb for category {category_id}")
        return service.breadcrumb(category_id)

    async def _children(
        self, category_id: str, service: CategoryService = Depends(get_category_service)
    ):
        logger.info(f"Listing children of category {category_id}")
        return service.children(category_id)

    async def _update_category(
        self,
        category_id: str,
        payload: CategorySchema.Update,
        service: CategoryService = Depends(get_category_service),
    ):
        logger.info(f"Updating category {category_id}")
        return service.update(category_id, payload)

    async def _delete_category(
        self, category_id: str, service: CategoryService = Depends(get_category_service)
    ):
        logger.info(f"Deleting category {category_id}")
        service.delete(category_id)
        return None


category_router = CategoryRouter().router
