from fastapi import Depends
from sqlalchemy.orm import Session

from storefront_admin.db.session import get_db
from storefront_admin.domain.unit_of_work import UnitOfWork
from storefront_admin.services.category_service import CategoryService


__all__ = ["get_db", "get_uow", "get_category_service"]


def get_uow(db: Session = Depends(get_db)) -> UnitOfWork:
    """Get a Unit of Work instance for dependency injection."""
    return UnitOfWork(db)


def get_category_service(
    uow: UnitOfWork = Depends(get_uow),
) -> CategoryService:
    return CategoryService(uow)
