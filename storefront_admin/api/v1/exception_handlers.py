"""Exception handlers to translate domain exceptions to HTTP responses."""

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.responses import JSONResponse

from storefront_admin.domain.exceptions import (
    CategoryException,
    CategoryHasChildren,
    CategoryNotFound,
    DomainException,
    InvalidCategoryData,
    InvalidParent,
    ParentCategoryNotFound,
    PersistenceError,
    ValidationException,
)
from storefront_admin.utils.logger import get_logger

logger = get_logger("exception_handlers")


class DomainExceptionHandler:
    """Centralized handler for domain exceptions."""

    EXCEPTION_STATUS_MAP = {
        CategoryNotFound: status.HTTP_404_NOT_FOUND,
        ParentCategoryNotFound: status.HTTP_404_NOT_FOUND,
        InvalidParent: status.HTTP_400_BAD_REQUEST,
        CategoryHasChildren: status.HTTP_400_BAD_REQUEST,
        InvalidCategoryData: status.HTTP_400_BAD_REQUEST,
        PersistenceError: status.HTTP_500_INTERNAL_SERVER_ERROR,
    }

    BASE_EXCEPTION_STATUS_MAP = {
        CategoryException: status.HTTP_400_BAD_REQUEST,
        ValidationException: status.HTTP_400_BAD_REQUEST,
    }

    @classmethod
    def status_for(cls, exc: DomainException) -> int:
        status_code = cls.EXCEPTION_STATUS_MAP.get(type(exc))
        if status_code is None:
            for base_type, base_status in cls.BASE_EXCEPTION_STATUS_MAP.items():
                if isinstance(exc, base_type):
                    return base_status
            return status.HTTP_500_INTERNAL_SERVER_ERROR
        return status_code

    @classmethod
    def handle_domain_exception(cls, exc: DomainException) -> HTTPException:
        """Convert domain exception to HTTP exception."""
        return HTTPException(
            status_code=cls.status_for(exc),
            detail={
                "detail": exc.message,
                "error_code": exc.error_code,
                "type": exc.__class__.__name__,
            },
        )


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    http_exc = DomainExceptionHandler.handle_domain_exception(exc)
    if http_exc.status_code >= 500:
        logger.error(f"{request.method} {request.url.path} failed: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} rejected: {exc.error_code}")
    return JSONResponse(status_code=http_exc.status_code, content=http_exc.detail)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
