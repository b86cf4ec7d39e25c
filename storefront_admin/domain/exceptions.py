"""Domain exceptions that represent business rule violations."""

from typing import Optional


class DomainException(Exception):
    """Base exception for all domain-related errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(message)


# Validation Domain Exceptions
class ValidationException(DomainException):
    """Base exception for validation errors."""


class InvalidCategoryData(ValidationException):
    """A category field failed validation."""

    def __init__(self, field: str, reason: str):
        self.field = field
        super().__init__(f"Invalid {field}: {reason}", "INVALID_CATEGORY_DATA")


# Category Domain Exceptions
class CategoryException(DomainException):
    """Base exception for category tree errors."""


class CategoryNotFound(CategoryException):
    """Category not found in the system."""

    def __init__(self, category_id: str, message: Optional[str] = None, error_code: str = "CATEGORY_NOT_FOUND"):
        self.category_id = category_id
        super().__init__(message or f"Category not found: {category_id}", error_code)


class ParentCategoryNotFound(CategoryNotFound):
    """The referenced parent category does not exist."""

    def __init__(self, parent_id: str):
        super().__init__(
            parent_id,
            f"Parent category not found: {parent_id}",
            "PARENT_CATEGORY_NOT_FOUND",
        )


class InvalidParent(CategoryException):
    """The requested parent would corrupt the tree."""

    def __init__(self, reason: str):
        super().__init__(reason, "INVALID_PARENT")


class CategoryHasChildren(CategoryException):
    """A category with subcategories cannot be deleted."""

    def __init__(self, count: int):
        self.count = count
        noun = "subcategories" if count > 1 else "subcategory"
        super().__init__(
            f"Cannot delete this category because it contains {count} {noun}. "
            "Please delete or move all subcategories first.",
            "CATEGORY_HAS_CHILDREN",
        )


# Infrastructure Exceptions
class PersistenceError(DomainException):
    """The store failed for a reason unrelated to business rules."""

    def __init__(self, operation: str, reason: str):
        self.operation = operation
        super().__init__(
            f"Failed to {operation} category: {reason}", "PERSISTENCE_ERROR"
        )
