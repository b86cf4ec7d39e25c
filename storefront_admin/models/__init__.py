from storefront_admin.models.category_model import Category

__all__ = [
    "Category",
]
