"""Structural checks that keep the category tree acyclic and non-orphaning."""

from typing import Optional, Protocol

from storefront_admin.domain.exceptions import CategoryHasChildren, InvalidParent
from storefront_admin.models.category_model import Category


class TreeLookup(Protocol):
    def get(self, id_: str) -> Optional[Category]: ...

    def count_children(self, parent_id: str) -> int: ...


class TreeMutationValidator:
    """Rejects re-parenting that would form a cycle and deletes that orphan children."""

    def __init__(self, repository: TreeLookup, deep_cycle_check: bool = True):
        self.repository = repository
        self.deep_cycle_check = deep_cycle_check

    def check_parent(self, category_id: Optional[str], parent_id: Optional[str]) -> None:
        if parent_id is None or category_id is None:
            return
        if parent_id == category_id:
            raise InvalidParent("Category cannot be its own parent")
        if self.deep_cycle_check and self._is_descendant(parent_id, category_id):
            raise InvalidParent(
                "Category cannot be moved under one of its own subcategories"
            )

    def check_delete(self, category: Category) -> None:
        count = self.repository.count_children(category.category_id)
        if count > 0:
            raise CategoryHasChildren(count)

    def _is_descendant(self, candidate_id: str, category_id: str) -> bool:
        # Follows stored parent_id links; materialized paths may be stale.
        seen = set()
        current = self.repository.get(candidate_id)
        while current is not None and current.parent_id is not None:
            if current.parent_id == category_id:
                return True
            if current.parent_id in seen:
                return False
            seen.add(current.parent_id)
            current = self.repository.get(current.parent_id)
        return False
