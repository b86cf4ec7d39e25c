"""Materialized ancestor paths for the category tree."""

from collections import deque
from typing import Any, Dict, List, NamedTuple, Optional, Protocol

from storefront_admin.domain.exceptions import ParentCategoryNotFound
from storefront_admin.models.category_model import Category
from storefront_admin.utils.logger import get_logger

logger = get_logger("ancestor_path")


class CategoryLookup(Protocol):
    def get(self, id_: str) -> Optional[Category]: ...

    def children_of(self, parent_id: str) -> List[Category]: ...


class AncestorPath(NamedTuple):
    ancestors: List[Dict[str, Any]]
    level: int


class AncestorPathMaintainer:
    """Computes ``ancestors``/``level`` from the parent's stored state."""

    def __init__(self, repository: CategoryLookup):
        self.repository = repository

    @staticmethod
    def path_below(parent: Category) -> AncestorPath:
        """Path of any direct child of ``parent``; the parent is trusted as stored."""
        ancestors = [dict(stub) for stub in (parent.ancestors or [])]
        ancestors.append(parent.stub())
        return AncestorPath(ancestors, parent.level + 1)

    def resolve(self, parent_id: Optional[str]) -> AncestorPath:
        if parent_id is None:
            return AncestorPath([], 0)
        parent = self.repository.get(parent_id)
        if parent is None:
            raise ParentCategoryNotFound(parent_id)
        return self.path_below(parent)

    @staticmethod
    def apply(category: Category, path: AncestorPath) -> None:
        category.ancestors = path.ancestors
        category.level = path.level

    def cascade(self, root: Category) -> int:
        """Re-resolve every descendant of ``root`` breadth-first.

        Returns how many descendants were rewritten.
        """
        updated = 0
        visited = {root.category_id}
        queue = deque([root])
        while queue:
            node = queue.popleft()
            path = self.path_below(node)
            for child in self.repository.children_of(node.category_id):
                if child.category_id in visited:
                    logger.warning(
                        f"Cycle through category {child.category_id} skipped during cascade"
                    )
                    continue
                visited.add(child.category_id)
                self.apply(child, path)
                queue.append(child)
                updated += 1
        return updated
