"""URL-safe, collision-free slugs for categories."""

import re
from typing import Optional, Protocol, Set

from storefront_admin.utils.logger import get_logger

logger = get_logger("slug_generator")

FALLBACK_SLUG = "category"

_DISALLOWED = re.compile(r"[^a-z0-9\s-]")
_WHITESPACE = re.compile(r"\s+")
_HYPHENS = re.compile(r"-+")


class SlugLookup(Protocol):
    def slugs_with_prefix(self, base: str, exclude_id: Optional[str] = None) -> Set[str]: ...


def slugify(text: str) -> str:
    """Lowercase, keep ``[a-z0-9]``, whitespace and hyphens, then hyphenate.

    >>> slugify("Men's Shoes")
    'mens-shoes'
    """
    slug = _DISALLOWED.sub("", (text or "").lower())
    slug = _WHITESPACE.sub("-", slug.strip())
    slug = _HYPHENS.sub("-", slug)
    return slug.strip("-")


class SlugGenerator:
    """Derives unique slugs, appending ``-1``, ``-2``... on collision."""

    def __init__(self, repository: SlugLookup, max_length: int = 100):
        self.repository = repository
        self.max_length = max_length

    def base_slug(self, name: str) -> str:
        slug = slugify(name)[: self.max_length].strip("-")
        return slug or FALLBACK_SLUG

    def generate(self, name: str, exclude_id: Optional[str] = None) -> str:
        """Return a slug for ``name`` unused by any category except ``exclude_id``."""
        base = self.base_slug(name)
        taken = self.repository.slugs_with_prefix(base, exclude_id=exclude_id)
        if base not in taken:
            return base

        heads_seen = {base}
        counter = 1
        while True:
            head = self._head_for(base, counter)
            if head not in heads_seen:
                # Shortened to fit the suffix, so other slugs may share it
                taken |= self.repository.slugs_with_prefix(head, exclude_id=exclude_id)
                heads_seen.add(head)
            candidate = f"{head}-{counter}"
            if candidate not in taken:
                logger.debug(f"Slug '{base}' taken, using '{candidate}'")
                return candidate
            counter += 1

    def _head_for(self, base: str, counter: int) -> str:
        room = self.max_length - len(f"-{counter}")
        return base[:room].rstrip("-") or FALLBACK_SLUG
