from unittest.mock import MagicMock

import pytest

from storefront_admin.domain.services.slug_generator import (
    FALLBACK_SLUG,
    SlugGenerator,
    slugify,
)


class TestSlugify:
    """Normalization rules, independent of the store."""

    @pytest.mark.parametrize(
        "name, expected",
        [
            ("Men's Shoes", "mens-shoes"),
            ("  Gaming   Laptops  ", "gaming-laptops"),
            ("Rock -- Roll", "rock-roll"),
            ("-Leading and trailing-", "leading-and-trailing"),
            ("Tabs\tand\nnewlines", "tabs-and-newlines"),
            ("snake_case_name", "snakecasename"),
            ("Café Crème", "caf-crme"),
            ("4K TVs & Monitors", "4k-tvs-monitors"),
        ],
    )
    def test_normalizes(self, name, expected):
        assert slugify(name) == expected

    def test_empty_and_none(self):
        assert slugify("") == ""
        assert slugify(None) == ""


class TestSlugGenerator:
    @pytest.fixture
    def repo(self):
        repo = MagicMock()
        repo.slugs_with_prefix.return_value = set()
        return repo

    @pytest.fixture
    def generator(self, repo):
        return SlugGenerator(repo, max_length=100)

    def test_unused_slug_is_returned_unchanged(self, generator, repo):
        assert generator.generate("Men's Shoes") == "mens-shoes"
        repo.slugs_with_prefix.assert_called_once_with("mens-shoes", exclude_id=None)

    def test_first_free_suffix_is_used(self, generator, repo):
        repo.slugs_with_prefix.return_value = {"mens-shoes"}
        assert generator.generate("Men's Shoes") == "mens-shoes-1"

        repo.slugs_with_prefix.return_value = {"mens-shoes", "mens-shoes-1"}
        assert generator.generate("Men's Shoes") == "mens-shoes-2"

    def test_gap_in_suffixes_is_filled(self, generator, repo):
        repo.slugs_with_prefix.return_value = {"mens-shoes", "mens-shoes-2"}
        assert generator.generate("Men's Shoes") == "mens-shoes-1"

    def test_suffixed_slug_alone_does_not_block_base(self, generator, repo):
        repo.slugs_with_prefix.return_value = {"mens-shoes-1"}
        assert generator.generate("Men's Shoes") == "mens-shoes"

    def test_exclude_id_is_forwarded(self, generator, repo):
        generator.generate("Sneakers", exclude_id="abc")
        repo.slugs_with_prefix.assert_called_once_with("sneakers", exclude_id="abc")

    def test_punctuation_only_name_falls_back(self, generator):
        assert generator.generate("!!!") == FALLBACK_SLUG

    def test_long_names_are_truncated(self, generator):
        slug = generator.generate("word " * 40)
        assert len(slug) <= 100
        assert not slug.endswith("-")

    def test_suffix_shortens_base_to_fit(self, repo):
        base = "a" * 20
        taken_by_prefix = {base: {base}, "a" * 18: set()}
        repo.slugs_with_prefix.side_effect = (
            lambda prefix, exclude_id=None: taken_by_prefix.get(prefix, set())
        )
        generator = SlugGenerator(repo, max_length=20)

        slug = generator.generate(base)

        assert slug == "a" * 18 + "-1"
        assert len(slug) == 20
