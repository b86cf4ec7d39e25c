# tests/unit/test_tree_validator.py
import unittest
from unittest.mock import MagicMock

from storefront_admin.domain.exceptions import CategoryHasChildren, InvalidParent
from storefront_admin.domain.services.tree_validator import TreeMutationValidator
from storefront_admin.models.category_model import Category


class TestTreeMutationValidator(unittest.TestCase):
    def setUp(self):
        # electronics > laptops > gaming
        self.nodes = {
            "electronics": Category(category_id="electronics", parent_id=None),
            "laptops": Category(category_id="laptops", parent_id="electronics"),
            "gaming": Category(category_id="gaming", parent_id="laptops"),
            "phones": Category(category_id="phones", parent_id=None),
        }
        self.mock_repo = MagicMock()
        self.mock_repo.get.side_effect = self.nodes.get
        self.validator = TreeMutationValidator(self.mock_repo)

    def test_self_parent_rejected(self):
        with self.assertRaises(InvalidParent) as cm:
            self.validator.check_parent("laptops", "laptops")
        self.assertEqual(cm.exception.error_code, "INVALID_PARENT")
        self.assertIn("its own parent", cm.exception.message)

    def test_no_parent_always_allowed(self):
        self.validator.check_parent("laptops", None)
        self.mock_repo.get.assert_not_called()

    def test_unrelated_parent_allowed(self):
        self.validator.check_parent("laptops", "phones")

    def test_moving_under_sibling_subtree_allowed(self):
        self.validator.check_parent("phones", "gaming")

    def test_descendant_as_parent_rejected(self):
        with self.assertRaises(InvalidParent) as cm:
            self.validator.check_parent("electronics", "gaming")
        self.assertIn("subcategories", cm.exception.message)

    def test_shallow_mode_only_blocks_self_parent(self):
        validator = TreeMutationValidator(self.mock_repo, deep_cycle_check=False)

        validator.check_parent("electronics", "gaming")
        with self.assertRaises(InvalidParent):
            validator.check_parent("gaming", "gaming")
        self.mock_repo.get.assert_not_called()

    def test_corrupt_chain_does_not_loop_forever(self):
        self.nodes["x"] = Category(category_id="x", parent_id="y")
        self.nodes["y"] = Category(category_id="y", parent_id="x")

        self.validator.check_parent("electronics", "x")

    def test_delete_guard_singular(self):
        self.mock_repo.count_children.return_value = 1

        with self.assertRaises(CategoryHasChildren) as cm:
            self.validator.check_delete(self.nodes["electronics"])

        self.assertEqual(cm.exception.count, 1)
        self.assertIn("contains 1 subcategory.", cm.exception.message)
        self.mock_repo.count_children.assert_called_once_with("electronics")

    def test_delete_guard_plural(self):
        self.mock_repo.count_children.return_value = 3

        with self.assertRaises(CategoryHasChildren) as cm:
            self.validator.check_delete(self.nodes["electronics"])

        self.assertEqual(cm.exception.count, 3)
        self.assertIn("contains 3 subcategories.", cm.exception.message)

    def test_delete_leaf_allowed(self):
        self.mock_repo.count_children.return_value = 0
        self.validator.check_delete(self.nodes["gaming"])


if __name__ == "__main__":
    unittest.main()
