"""Tests for permission names and grants."""

import unittest

from stormcloud.auth.permissions import (
    ASSOCIATE,
    READ_ALL,
    WRITE,
    WRITE_ALL,
    Permission,
    document_permission,
)
from stormcloud.errors import UnknownResourceTypeError, ValidationError

DOCUMENT_TYPES = ["match", "data", "pit", "note"]


class PermissionTestCase(unittest.TestCase):
    """Test case for the Permission capability."""

    def test_names(self):
        """Test how permissions render."""
        self.assertEqual(READ_ALL.name, "READ_ALL")
        self.assertEqual(str(WRITE_ALL), "WRITE_ALL")
        self.assertEqual(ASSOCIATE.name, "ASSOCIATE")
        self.assertEqual(Permission(WRITE, "PIT").name, "WRITE_PIT")

    def test_parse(self):
        """Test that stored names parse back to the same permission."""
        self.assertEqual(Permission.parse("write_pit"), Permission(WRITE, "PIT"))
        self.assertEqual(Permission.parse("ASSOCIATE"), ASSOCIATE)
        self.assertEqual(Permission.parse(" READ_ALL "), READ_ALL)

    def test_parse_rejects_invalid_names(self):
        """Test that unknown actions and malformed names are refused."""
        for name in ("FLY_ALL", "WRITE", "ASSOCIATE_PIT", "", None):
            with self.subTest(name=name):
                with self.assertRaises(ValidationError):
                    Permission.parse(name)

    def test_exact_grant(self):
        """Test that a permission is granted by its own name."""
        self.assertTrue(Permission(WRITE, "PIT").is_granted_by(["WRITE_PIT"]))
        self.assertTrue(ASSOCIATE.is_granted_by(["ASSOCIATE"]))

    def test_all_grant_covers_every_type(self):
        """Test that WRITE_ALL covers WRITE_<TYPE>."""
        self.assertTrue(Permission(WRITE, "NOTE").is_granted_by(["WRITE_ALL"]))

    def test_grant_does_not_cross_actions_or_types(self):
        """Test that grants are scoped to their action and type."""
        self.assertFalse(Permission(WRITE, "PIT").is_granted_by(["WRITE_MATCH"]))
        self.assertFalse(Permission(WRITE, "PIT").is_granted_by(["READ_ALL"]))
        self.assertFalse(WRITE_ALL.is_granted_by(["WRITE_PIT"]))
        self.assertFalse(ASSOCIATE.is_granted_by([]))

    def test_document_permission(self):
        """Test that document permissions are built from known types only."""
        self.assertEqual(
            document_permission(WRITE, "Pit", DOCUMENT_TYPES), Permission(WRITE, "PIT")
        )
        with self.assertRaises(UnknownResourceTypeError):
            document_permission(WRITE, "robot", DOCUMENT_TYPES)
        with self.assertRaises(UnknownResourceTypeError):
            document_permission(WRITE, None, DOCUMENT_TYPES)


if __name__ == "__main__":
    unittest.main()
