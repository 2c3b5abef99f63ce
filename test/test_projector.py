# python
"""
Projector module behavioral tests (record type and initial values).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import gc
import unittest
import weakref
from unittest import TestCase

from argot import Option, Positional, Schema
from argot.projector import initialize, project


class TestProject(TestCase):
    """Behavioral tests for the projected Namespace record."""

    def setUp(self):
        self.schema = Schema(
            Positional("cux"),
            Option("foo", "-f"),
            Option("bar", "-b", nargs=1),
            Option("baz", "-z", nargs=2),
        )

    def testFieldsOptionsFirst(self):
        self.assertEqual(project(self.schema)._fields, ("foo", "bar", "baz", "cux"))

    def testRecordName(self):
        self.assertEqual(project(self.schema).__name__, "Namespace")

    def testFieldTypes(self):
        annotations = project(self.schema).__annotations__
        self.assertIs(annotations["foo"], bool)
        self.assertIs(annotations["bar"], str)
        self.assertEqual(annotations["baz"], tuple[str, ...])
        self.assertIs(annotations["cux"], str)

    def testSchemaKeepsItsRecordType(self):
        self.assertIs(self.schema.namespace, self.schema.namespace)
        self.assertEqual(self.schema.namespace._fields, project(self.schema)._fields)

    def testSchemaIsCollectable(self):
        schema = Schema(Option("foo", "-f"))
        self.assertEqual(schema.namespace._fields, ("foo",))
        reference = weakref.ref(schema)
        del schema
        gc.collect()
        self.assertIsNone(reference())

    def testRecordIsImmutable(self):
        record = project(self.schema)(foo=True, bar="x", baz=("a", "b"), cux="y")
        with self.assertRaises(AttributeError):
            record.foo = False

    def testEmptySchemaRecord(self):
        self.assertEqual(tuple(project(Schema())()), ())


class TestInitialize(TestCase):
    """Behavioral tests for initial field values."""

    def testZeroValues(self):
        schema = Schema(
            Option("foo", "-f"),
            Option("bar", "-b", nargs=1),
            Option("baz", "-z", nargs=3),
            Positional("cux"),
        )
        self.assertEqual(initialize(schema), {"foo": False, "bar": "", "baz": ("", "", ""), "cux": ""})

    def testDeclaredDefaults(self):
        schema = Schema(
            Option("bar", "-b", nargs=1, default="x"),
            Option("baz", "-z", nargs=2, default=("p", "q")),
        )
        self.assertEqual(initialize(schema), {"bar": "x", "baz": ("p", "q")})


if __name__ == "__main__":
    unittest.main()
