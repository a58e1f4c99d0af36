"""
Tests for the internal helpers.

This module verifies:
- The Unset sentinel: singleton identity, falsy semantics, stable repr,
  copy/pickle identity.
- coalesce(): only Unset is replaced.
- @rename(): stable names on generated callables.
- Introspectable: typename derivation, read-only mirrors and repr.
"""
import copy
import pickle
import unittest
from unittest import TestCase

from rostrum.utils import Introspectable, Unset, UnsetType, coalesce, rename


class UnsetTest(TestCase):
    """
    Test suite for the `Unset` singleton.
    """

    def testSingleton(self) -> None:
        self.assertIs(Unset, UnsetType())
        self.assertIs(UnsetType(), UnsetType())

    def testFalsely(self) -> None:
        self.assertFalse(bool(Unset))

    def testNotEqualToNoneOrFalse(self) -> None:
        """
        Falsy does not imply equality with other falsy values.
        """
        self.assertNotEqual(Unset, None)
        self.assertNotEqual(Unset, False)  # noqa: E712
        self.assertNotEqual(Unset, 0)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testUnionWithTypes(self) -> None:
        """
        Unset takes part in isinstance unions on either side.
        """
        self.assertIsInstance(Unset, str | Unset)
        self.assertIsInstance("text", str | Unset)
        self.assertIsInstance(Unset, Unset | int)
        self.assertNotIsInstance(1.5, str | Unset)

    def testCopyDeepcopyPreserveSingleton(self) -> None:
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy(Unset), Unset)

    def testPickleRoundTrip(self) -> None:
        self.assertIs(pickle.loads(pickle.dumps(Unset)), Unset)


class CoalesceTest(TestCase):

    def testUnsetIsReplaced(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(Unset))

    def testFalseyValuesPassThrough(self) -> None:
        self.assertEqual(coalesce(0, 7), 0)
        self.assertEqual(coalesce("", "x"), "")
        self.assertIs(coalesce(False, True), False)
        self.assertIsNone(coalesce(None, "x"))


class RenameTest(TestCase):

    def testDecoratorForm(self) -> None:
        @rename("helper")
        def anonymous():
            pass

        self.assertEqual(anonymous.__name__, "helper")

    def testRejectsBadArguments(self) -> None:
        with self.assertRaises(TypeError):
            rename(1)
        with self.assertRaises(TypeError):
            rename("name")(1)


class IntrospectableTest(TestCase):

    def setUp(self) -> None:
        class SampleRecord(metaclass=Introspectable):
            __introspectable__ = ("items", "label")

            def __init__(self, items, label):
                self._items = items
                self._label = label

        self.type = SampleRecord

    def testTypename(self) -> None:
        self.assertEqual(self.type.__typename__, "sample-record")

    def testMirrorsAreReadOnly(self) -> None:
        record = self.type(["a", "b"], "x")
        self.assertEqual(record.items, ("a", "b"))
        with self.assertRaises(AttributeError):
            record.label = "y"

    def testMirrorsSealContainers(self) -> None:
        record = self.type({"k": 1}, "x")
        with self.assertRaises(TypeError):
            record.items["k"] = 2  # NOQA: mapping proxy

    def testRepr(self) -> None:
        record = self.type(["a"], "x")
        self.assertEqual(repr(record), "sample-record(items=('a',), label='x')")


if __name__ == '__main__':
    unittest.main()
