"""Tests for maintlog/filters.py"""

import unittest
from argparse import Namespace

from maintlog.filters import (
    build_filter_chain,
    filter_by_action,
    filter_by_database,
    filter_by_outcome,
    filter_by_table,
)
from maintlog.models import IndexActionRecord


def _record(**fields):
    base = {
        "Database": "AdventureWorks",
        "Schema": "dbo",
        "Table": "Orders",
        "Index": "PK_Orders",
        "Action": "REBUILD",
        "Outcome": "Succeeded",
    }
    base.update(fields)
    return IndexActionRecord(base)


def _args(**kwargs):
    defaults = {"database": None, "table": None, "outcome": None, "action": None}
    defaults.update(kwargs)
    return Namespace(**defaults)


class TestPredicates(unittest.TestCase):
    def test_database_case_insensitive(self):
        self.assertTrue(filter_by_database(_record(), "adventureworks"))
        self.assertFalse(filter_by_database(_record(), "Inventory"))

    def test_table_name_only(self):
        self.assertTrue(filter_by_table(_record(), "orders"))

    def test_table_with_schema(self):
        self.assertTrue(filter_by_table(_record(), "dbo.Orders"))
        self.assertFalse(filter_by_table(_record(), "Sales.Orders"))

    def test_outcome(self):
        self.assertTrue(filter_by_outcome(_record(Outcome="Failed"), "failed"))
        self.assertFalse(filter_by_outcome(_record(), "failed"))

    def test_missing_field_never_matches(self):
        record = IndexActionRecord({"Database": "db"})
        self.assertFalse(filter_by_outcome(record, "Succeeded"))
        self.assertFalse(filter_by_action(record, "REBUILD"))


class TestBuildFilterChain(unittest.TestCase):
    def test_no_filters_pass_everything(self):
        fn = build_filter_chain(_args())
        self.assertTrue(fn(_record()))

    def test_filters_are_anded(self):
        fn = build_filter_chain(_args(database="AdventureWorks", action="REORGANIZE"))
        self.assertFalse(fn(_record()))
        self.assertTrue(fn(_record(Action="REORGANIZE")))

    def test_missing_attributes_ignored(self):
        fn = build_filter_chain(Namespace())
        self.assertTrue(fn(_record()))


if __name__ == "__main__":
    unittest.main()
