"""Filter predicates for index action records — database, table, outcome, action."""

from typing import Callable

from maintlog.models import IndexActionRecord


def _matches(value: str | None, wanted: str) -> bool:
    return value is not None and value.lower() == wanted.lower()


def filter_by_database(record: IndexActionRecord, database: str) -> bool:
    """True if the record's database matches (case-insensitive)."""
    return _matches(record.database, database)


def filter_by_table(record: IndexActionRecord, table: str) -> bool:
    """True if the record's table matches, either 'Orders' or 'dbo.Orders'."""
    if "." in table:
        schema, _, name = table.partition(".")
        return _matches(record.schema, schema) and _matches(record.table, name)
    return _matches(record.table, table)


def filter_by_outcome(record: IndexActionRecord, outcome: str) -> bool:
    return _matches(record.outcome, outcome)


def filter_by_action(record: IndexActionRecord, action: str) -> bool:
    return _matches(record.action, action)


def build_filter_chain(args) -> Callable[[IndexActionRecord], bool]:
    """Combine all active filters from parsed args into a single callable.

    Returns a function that ANDs all active predicates together.
    """
    predicates = []

    if getattr(args, "database", None):
        database = args.database
        predicates.append(lambda r, d=database: filter_by_database(r, d))

    if getattr(args, "table", None):
        table = args.table
        predicates.append(lambda r, t=table: filter_by_table(r, t))

    if getattr(args, "outcome", None):
        outcome = args.outcome
        predicates.append(lambda r, o=outcome: filter_by_outcome(r, o))

    if getattr(args, "action", None):
        action = args.action
        predicates.append(lambda r, a=action: filter_by_action(r, a))

    if not predicates:
        return lambda record: True

    def combined(record: IndexActionRecord) -> bool:
        return all(p(record) for p in predicates)

    return combined
