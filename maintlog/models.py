"""Context and record model — immutable field maps with case-insensitive lookup."""

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

# Field names set by the parser itself; anything else comes from Comment lines
# or status lines and is free-form.
COMPUTER_NAME = "ComputerName"
INSTANCE_NAME = "InstanceName"
SQL_INSTANCE_NAME = "SqlInstanceName"
DATABASE = "Database"
INDEX = "Index"
SCHEMA = "Schema"
TABLE = "Table"
ACTION = "Action"
OPTIONS = "Options"
OUTCOME = "Outcome"
DURATION = "Duration"
END_TIME = "EndTime"


class FieldMap(Mapping):
    """Read-only str -> str mapping whose keys compare case-insensitively.

    The spelling a key was first stored with is kept for output. Every
    "mutation" returns a new map, so a clone can never be changed through
    its parent and vice versa.
    """

    __slots__ = ("_data",)

    def __init__(self, fields: Mapping[str, str] | None = None):
        # lower-cased key -> (original key, value)
        self._data: dict[str, tuple[str, str]] = {}
        for key, value in (fields or {}).items():
            self._store(key, value)

    def _store(self, key: str, value: str) -> None:
        folded = key.lower()
        original = self._data[folded][0] if folded in self._data else key
        self._data[folded] = (original, value)

    def merge(self, fields: Mapping[str, str]):
        """Return a copy with *fields* set on top of this map's fields."""
        clone = self.__class__.__new__(self.__class__)
        clone._data = dict(self._data)
        for key, value in fields.items():
            clone._store(key, value)
        return clone

    def __getitem__(self, key: str) -> str:
        return self._data[key.lower()][1]

    def __contains__(self, key) -> bool:
        return isinstance(key, str) and key.lower() in self._data

    def __iter__(self) -> Iterator[str]:
        return (original for original, _ in self._data.values())

    def __len__(self) -> int:
        return len(self._data)

    def to_dict(self) -> dict[str, str]:
        return {original: value for original, value in self._data.values()}

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.to_dict()!r})"


class IndexActionRecord(FieldMap):
    """One index-maintenance action: identity, database and index fields."""

    __slots__ = ()

    @property
    def computer_name(self) -> str | None:
        return self.get(COMPUTER_NAME)

    @property
    def instance_name(self) -> str | None:
        return self.get(INSTANCE_NAME)

    @property
    def sql_instance_name(self) -> str | None:
        return self.get(SQL_INSTANCE_NAME)

    @property
    def database(self) -> str | None:
        return self.get(DATABASE)

    @property
    def index(self) -> str | None:
        return self.get(INDEX)

    @property
    def schema(self) -> str | None:
        return self.get(SCHEMA)

    @property
    def table(self) -> str | None:
        return self.get(TABLE)

    @property
    def action(self) -> str | None:
        return self.get(ACTION)

    @property
    def options(self) -> str | None:
        return self.get(OPTIONS)

    @property
    def outcome(self) -> str | None:
        return self.get(OUTCOME)

    @property
    def duration(self) -> str | None:
        return self.get(DURATION)

    @property
    def end_time(self) -> str | None:
        return self.get(END_TIME)


@dataclass(frozen=True)
class Identity:
    """Who produced a set of log files. Shared read-only by every record."""

    computer_name: str
    instance_name: str
    sql_instance_name: str
    log_directory: str = ""

    def to_fields(self) -> FieldMap:
        return FieldMap({
            COMPUTER_NAME: self.computer_name,
            INSTANCE_NAME: self.instance_name,
            SQL_INSTANCE_NAME: self.sql_instance_name,
        })
