import logging
import sqlite3
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

from lrcat.errors import CatalogError, RowDecodeError, SkipRow, UnsupportedVersionError
from lrcat.version import CatalogVersion

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Decode one row obtained through the query built from the same plan.
# Raises SkipRow for rows that do not belong to the entity, RowDecodeError for malformed rows.
Decoder = Callable[[sqlite3.Row], T]


@dataclass(frozen=True)
class Query(Generic[T]):
    """
    How to read one entity type for one schema generation
    """

    tables: str
    columns: str
    decode: Decoder
    join_filter: str | None = None

    @property
    def sql(self) -> str:
        sql = f"SELECT {self.columns} FROM {self.tables}"
        if self.join_filter:
            sql += f" WHERE {self.join_filter}"

        return sql


@dataclass(frozen=True)
class RowMapper(Generic[T]):
    """
    Per entity type: the query plan for each schema generation we know how to read
    """

    name: str
    queries: Mapping[CatalogVersion, Query[T]]

    def query_for(self, version: CatalogVersion) -> Query[T]:
        query = self.queries.get(version)
        if query is None:
            raise UnsupportedVersionError(version)

        return query

    def tables(self, version: CatalogVersion) -> str:
        return self.query_for(version).tables

    def columns(self, version: CatalogVersion) -> str:
        return self.query_for(version).columns

    def join_filter(self, version: CatalogVersion) -> str | None:
        return self.query_for(version).join_filter

    def decode(self, version: CatalogVersion, row: sqlite3.Row) -> T:
        return self.query_for(version).decode(row)


def same_query(versions: Iterable[CatalogVersion], query: Query[T]) -> dict[CatalogVersion, Query[T]]:
    """Use the same plan for several schema generations"""
    return {version: query for version in versions}


@dataclass(frozen=True)
class RowDiagnostic:
    """A row that was left out of a load, and why"""

    entity: str
    row_id: Any
    reason: str
    # True when the row was deliberately excluded (SkipRow), False when it failed to decode
    skipped: bool


@dataclass
class LoadResult(Generic[T]):
    objects: list[T] = field(default_factory=list)
    diagnostics: list[RowDiagnostic] = field(default_factory=list)


def load_objects(conn: sqlite3.Connection, mapper: RowMapper[T], version: CatalogVersion) -> LoadResult[T]:
    """
    Run the mapper's query for `version` and decode every row independently.

    Rows that fail to decode are dropped (and reported as diagnostics), they never abort the load. A query that
    cannot be executed raises CatalogError.
    """
    query = mapper.query_for(version)
    result: LoadResult[T] = LoadResult()

    try:
        cursor = conn.cursor()
        cursor.row_factory = sqlite3.Row

        for row in cursor.execute(query.sql):
            try:
                result.objects.append(query.decode(row))

            except SkipRow as e:
                result.diagnostics.append(
                    RowDiagnostic(entity=mapper.name, row_id=_row_id(row), reason=str(e), skipped=True)
                )

            except RowDecodeError as e:
                result.diagnostics.append(
                    RowDiagnostic(entity=mapper.name, row_id=_row_id(row), reason=str(e), skipped=False)
                )

    except sqlite3.Error as e:
        raise CatalogError(f"Failed to load {mapper.name} ({query.sql}): {e}") from e

    return result


def _row_id(row: sqlite3.Row) -> Any:
    try:
        return row["id_local"]
    except IndexError:
        return None


def decode_text(data: bytes) -> str | bytes:
    """
    Connection text factory. TEXT that is not valid UTF-8 is handed over as bytes, the string accessors then reject
    the row instead of the driver failing the whole query
    """
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError:
        return data


# Typed column accessors. SQLite is dynamically typed, so every value is checked against what we expect.


def _column(row: sqlite3.Row, name: str) -> Any:
    try:
        return row[name]
    except IndexError as e:
        raise RowDecodeError(f"Missing column '{name}'") from e


def _as_int(value: Any) -> int | None:
    if isinstance(value, int):
        return value

    # Some integer columns are stored as REAL
    if isinstance(value, float) and value.is_integer():
        return int(value)

    return None


def column_int(row: sqlite3.Row, name: str) -> int:
    value = _as_int(_column(row, name))
    if value is None:
        raise RowDecodeError(f"Column '{name}' is not an integer")

    return value


def optional_int(row: sqlite3.Row, name: str, default: int | None = None) -> int | None:
    value = _as_int(_column(row, name))
    return default if value is None else value


def column_float(row: sqlite3.Row, name: str) -> float:
    value = _column(row, name)
    if not isinstance(value, (int, float)):
        raise RowDecodeError(f"Column '{name}' is not a number")

    return float(value)


def column_str(row: sqlite3.Row, name: str) -> str:
    value = _column(row, name)
    if not isinstance(value, str):
        raise RowDecodeError(f"Column '{name}' is not a string")

    return value


def optional_str(row: sqlite3.Row, name: str, default: str | None = None) -> str | None:
    value = _column(row, name)
    return value if isinstance(value, str) else default


def column_flag(row: sqlite3.Row, name: str) -> bool:
    """Boolean stored as a number. NULL is False"""
    value = _column(row, name)
    if value is None:
        return False

    if not isinstance(value, (int, float)):
        raise RowDecodeError(f"Column '{name}' is not a flag")

    return value != 0
