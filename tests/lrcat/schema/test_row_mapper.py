import sqlite3

import pytest

from lrcat.errors import CatalogError, RowDecodeError, SkipRow, UnsupportedVersionError
from lrcat.schema import base
from lrcat.version import CatalogVersion


def decode_pair(row: sqlite3.Row) -> tuple[int, str]:
    name = base.column_str(row, "name")
    if name == "skip":
        raise SkipRow("not one of ours")

    return base.column_int(row, "id_local"), name


MAPPER = base.RowMapper(
    name="things",
    queries={
        CatalogVersion.Lr4: base.Query(tables="Things", columns="id_local, name", decode=decode_pair),
        CatalogVersion.Lr6: base.Query(
            tables="Things",
            columns="id_local, name",
            join_filter="id_local > 1",
            decode=decode_pair,
        ),
    },
)


@pytest.fixture
def conn():
    conn = sqlite3.connect(":memory:")
    conn.execute("CREATE TABLE Things (id_local, name)")
    conn.executemany(
        "INSERT INTO Things VALUES (?, ?)",
        [(1, "one"), (2, "two"), (3, "skip"), ("four", "bad id"), (5, None)],
    )
    yield conn
    conn.close()


class TestQuery:
    """Tests for Query"""

    def test_sql(self):
        query = base.Query(tables="A, B", columns="a.x, b.y", decode=decode_pair)
        assert query.sql == "SELECT a.x, b.y FROM A, B"

    def test_sql_with_join_filter(self):
        query = base.Query(tables="A, B", columns="a.x", join_filter="a.id = b.a", decode=decode_pair)
        assert query.sql == "SELECT a.x FROM A, B WHERE a.id = b.a"


class TestRowMapper:
    """Tests for RowMapper dispatching"""

    def test_per_version_parts(self):
        assert MAPPER.tables(CatalogVersion.Lr4) == "Things"
        assert MAPPER.columns(CatalogVersion.Lr4) == "id_local, name"
        assert MAPPER.join_filter(CatalogVersion.Lr4) is None
        assert MAPPER.join_filter(CatalogVersion.Lr6) == "id_local > 1"

    @pytest.mark.parametrize("version", [CatalogVersion.Unknown, CatalogVersion.Lr2, CatalogVersion.Lr3])
    def test_unsupported_version(self, version):
        with pytest.raises(UnsupportedVersionError) as exc_info:
            MAPPER.query_for(version)

        assert exc_info.value.version == version

    def test_same_query(self):
        query = base.Query(tables="T", columns="c", decode=decode_pair)
        queries = base.same_query((CatalogVersion.Lr2, CatalogVersion.Lr4), query)

        assert queries == {CatalogVersion.Lr2: query, CatalogVersion.Lr4: query}


class TestLoadObjects:
    """Tests for load_objects"""

    def test_bad_rows_are_dropped(self, conn):
        result = base.load_objects(conn, MAPPER, CatalogVersion.Lr4)

        assert result.objects == [(1, "one"), (2, "two")]

        diagnostics = {d.row_id: d for d in result.diagnostics}
        assert set(diagnostics) == {3, "four", 5}
        assert diagnostics[3].skipped
        assert not diagnostics["four"].skipped
        assert not diagnostics[5].skipped
        assert all(d.entity == "things" for d in result.diagnostics)

    def test_join_filter_is_applied(self, conn):
        result = base.load_objects(conn, MAPPER, CatalogVersion.Lr6)
        assert result.objects == [(2, "two")]

    def test_unsupported_version(self, conn):
        with pytest.raises(UnsupportedVersionError):
            base.load_objects(conn, MAPPER, CatalogVersion.Lr3)

    def test_query_failure(self):
        conn = sqlite3.connect(":memory:")

        with pytest.raises(CatalogError) as exc_info:
            base.load_objects(conn, MAPPER, CatalogVersion.Lr4)

        assert isinstance(exc_info.value.__cause__, sqlite3.Error)

    def test_invalid_utf8_row_is_dropped(self, conn):
        conn.text_factory = base.decode_text
        conn.execute("INSERT INTO Things VALUES (6, CAST(X'49ff4d47' AS TEXT))")

        result = base.load_objects(conn, MAPPER, CatalogVersion.Lr4)

        assert result.objects == [(1, "one"), (2, "two")]
        assert 6 in {d.row_id for d in result.diagnostics if not d.skipped}

    def test_leaves_connection_row_factory_alone(self, conn):
        base.load_objects(conn, MAPPER, CatalogVersion.Lr4)
        assert conn.row_factory is None


class TestColumnAccessors:
    """Tests for the typed column accessors"""

    @pytest.fixture
    def row(self) -> sqlite3.Row:
        conn = sqlite3.connect(":memory:")
        conn.row_factory = sqlite3.Row
        return conn.execute("SELECT 1 AS i, 2.0 AS f, 2.5 AS r, 'text' AS s, NULL AS n").fetchone()

    def test_column_int(self, row):
        assert base.column_int(row, "i") == 1
        assert base.column_int(row, "f") == 2

        with pytest.raises(RowDecodeError):
            base.column_int(row, "r")
        with pytest.raises(RowDecodeError):
            base.column_int(row, "s")
        with pytest.raises(RowDecodeError):
            base.column_int(row, "n")

    def test_optional_int(self, row):
        assert base.optional_int(row, "i") == 1
        assert base.optional_int(row, "n") is None
        assert base.optional_int(row, "s", default=0) == 0

    def test_column_float(self, row):
        assert base.column_float(row, "i") == 1.0
        assert base.column_float(row, "r") == 2.5

        with pytest.raises(RowDecodeError):
            base.column_float(row, "n")

    def test_column_str(self, row):
        assert base.column_str(row, "s") == "text"

        with pytest.raises(RowDecodeError):
            base.column_str(row, "i")

    def test_optional_str(self, row):
        assert base.optional_str(row, "s") == "text"
        assert base.optional_str(row, "n") is None
        assert base.optional_str(row, "i", default="") == ""

    def test_column_flag(self, row):
        assert base.column_flag(row, "i") is True
        assert base.column_flag(row, "n") is False

        with pytest.raises(RowDecodeError):
            base.column_flag(row, "s")

    def test_missing_column(self, row):
        with pytest.raises(RowDecodeError):
            base.column_int(row, "missing")


class TestDecodeText:
    """Tests for the connection text factory"""

    def test_utf8(self):
        assert base.decode_text("Café".encode()) == "Café"

    def test_invalid_utf8_stays_bytes(self):
        assert base.decode_text(b"I\xffMG") == b"I\xffMG"
