import sqlite3

from lrcat import models
from lrcat.errors import SkipRow
from lrcat.schema.base import Query, RowMapper, column_int, column_str, optional_int, optional_str, same_query
from lrcat.version import CatalogVersion

KEYWORD_TAG_KIND = "AgKeywordTagKind"

_COLUMNS = "id_local, id_global, cast(dateCreated as text) AS dateCreated, name, parent"


def decode_keyword(row: sqlite3.Row) -> models.Keyword:
    return models.Keyword(
        id=column_int(row, "id_local"),
        uuid=column_str(row, "id_global"),
        name=optional_str(row, "name", default=""),
        parent=optional_int(row, "parent", default=0),
        date_created=optional_str(row, "dateCreated"),
    )


def decode_lr2_keyword(row: sqlite3.Row) -> models.Keyword:
    # Lr2 keeps keywords and collections in the same tag table
    kind = optional_str(row, "kindName")
    if kind != KEYWORD_TAG_KIND:
        raise SkipRow(f"Tag kind '{kind}' is not a keyword")

    return decode_keyword(row)


keyword_mapper: RowMapper[models.Keyword] = RowMapper(
    name="keywords",
    queries={
        CatalogVersion.Lr2: Query(
            tables="AgLibraryTag",
            columns=f"{_COLUMNS}, kindName",
            decode=decode_lr2_keyword,
        ),
        **same_query(
            (CatalogVersion.Lr4, CatalogVersion.Lr6),
            Query(tables="AgLibraryKeyword", columns=_COLUMNS, decode=decode_keyword),
        ),
    },
)
