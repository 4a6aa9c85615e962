import sqlite3

from lrcat import models
from lrcat.errors import SkipRow
from lrcat.schema.base import Query, RowMapper, column_float, column_int, optional_int, optional_str, same_query
from lrcat.version import CatalogVersion

COLLECTION_TAG_KIND = "AgCollectionTagKind"
QUICK_COLLECTION_TAG_KIND = "AgQuickCollectionTagKind"


def decode_collection(row: sqlite3.Row) -> models.Collection:
    return models.Collection(
        id=column_int(row, "id_local"),
        name=optional_str(row, "name", default=""),
        parent=optional_int(row, "parent", default=0),
        system_only=column_float(row, "systemOnly") != 0,
    )


def decode_lr2_collection(row: sqlite3.Row) -> models.Collection:
    """
    Lr2 stores collections as tags. The quick collection is the system one, any other tag kind is skipped
    """
    kind = optional_str(row, "kindName")

    if kind == COLLECTION_TAG_KIND:
        system_only = False
    elif kind == QUICK_COLLECTION_TAG_KIND:
        system_only = True
    else:
        raise SkipRow(f"Tag kind '{kind}' is not a collection")

    return models.Collection(
        id=column_int(row, "id_local"),
        name=optional_str(row, "name", default=""),
        parent=optional_int(row, "parent", default=0),
        system_only=system_only,
    )


collection_mapper: RowMapper[models.Collection] = RowMapper(
    name="collections",
    queries={
        CatalogVersion.Lr2: Query(
            tables="AgLibraryTag",
            columns="id_local, name, parent, kindName",
            decode=decode_lr2_collection,
        ),
        **same_query(
            (CatalogVersion.Lr4, CatalogVersion.Lr6),
            Query(
                tables="AgLibraryCollection",
                columns="id_local, genealogy, name, parent, systemOnly",
                decode=decode_collection,
            ),
        ),
    },
)

# Collection membership, the collection id is bound as the first parameter. Lr3 is readable here even though its
# entities are not.
_COLLECTION_IMAGE_QUERY = ("SELECT image FROM AgLibraryCollectionImage WHERE collection = ?", ())

collection_images_queries: dict[CatalogVersion, tuple[str, tuple]] = {
    CatalogVersion.Lr2: ("SELECT image FROM AgLibraryTagImage WHERE tag = ? AND tagKind = ?", (COLLECTION_TAG_KIND,)),
    CatalogVersion.Lr3: _COLLECTION_IMAGE_QUERY,
    CatalogVersion.Lr4: _COLLECTION_IMAGE_QUERY,
    CatalogVersion.Lr6: _COLLECTION_IMAGE_QUERY,
}

# Lr2 has no collection content table
content_versions = frozenset({CatalogVersion.Lr4, CatalogVersion.Lr6})
