import sqlite3

from lrcat import models
from lrcat.schema.base import Query, RowMapper, column_int, column_str, optional_str, same_query
from lrcat.version import CatalogVersion


def decode_library_file(row: sqlite3.Row) -> models.LibraryFile:
    return models.LibraryFile(
        id=column_int(row, "id_local"),
        uuid=column_str(row, "id_global"),
        basename=column_str(row, "baseName"),
        extension=column_str(row, "extension"),
        folder=column_int(row, "folder"),
        sidecar_extensions=optional_str(row, "sidecarExtensions", default=""),
    )


library_file_mapper: RowMapper[models.LibraryFile] = RowMapper(
    name="library_files",
    queries=same_query(
        (CatalogVersion.Lr2, CatalogVersion.Lr4, CatalogVersion.Lr6),
        Query(
            tables="AgLibraryFile",
            columns="id_local, id_global, baseName, extension, folder, sidecarExtensions",
            decode=decode_library_file,
        ),
    ),
)
