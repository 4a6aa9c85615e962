import sqlite3

from lrcat import models
from lrcat.schema.base import Query, RowMapper, column_int, column_str, optional_str, same_query
from lrcat.version import CatalogVersion

# Folders have kept the same layout through all the schema generations we read
_VERSIONS = (CatalogVersion.Lr2, CatalogVersion.Lr4, CatalogVersion.Lr6)


def decode_root_folder(row: sqlite3.Row) -> models.RootFolder:
    return models.RootFolder(
        id=column_int(row, "id_local"),
        uuid=column_str(row, "id_global"),
        absolute_path=column_str(row, "absolutePath"),
        name=column_str(row, "name"),
        relative_path_from_catalog=optional_str(row, "relativePathFromCatalog"),
    )


def decode_folder(row: sqlite3.Row) -> models.Folder:
    return models.Folder(
        id=column_int(row, "id_local"),
        uuid=column_str(row, "id_global"),
        path_from_root=column_str(row, "pathFromRoot"),
        root_folder=column_int(row, "rootFolder"),
    )


root_folder_mapper: RowMapper[models.RootFolder] = RowMapper(
    name="root_folders",
    queries=same_query(
        _VERSIONS,
        Query(
            tables="AgLibraryRootFolder",
            columns="id_local, id_global, absolutePath, name, relativePathFromCatalog",
            decode=decode_root_folder,
        ),
    ),
)

folder_mapper: RowMapper[models.Folder] = RowMapper(
    name="folders",
    queries=same_query(
        _VERSIONS,
        Query(
            tables="AgLibraryFolder",
            columns="id_local, id_global, pathFromRoot, rootFolder",
            decode=decode_folder,
        ),
    ),
)
