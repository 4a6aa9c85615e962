import logging
import sqlite3

from lrcat import lron, models
from lrcat.lrobject import LrId

logger = logging.getLogger(__name__)

FILTER_MODULE = "com.adobe.ag.library.filter"
SORT_TYPE_MODULE = "com.adobe.ag.library.sortType"
SORT_DIRECTION_MODULE = "com.adobe.ag.library.sortDirection"
SMART_COLLECTION_MODULE = "ag.library.smart_collection"

FOLDER_CONTENT_TABLE = "AgFolderContent"
FOLDER_CONTENT_COLUMN = "containingFolder"
COLLECTION_CONTENT_TABLE = "AgLibraryCollectionContent"
COLLECTION_CONTENT_COLUMN = "collection"


def read_content(conn: sqlite3.Connection, table: str, container_column: str, container_id: LrId) -> models.Content:
    """
    Read the content definition of a container (folder or collection) from its auxiliary table.

    Rows are dispatched on their owning module. Unknown modules are ignored, and when several rows target the same
    module the last one read wins. A failing query yields an empty Content.
    """
    fields: dict = {}

    try:
        rows = conn.execute(
            f"SELECT content, owningModule FROM {table} WHERE {container_column} = ?",
            (container_id,),
        ).fetchall()

    except sqlite3.Error as e:
        logger.warning(f"Could not read content of {container_column} {container_id} from {table}: {e}")
        return models.Content()

    for value, owning_module in rows:
        value = value if isinstance(value, str) else None

        if owning_module == FILTER_MODULE:
            fields["filter"] = value

        elif owning_module == SORT_TYPE_MODULE:
            fields["sort_type"] = value

        elif owning_module == SORT_DIRECTION_MODULE:
            fields["sort_direction"] = models.SortDirection.from_string(value) if value is not None else None

        elif owning_module == SMART_COLLECTION_MODULE:
            fields["smart_collection"] = _parse_smart_collection(value, container_id)

        elif logger.isEnabledFor(logging.DEBUG):
            logger.debug(f"Ignoring content module '{owning_module}' for {container_column} {container_id}")

    return models.Content(**fields)


def _parse_smart_collection(value: str | None, container_id: LrId) -> lron.Pair | None:
    """Best effort: a rule set that doesn't parse leaves the smart collection unset"""
    if value is None:
        return None

    try:
        return lron.parse(value)
    except lron.LronParseError as e:
        logger.debug(f"Ignoring malformed smart collection for {container_id}: {e}")
        return None
