import sqlite3

from lrcat import models, properties
from lrcat.schema.base import (
    Query,
    RowMapper,
    column_flag,
    column_int,
    column_str,
    optional_int,
    optional_str,
    same_query,
)
from lrcat.version import CatalogVersion

_TABLES = "Adobe_images AS img, Adobe_AdditionalMetadata AS meta, Adobe_imageProperties AS props"

_COLUMNS = ", ".join(
    (
        "img.id_local AS id_local",
        "img.id_global AS id_global",
        "img.masterImage AS masterImage",
        "img.rating AS rating",
        "img.rootFile AS rootFile",
        "img.fileFormat AS fileFormat",
        "cast(img.pick AS integer) AS pick",
        "img.orientation AS orientation",
        "img.captureTime AS captureTime",
        "img.copyName AS copyName",
        "meta.xmp AS xmp",
        "meta.embeddedXmp AS embeddedXmp",
        "meta.externalXmpIsDirty AS externalXmpIsDirty",
        "props.propertiesString AS propertiesString",
    )
)

_JOIN_FILTER = "meta.image = img.id_local AND props.image = img.id_local"


def decode_image(row: sqlite3.Row) -> models.Image:
    return models.Image(
        id=column_int(row, "id_local"),
        uuid=column_str(row, "id_global"),
        master_image=optional_int(row, "masterImage"),
        copy_name=optional_str(row, "copyName"),
        rating=optional_int(row, "rating"),
        root_file=column_int(row, "rootFile"),
        file_format=column_str(row, "fileFormat"),
        pick=optional_int(row, "pick", default=0),
        orientation=optional_str(row, "orientation"),
        capture_time=optional_str(row, "captureTime", default=""),
        xmp=optional_str(row, "xmp", default=""),
        xmp_embedded=column_flag(row, "embeddedXmp"),
        xmp_external_dirty=column_flag(row, "externalXmpIsDirty"),
        properties=properties.parse_properties(optional_str(row, "propertiesString")),
    )


image_mapper: RowMapper[models.Image] = RowMapper(
    name="images",
    queries=same_query(
        (CatalogVersion.Lr2, CatalogVersion.Lr4, CatalogVersion.Lr6),
        Query(tables=_TABLES, columns=_COLUMNS, join_filter=_JOIN_FILTER, decode=decode_image),
    ),
)
