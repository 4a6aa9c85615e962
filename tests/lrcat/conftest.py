import sqlite3
from pathlib import Path

import pytest

SMART_COLLECTION = (
    's = { { criteria = "rating", operation = ">", value = 0, value2 = 0, }, combine = "intersect", }'
)

PROPERTIES = (
    "s = { cropAspectH = 9, cropAspectW = 16, "
    "defaultCropBottom = 0.9, defaultCropLeft = 0, defaultCropRight = 1, defaultCropTop = 0.1, "
    'loupeFocusPoint = { _ag_className = "AgPoint", x = 0.5, y = 0.25, }, }'
)

_COMMON_SCHEMA = """
CREATE TABLE Adobe_variablesTable (name TEXT, value);
CREATE TABLE AgLibraryRootFolder (
    id_local INTEGER PRIMARY KEY, id_global TEXT, absolutePath TEXT, name TEXT, relativePathFromCatalog TEXT
);
CREATE TABLE AgLibraryFolder (id_local INTEGER PRIMARY KEY, id_global TEXT, pathFromRoot TEXT, rootFolder INTEGER);
CREATE TABLE AgFolderContent (id_local INTEGER PRIMARY KEY, containingFolder INTEGER, content, owningModule TEXT);
CREATE TABLE AgLibraryFile (
    id_local INTEGER PRIMARY KEY, id_global TEXT, baseName TEXT, extension TEXT, folder INTEGER,
    sidecarExtensions TEXT
);
CREATE TABLE Adobe_images (
    id_local INTEGER PRIMARY KEY, id_global TEXT, masterImage INTEGER, rating, rootFile INTEGER, fileFormat TEXT,
    pick REAL, orientation TEXT, captureTime TEXT, copyName TEXT
);
CREATE TABLE Adobe_AdditionalMetadata (
    id_local INTEGER PRIMARY KEY, image INTEGER, xmp TEXT, embeddedXmp INTEGER, externalXmpIsDirty INTEGER
);
CREATE TABLE Adobe_imageProperties (id_local INTEGER PRIMARY KEY, image INTEGER, propertiesString TEXT);
"""

_LR4_SCHEMA = """
CREATE TABLE AgLibraryKeyword (
    id_local INTEGER PRIMARY KEY, id_global TEXT, dateCreated, name TEXT, parent INTEGER
);
CREATE TABLE AgLibraryCollection (
    id_local INTEGER PRIMARY KEY, genealogy TEXT, name TEXT, parent INTEGER, systemOnly
);
CREATE TABLE AgLibraryCollectionContent (
    id_local INTEGER PRIMARY KEY, collection INTEGER, content, owningModule TEXT
);
CREATE TABLE AgLibraryCollectionImage (id_local INTEGER PRIMARY KEY, collection INTEGER, image INTEGER);
"""

_LR2_SCHEMA = """
CREATE TABLE AgLibraryTag (
    id_local INTEGER PRIMARY KEY, id_global TEXT, dateCreated, name TEXT, parent INTEGER, kindName TEXT
);
CREATE TABLE AgLibraryTagImage (id_local INTEGER PRIMARY KEY, tag INTEGER, image INTEGER, tagKind TEXT);
"""


def _fill_common(conn: sqlite3.Connection):
    conn.execute(
        "INSERT INTO AgLibraryRootFolder VALUES (1, 'root-uuid', '/home/hub/Pictures', 'Pictures', '../Pictures')"
    )
    conn.executemany(
        "INSERT INTO AgLibraryFolder VALUES (?, ?, ?, ?)",
        [(2, "folder-uuid", "/2017/10", 1), (3, "orphan-uuid", "/orphan", 99)],
    )
    conn.executemany(
        "INSERT INTO AgFolderContent (containingFolder, content, owningModule) VALUES (?, ?, ?)",
        [
            (2, "s = { filterUI = { searchStringCriteria = \"all\", }, }", "com.adobe.ag.library.filter"),
            (2, "captureTime", "com.adobe.ag.library.sortType"),
            (2, "descending", "com.adobe.ag.library.sortDirection"),
            (2, "whatever", "com.adobe.ag.develop.unknown"),
        ],
    )
    conn.executemany(
        "INSERT INTO AgLibraryFile VALUES (?, ?, ?, ?, ?, ?)",
        [
            (20, "file-uuid-20", "IMG_0001", "CR2", 2, "JPG,xmp"),
            (21, "file-uuid-21", "IMG_0002", "JPG", 2, None),
        ],
    )
    conn.executemany(
        "INSERT INTO Adobe_images VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
        [
            (30, "image-uuid-30", None, 3, 20, "RAW", 1.0, "AB", "2017-10-01T10:00:00", None),
            (31, "image-uuid-31", 30, None, 20, "RAW", -1.0, None, "2017-10-01T10:00:00", "Copy 1"),
            # No metadata row, left out by the join
            (32, "image-uuid-32", None, None, 21, "JPG", 0.0, "BC", "2017-10-02T10:00:00", None),
        ],
    )
    conn.executemany(
        "INSERT INTO Adobe_AdditionalMetadata (image, xmp, embeddedXmp, externalXmpIsDirty) VALUES (?, ?, ?, ?)",
        [(30, "<x:xmpmeta/>", 0, 1), (31, None, 1, 0)],
    )
    conn.executemany(
        "INSERT INTO Adobe_imageProperties (image, propertiesString) VALUES (?, ?)",
        [(30, PROPERTIES), (31, None), (32, None)],
    )


def _create(path: Path, schema: str, version: str, root_keyword_id) -> sqlite3.Connection:
    conn = sqlite3.connect(path)
    conn.executescript(_COMMON_SCHEMA + schema)
    conn.execute("INSERT INTO Adobe_variablesTable VALUES ('Adobe_DBVersion', ?)", (version,))
    conn.execute("INSERT INTO Adobe_variablesTable VALUES ('AgLibraryKeyword_rootTagID', ?)", (root_keyword_id,))
    _fill_common(conn)
    return conn


@pytest.fixture
def lr4_catalog_path(tmp_path) -> Path:
    path = tmp_path.joinpath("lr4.lrcat")
    conn = _create(path, _LR4_SCHEMA, "0400020", 10.0)

    conn.executemany(
        "INSERT INTO AgLibraryKeyword VALUES (?, ?, ?, ?, ?)",
        [
            (10, "kw-10", 0.0, None, None),
            (13, "kw-13", 0.0, "People", 10),
            (11, "kw-11", 0.0, "Places", 10),
            (12, "kw-12", 0.0, "Paris", 11),
            # Malformed: no global id
            (14, None, 0.0, "Broken", 10),
        ],
    )
    conn.executemany(
        "INSERT INTO AgLibraryCollection VALUES (?, ?, ?, ?, ?)",
        [
            (40, "/940", "Favorites", None, 0.0),
            (41, "/941", "Quick Collection", None, 1.0),
            (42, "/942", "Five stars", 40, 0),
        ],
    )
    conn.executemany(
        "INSERT INTO AgLibraryCollectionContent (collection, content, owningModule) VALUES (?, ?, ?)",
        [
            (42, SMART_COLLECTION, "ag.library.smart_collection"),
            (40, "ascending", "com.adobe.ag.library.sortDirection"),
        ],
    )
    conn.executemany(
        "INSERT INTO AgLibraryCollectionImage (collection, image) VALUES (?, ?)",
        [(40, 30), (40, 31), (41, 30)],
    )

    conn.commit()
    conn.close()
    return path


@pytest.fixture
def lr2_catalog_path(tmp_path) -> Path:
    path = tmp_path.joinpath("lr2.lrcat")
    conn = _create(path, _LR2_SCHEMA, "0200022", 1.0)

    conn.executemany(
        "INSERT INTO AgLibraryTag VALUES (?, ?, ?, ?, ?, ?)",
        [
            (1, "tag-1", None, None, None, "AgKeywordTagKind"),
            (2, "tag-2", None, "Travel", 1, "AgKeywordTagKind"),
            (3, "tag-3", None, "Favorites", None, "AgCollectionTagKind"),
            (4, "tag-4", None, "Quick Collection", None, "AgQuickCollectionTagKind"),
            (5, "tag-5", None, "Imported", None, "AgImportTagKind"),
        ],
    )
    conn.executemany(
        "INSERT INTO AgLibraryTagImage (tag, image, tagKind) VALUES (?, ?, ?)",
        [(3, 30, "AgCollectionTagKind"), (2, 30, "AgKeywordTagKind"), (3, 31, "AgCollectionTagKind")],
    )

    conn.commit()
    conn.close()
    return path


@pytest.fixture
def lr3_catalog_path(tmp_path) -> Path:
    path = tmp_path.joinpath("lr3.lrcat")
    conn = _create(path, _LR4_SCHEMA, "0300025", 10.0)
    conn.execute("INSERT INTO AgLibraryCollectionImage (collection, image) VALUES (40, 30)")

    conn.commit()
    conn.close()
    return path
