import dataclasses
import logging
import pathlib
import sqlite3
from typing import Any, TypeVar

from lrcat import content, models
from lrcat.errors import CatalogError, UnsupportedVersionError
from lrcat.folders import Folders
from lrcat.keyword_tree import KeywordTree
from lrcat.lrobject import LrId
from lrcat.schema.base import RowDiagnostic, RowMapper, decode_text, load_objects
from lrcat.schema.collections import collection_images_queries, collection_mapper, content_versions
from lrcat.schema.folders import folder_mapper, root_folder_mapper
from lrcat.schema.images import image_mapper
from lrcat.schema.keywords import keyword_mapper
from lrcat.schema.library_files import library_file_mapper
from lrcat.utils import general_tools
from lrcat.version import CatalogVersion

logger = logging.getLogger(__name__)

T = TypeVar("T")

DB_VERSION_VARIABLE = "Adobe_DBVersion"
ROOT_KEYWORD_VARIABLE = "AgLibraryKeyword_rootTagID"


class Catalog:
    """
    Read only access to a Lightroom catalog (SQLite).

    The catalog is created unopened. `open()` connects to the database and `load_version()` detects the schema
    generation, which selects the queries used by every loader. Loaders cache their result: once a collection is
    non-empty it is returned as is. A legitimately empty collection is queried again on every call.

    Not meant to be shared across threads.
    """

    def __init__(self, path: str | pathlib.Path):
        self.path = pathlib.Path(path)
        self.version: str = ""
        self.catalog_version: CatalogVersion = CatalogVersion.Unknown
        self.root_keyword_id: LrId = 0

        # Rows left out of the last load, per entity
        self.diagnostics: dict[str, list[RowDiagnostic]] = {}

        self._keywords: dict[LrId, models.Keyword] = {}
        self._folders: Folders = Folders()
        self._library_files: list[models.LibraryFile] = []
        self._images: list[models.Image] = []
        self._collections: list[models.Collection] = []

        self._conn: sqlite3.Connection | None = None

    def __enter__(self) -> "Catalog":
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()

    def __repr__(self) -> str:
        return f"Catalog({self.path}, version={self.version!r} ({self.catalog_version.name}))"

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    @property
    def conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise CatalogError(f"Catalog {self.path} is not open")

        return self._conn

    def open(self):
        """
        Open the catalog database (read only)
        """
        uri = f"{self.path.resolve().as_uri()}?mode=ro"

        try:
            self._conn = sqlite3.connect(uri, uri=True)
        except sqlite3.Error as e:
            raise CatalogError(f"Could not open catalog {self.path}: {e}") from e

        self._conn.text_factory = decode_text

        logger.info(f"Opened catalog {self.path}")

    def close(self):
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def get_variable(self, name: str) -> Any:
        """
        Read one of the catalog variables. Returns None if it is missing or can't be read
        """
        try:
            row = self.conn.execute("SELECT value FROM Adobe_variablesTable WHERE name = ?", (name,)).fetchone()
        except (sqlite3.Error, CatalogError) as e:
            logger.warning(f"Could not read catalog variable {name}: {e}")
            return None

        return row[0] if row is not None else None

    def load_version(self):
        """
        Detect the catalog version and the root keyword. Missing variables leave the defaults in place
        """
        version = self.get_variable(DB_VERSION_VARIABLE)
        if version is not None:
            self.version = str(version)
            self.catalog_version = CatalogVersion.from_version_string(self.version)

        root_keyword_id = self.get_variable(ROOT_KEYWORD_VARIABLE)
        if root_keyword_id is not None:
            try:
                self.root_keyword_id = round(float(root_keyword_id))
            except (ValueError, OverflowError):
                logger.warning(f"Invalid root keyword id {root_keyword_id!r}")

        logger.info(f"Catalog version {self.version} ({self.catalog_version.name})")

    def _load(self, mapper: RowMapper[T]) -> list[T]:
        result = load_objects(self.conn, mapper, self.catalog_version)

        self.diagnostics[mapper.name] = result.diagnostics
        if result.diagnostics and logger.isEnabledFor(logging.DEBUG):
            for diagnostic in result.diagnostics:
                logger.debug(f"Left out {diagnostic.entity} row {diagnostic.row_id}: {diagnostic.reason}")

        logger.info(f"Loaded {len(result.objects)} {mapper.name} ({len(result.diagnostics)} rows left out)")
        return result.objects

    @general_tools.timeit
    def load_keywords(self) -> dict[LrId, models.Keyword]:
        """
        All keywords, by id (in ascending id order)
        """
        if not self._keywords:
            keywords = sorted(self._load(keyword_mapper), key=lambda k: k.id)
            self._keywords = {keyword.id: keyword for keyword in keywords}

        return self._keywords

    def load_keywords_tree(self) -> KeywordTree:
        return KeywordTree.from_keywords(self.load_keywords().values())

    @general_tools.timeit
    def load_folders(self) -> Folders:
        """
        Root folders and folders, with the content definition of each folder
        """
        if self._folders.is_empty():
            roots = self._load(root_folder_mapper)

            folders = [
                _with_content(
                    folder,
                    content.read_content(
                        self.conn,
                        content.FOLDER_CONTENT_TABLE,
                        content.FOLDER_CONTENT_COLUMN,
                        folder.id,
                    ),
                )
                for folder in self._load(folder_mapper)
            ]

            self._folders = Folders(roots=roots, folders=folders)

        return self._folders

    @general_tools.timeit
    def load_library_files(self) -> list[models.LibraryFile]:
        if not self._library_files:
            self._library_files = self._load(library_file_mapper)

        return self._library_files

    @general_tools.timeit
    def load_images(self) -> list[models.Image]:
        if not self._images:
            self._images = self._load(image_mapper)

        return self._images

    @general_tools.timeit
    def load_collections(self) -> list[models.Collection]:
        """
        All collections. Their content is only read where the schema has a collection content table
        """
        if not self._collections:
            collections = self._load(collection_mapper)

            if self.catalog_version in content_versions:
                collections = [
                    _with_content(
                        collection,
                        content.read_content(
                            self.conn,
                            content.COLLECTION_CONTENT_TABLE,
                            content.COLLECTION_CONTENT_COLUMN,
                            collection.id,
                        ),
                    )
                    for collection in collections
                ]

            self._collections = collections

        return self._collections

    def images_for_collection(self, collection_id: LrId) -> list[LrId]:
        """
        Ids of the images that belong to a collection
        """
        query = collection_images_queries.get(self.catalog_version)
        if query is None:
            raise UnsupportedVersionError(self.catalog_version)

        sql, extra_params = query
        params = (collection_id, *extra_params)

        try:
            return [row[0] for row in self.conn.execute(sql, params)]
        except sqlite3.Error as e:
            raise CatalogError(f"Failed to load images of collection {collection_id}: {e}") from e


def _with_content(container: T, container_content: models.Content) -> T:
    # Entities are frozen, attach the content on a copy
    return dataclasses.replace(container, content=container_content)
