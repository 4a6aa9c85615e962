"""
Read Lightroom catalogs
"""
from lrcat.catalog import Catalog
from lrcat.errors import CatalogError, LrcatError, UnsupportedVersionError
from lrcat.folders import Folders
from lrcat.keyword_tree import KeywordTree
from lrcat.lrobject import LrId, LrObject
from lrcat.models import Collection, Content, Folder, Image, Keyword, LibraryFile, Properties, RootFolder
from lrcat.version import CatalogVersion

__all__ = [
    "Catalog",
    "CatalogError",
    "CatalogVersion",
    "Collection",
    "Content",
    "Folder",
    "Folders",
    "Image",
    "Keyword",
    "KeywordTree",
    "LibraryFile",
    "LrId",
    "LrObject",
    "LrcatError",
    "Properties",
    "RootFolder",
    "UnsupportedVersionError",
]
