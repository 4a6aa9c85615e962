class LrcatError(Exception):
    """Base class for all errors raised while reading a catalog"""


class CatalogError(LrcatError):
    """
    The underlying database failed (could not open the file, or a query could not be executed).
    The original sqlite3 error is chained as __cause__
    """


class UnsupportedVersionError(LrcatError):
    """There is no query plan for this catalog schema generation"""

    def __init__(self, version):
        super().__init__(f"Unsupported catalog version {version}")
        self.version = version


class RowDecodeError(LrcatError):
    """A row could not be decoded into an entity (missing column or wrong type)"""


class SkipRow(LrcatError):
    """
    The row is not this schema's notion of the entity (e.g. a keyword row read while loading collections).
    Not a failure of the load, the row is simply left out
    """
