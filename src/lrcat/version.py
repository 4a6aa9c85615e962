import enum
import logging

logger = logging.getLogger(__name__)


class CatalogVersion(enum.Enum):
    Unknown = "unknown"
    Lr2 = "02"
    Lr3 = "03"
    Lr4 = "04"
    Lr6 = "06"

    @classmethod
    def from_version_string(cls, version: str | None) -> "CatalogVersion":
        """
        Resolve the schema generation from the catalog's `Adobe_DBVersion` (e.g. "0400020").
        Only the leading two characters matter.
        """
        if not version:
            return cls.Unknown

        prefix = version[:2]
        for catalog_version in cls:
            if catalog_version.value == prefix:
                return catalog_version

        logger.debug(f"Unrecognized catalog version string '{version}'")
        return cls.Unknown

    def is_supported(self) -> bool:
        # Lr3 is detected, but we have no table/column data for it
        return self in _SUPPORTED_VERSIONS


_SUPPORTED_VERSIONS = frozenset({CatalogVersion.Lr2, CatalogVersion.Lr4, CatalogVersion.Lr6})
