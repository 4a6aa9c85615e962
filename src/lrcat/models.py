import enum
from dataclasses import dataclass, field
from typing import ClassVar

from lrcat import lron
from lrcat.lrobject import LrId


class SortDirection(enum.Enum):
    Ascending = "ascending"
    Descending = "descending"
    Unknown = "unknown"

    @classmethod
    def from_string(cls, value: str) -> "SortDirection":
        if value == cls.Ascending.value:
            return cls.Ascending
        if value == cls.Descending.value:
            return cls.Descending

        return cls.Unknown


@dataclass(frozen=True)
class Content:
    """
    Content definition (filter, sort, smart collection rules) of a Folder or a Collection
    """

    filter: str | None = None
    sort_type: str | None = None
    sort_direction: SortDirection | None = None
    smart_collection: lron.Pair | None = field(default=None, repr=False)

    def filter_document(self) -> lron.Pair | None:
        """
        The filter is itself an lron document stored as a string. Parse it on demand (raises LronParseError).
        """
        if self.filter is None:
            return None

        return lron.parse(self.filter)


@dataclass(frozen=True)
class Keyword:
    id: LrId
    uuid: str
    name: str
    # Root level keywords point to the catalog's root keyword id
    parent: LrId
    date_created: str | None = None


@dataclass(frozen=True)
class RootFolder:
    id: LrId
    uuid: str
    absolute_path: str
    name: str
    relative_path_from_catalog: str | None = None


@dataclass(frozen=True)
class Folder:
    id: LrId
    uuid: str
    path_from_root: str
    root_folder: LrId
    content: Content | None = None


@dataclass(frozen=True)
class LibraryFile:
    id: LrId
    uuid: str
    basename: str
    extension: str
    folder: LrId
    # Comma separated list
    sidecar_extensions: str


@dataclass(frozen=True)
class LoupeFocusPoint:
    x: float
    y: float


@dataclass(frozen=True)
class AspectRatio:
    width: int
    height: int


@dataclass(frozen=True)
class Crop:
    top: float
    bottom: float
    left: float
    right: float


@dataclass(frozen=True)
class Properties:
    """Image properties decoded from `Adobe_imageProperties.propertiesString`"""

    loupe_focus: LoupeFocusPoint | None = None
    crop_aspect_ratio: AspectRatio | None = None
    default_crop: Crop | None = None


@dataclass(frozen=True)
class Image:
    # Lightroom stores the orientation as the pair of corners at the top of the image
    EXIF_ORIENTATIONS: ClassVar[dict[str, int]] = {"AB": 1, "DA": 8, "BC": 6, "CD": 3}

    id: LrId
    uuid: str
    root_file: LrId
    file_format: str
    capture_time: str
    # -1 rejected, 0 unflagged, 1 picked
    pick: int = 0
    master_image: LrId | None = None
    copy_name: str | None = None
    rating: int | None = None
    orientation: str | None = None
    xmp: str = field(default="", repr=False)
    xmp_embedded: bool = False
    xmp_external_dirty: bool = False
    properties: Properties | None = None

    @property
    def is_copy(self) -> bool:
        return self.master_image is not None

    @property
    def exif_orientation(self) -> int:
        """
        Orientation as an EXIF value. 0 when there is no orientation, -1 when the code is not one we know
        """
        if self.orientation is None:
            return 0

        return self.EXIF_ORIENTATIONS.get(self.orientation, -1)


@dataclass(frozen=True)
class Collection:
    id: LrId
    name: str
    parent: LrId
    # Seems to be the quick collection
    system_only: bool
    content: Content | None = None
