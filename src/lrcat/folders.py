import logging
from dataclasses import dataclass, field

from lrcat import models
from lrcat.lrobject import LrId

logger = logging.getLogger(__name__)


@dataclass
class Folders:
    """
    All the folders of the catalog. Folders are stored relative to one of the root folders
    """

    roots: list[models.RootFolder] = field(default_factory=list)
    folders: list[models.Folder] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not self.roots and not self.folders

    def find_root_folder(self, root_folder_id: LrId) -> models.RootFolder | None:
        return next((root for root in self.roots if root.id == root_folder_id), None)

    def resolve_folder_path(self, folder: models.Folder) -> str | None:
        """
        Absolute path of the folder: its root folder's path joined with its own path. The concatenation is literal,
        no separator is added and nothing is checked on disk.
        """
        root = self.find_root_folder(folder.root_folder)
        if root is None:
            logger.debug(f"Folder {folder.id} refers to unknown root folder {folder.root_folder}")
            return None

        return root.absolute_path + folder.path_from_root
