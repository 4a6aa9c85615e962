from collections import defaultdict
from collections.abc import Iterable

from lrcat import models
from lrcat.lrobject import LrId


class KeywordTree:
    """
    Keyword hierarchy, kept as a multimap of parent id to children ids
    """

    def __init__(self):
        self._children: dict[LrId, list[LrId]] = defaultdict(list)

    @classmethod
    def from_keywords(cls, keywords: Iterable[models.Keyword]) -> "KeywordTree":
        """
        Build the tree from the full keyword set. Children keep the order in which they are iterated
        """
        tree = cls()
        tree.add_children(keywords)
        return tree

    def add_children(self, keywords: Iterable[models.Keyword]):
        for keyword in keywords:
            self._children[keyword.parent].append(keyword.id)

    def children_for(self, keyword_id: LrId) -> list[LrId]:
        # Don't let lookups of unknown ids grow the map
        return list(self._children.get(keyword_id, ()))

    def __len__(self) -> int:
        """Number of keywords that have children"""
        return len(self._children)
