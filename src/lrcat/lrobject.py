from typing import Protocol

# Lightroom local id, used as a catalog global identifier
LrId = int


class LrObject(Protocol):
    """
    Basic object loaded from the catalog (collections are the exception, they have no global id)
    """

    @property
    def id(self) -> LrId:
        raise NotImplementedError

    @property
    def uuid(self) -> str:
        """The global id. A valid UUID, doesn't seem to be used anywhere though"""
        raise NotImplementedError
