"""Model mutator: the only write path into the host's element store."""

import logging
from typing import TYPE_CHECKING, Protocol

from ..events import EventBus, Notification
from .diagram import DiagramGraph

if TYPE_CHECKING:
    from ..metadata.attributes import Attribute

logger = logging.getLogger(__name__)


class MutationError(Exception):
    """Raised when the host rejects a requested update."""

    def __init__(self, message: str, element_id: str | None = None):
        self.element_id = element_id
        super().__init__(message)


class ModelMutator(Protocol):
    """Applies metadata updates atomically.

    Implementations fire exactly one change notification per update.
    """

    def update_metadata(self, element_id: str, entries: "list[Attribute]") -> None: ...


class GraphMutator:
    """In-memory ModelMutator over a DiagramGraph."""

    def __init__(self, graph: DiagramGraph, bus: EventBus):
        self.graph = graph
        self.bus = bus

    def update_metadata(self, element_id: str, entries: "list[Attribute]") -> None:
        """Replace an element's metadata and fire `element.changed`.

        Raises:
            MutationError: If the element does not exist.
        """
        if not self.graph.has_element(element_id):
            raise MutationError(f"Cannot update unknown element '{element_id}'", element_id)

        self.graph.set_metadata(element_id, entries)
        logger.debug("Updated metadata of %s (%d entries)", element_id, len(entries))
        self.bus.fire(Notification.ELEMENT_CHANGED, element=element_id)
