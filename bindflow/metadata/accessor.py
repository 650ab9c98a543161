"""Read and write typed metadata attributes on diagram elements."""

from typing import Callable, Iterable

from pydantic import ValidationError

from ..graph.diagram import DiagramGraph
from ..graph.mutator import ModelMutator
from .attributes import Attribute, AttributeKind
from .errors import MetadataError

Predicate = Callable[[Attribute], bool]


def make_attribute(
    kind: AttributeKind | str, value: str = "", slot: str | None = None
) -> Attribute:
    """Build a validated attribute.

    Raises:
        MetadataError: If the kind is unknown or the payload does not fit it.
    """
    try:
        return Attribute(kind=kind, value=value, slot=slot)
    except ValidationError as e:
        messages = "; ".join(err["msg"] for err in e.errors())
        raise MetadataError(f"Invalid attribute {kind!r}: {messages}", str(kind)) from e


class MetadataAccessor:
    """Typed key-value access to an element's metadata container.

    Reads come straight from the graph; every write goes through the
    ModelMutator as one update. All operations are synchronous.
    """

    def __init__(self, graph: DiagramGraph, mutator: ModelMutator):
        self.graph = graph
        self.mutator = mutator

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def get_entries(self, element_id: str) -> list[Attribute]:
        """Get all attributes stored on an element, in stored order."""
        return self.graph.get_metadata(element_id)

    def find(
        self, element_id: str, kind: AttributeKind, slot: str | None = None
    ) -> Attribute | None:
        """Find the attribute of a kind (and slot), if present."""
        for entry in self.get_entries(element_id):
            if entry.kind == kind and entry.slot == slot:
                return entry
        return None

    def get_attribute(
        self, element_id: str, kind: AttributeKind, slot: str | None = None
    ) -> str | None:
        """Get an attribute value, or None when absent."""
        entry = self.find(element_id, kind, slot)
        return entry.value if entry is not None else None

    def get_all(self, element_id: str, kind: AttributeKind) -> list[Attribute]:
        """Get every entry of a kind, across slots, in stored order."""
        return [e for e in self.get_entries(element_id) if e.kind == kind]

    def has_attribute(self, element_id: str, kind: AttributeKind) -> bool:
        """Check whether any entry of a kind is present."""
        return any(e.kind == kind for e in self.get_entries(element_id))

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def set_attribute(
        self,
        element_id: str,
        kind: AttributeKind | str,
        value: str,
        slot: str | None = None,
    ) -> bool:
        """Create or update an attribute in place.

        Returns:
            True if the element was updated, False if the value was already set.
        """
        attribute = make_attribute(kind, value, slot)
        entries = self.get_entries(element_id)

        for index, entry in enumerate(entries):
            if entry.key == attribute.key:
                if entry.value == attribute.value:
                    return False
                entries[index] = attribute
                break
        else:
            entries.append(attribute)

        self.mutator.update_metadata(element_id, entries)
        return True

    def remove_attributes(self, element_id: str, predicate: Predicate) -> bool:
        """Remove every attribute matching a predicate.

        Returns:
            True if anything was removed.
        """
        entries = self.get_entries(element_id)
        keep = [e for e in entries if not predicate(e)]
        if len(keep) == len(entries):
            return False

        self.mutator.update_metadata(element_id, keep)
        return True

    def update_attributes(
        self,
        element_id: str,
        remove: Predicate | None = None,
        add: Iterable[Attribute] = (),
    ) -> bool:
        """Remove matching attributes, then append new ones, as one update.

        Added attributes replace any remaining entry with the same key in
        place; new keys are appended.

        Returns:
            True if the element's metadata changed.
        """
        entries = self.get_entries(element_id)
        result = [e for e in entries if remove is None or not remove(e)]

        for attribute in add:
            for index, entry in enumerate(result):
                if entry.key == attribute.key:
                    result[index] = attribute
                    break
            else:
                result.append(attribute)

        if result == entries:
            return False

        self.mutator.update_metadata(element_id, result)
        return True
