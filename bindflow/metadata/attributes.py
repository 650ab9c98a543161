"""Typed metadata attributes attached to diagram elements."""

import uuid
from enum import Enum

from pydantic import BaseModel, ConfigDict, model_validator


class AttributeKind(str, Enum):
    """Closed set of metadata attribute keys.

    Values are the namespaced keys persisted on the host's elements.
    """

    TYPE = "space:Type"
    DESTINATION = "space:Destination"
    BINDING = "space:Binding"
    PARTICIPANT1 = "space:Participant1"
    PARTICIPANT2 = "space:Participant2"
    TASK_ASSIGNMENT = "space:TaskAssignment"
    TASK_ASSIGNMENT_REACHED = "space:TaskAssignmentReached"


# Kinds keyed by an assignment id; all others occur at most once per element.
SLOTTED_KINDS = frozenset(
    {AttributeKind.TASK_ASSIGNMENT, AttributeKind.TASK_ASSIGNMENT_REACHED}
)

# Kinds owned by the connection classifier.
CLASSIFICATION_KINDS = frozenset(
    {AttributeKind.TYPE, AttributeKind.PARTICIPANT1, AttributeKind.PARTICIPANT2}
)


class Attribute(BaseModel):
    """A single metadata entry.

    `slot` identifies the assignment an entry belongs to and is required
    exactly for the assignment kinds.
    """

    model_config = ConfigDict(frozen=True)

    kind: AttributeKind
    value: str = ""
    slot: str | None = None

    @model_validator(mode="after")
    def check_slot(self) -> "Attribute":
        """Assignment entries need a slot; nothing else may carry one."""
        if self.kind in SLOTTED_KINDS and not self.slot:
            raise ValueError(f"{self.kind.value} requires an assignment slot")
        if self.kind not in SLOTTED_KINDS and self.slot is not None:
            raise ValueError(f"{self.kind.value} does not take a slot")
        return self

    @property
    def key(self) -> tuple[AttributeKind, str | None]:
        """Identity of the entry on its element."""
        return self.kind, self.slot


def new_assignment_id() -> str:
    """Generate an opaque assignment id, used as the slot of its entries."""
    return f"assignment_{uuid.uuid4().hex[:12]}"
