"""Condition/value assignments attached to tasks.

Each assignment gets a stable id at creation time. Its condition and value
are stored as one pair of attributes keyed by that id, so editing one row
never shifts another. The positional helpers exist for list-style callers.
"""

from dataclasses import dataclass

from ..metadata.accessor import MetadataAccessor, make_attribute
from ..metadata.attributes import AttributeKind, new_assignment_id

CONDITION = AttributeKind.TASK_ASSIGNMENT
VALUE = AttributeKind.TASK_ASSIGNMENT_REACHED


@dataclass(frozen=True)
class Assignment:
    """A condition/value pair on a task."""

    id: str
    condition: str = ""
    value: str = ""


class AssignmentEditor:
    """Create, update and remove assignments on a task."""

    def __init__(self, accessor: MetadataAccessor):
        self.accessor = accessor

    def list_assignments(self, task_id: str) -> list[Assignment]:
        """Get a task's assignments in creation order."""
        conditions = self.accessor.get_all(task_id, CONDITION)
        values = {e.slot: e.value for e in self.accessor.get_all(task_id, VALUE)}

        assignments = [
            Assignment(id=e.slot, condition=e.value, value=values.pop(e.slot, ""))
            for e in conditions
        ]
        # Values whose condition went missing still show up as rows
        assignments.extend(Assignment(id=slot, value=value) for slot, value in values.items())
        return assignments

    def get_assignment(self, task_id: str, assignment_id: str) -> Assignment | None:
        """Get one assignment by id."""
        for assignment in self.list_assignments(task_id):
            if assignment.id == assignment_id:
                return assignment
        return None

    def count(self, task_id: str) -> int:
        """Get the number of assignments on a task."""
        return len(self.list_assignments(task_id))

    def add_assignment(
        self,
        task_id: str,
        condition: str = "",
        value: str = "",
        assignment_id: str | None = None,
    ) -> Assignment:
        """Append an assignment, writing both halves in one update."""
        slot = assignment_id or new_assignment_id()
        if self.get_assignment(task_id, slot) is not None:
            raise ValueError(f"Assignment '{slot}' already exists on {task_id}")

        self.accessor.update_attributes(
            task_id,
            add=[
                make_attribute(CONDITION, condition or "", slot),
                make_attribute(VALUE, value or "", slot),
            ],
        )
        return Assignment(id=slot, condition=condition or "", value=value or "")

    def update_assignment(
        self,
        task_id: str,
        assignment_id: str,
        condition: str | None = None,
        value: str | None = None,
    ) -> bool:
        """Update the condition and/or value of an assignment.

        Returns:
            True if anything changed.

        Raises:
            KeyError: If the task has no assignment with this id.
        """
        current = self.get_assignment(task_id, assignment_id)
        if current is None:
            raise KeyError(f"No assignment '{assignment_id}' on {task_id}")

        updates = []
        if condition is not None:
            updates.append(make_attribute(CONDITION, condition, assignment_id))
        if value is not None:
            updates.append(make_attribute(VALUE, value, assignment_id))

        return self.accessor.update_attributes(task_id, add=updates)

    def remove_assignment(self, task_id: str, assignment_id: str) -> bool:
        """Remove both halves of an assignment.

        Returns:
            True if the assignment existed.
        """
        return self.accessor.remove_attributes(
            task_id,
            lambda e: e.kind in (CONDITION, VALUE) and e.slot == assignment_id,
        )

    def remove_assignment_at(self, task_id: str, index: int) -> Assignment:
        """Remove the assignment currently shown at a position.

        Later assignments move up by one position; their ids do not change.

        Raises:
            IndexError: If there is no assignment at that position.
        """
        rows = self.list_assignments(task_id)
        if not 0 <= index < len(rows):
            raise IndexError(f"No assignment at position {index} on '{task_id}'")
        assignment = rows[index]
        self.remove_assignment(task_id, assignment.id)
        return assignment

    def clear_assignments(self, task_id: str) -> bool:
        """Remove every assignment from a task."""
        return self.accessor.remove_attributes(
            task_id, lambda e: e.kind in (CONDITION, VALUE)
        )
