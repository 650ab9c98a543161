"""Task kind state machine: assign, clear and transition task kinds."""

import logging
from dataclasses import dataclass
from typing import Callable

from ..events import EventBus, Notification
from ..graph.node_types import ElementType
from ..metadata.accessor import MetadataAccessor, make_attribute
from ..metadata.attributes import Attribute, AttributeKind
from .assignments import AssignmentEditor
from .task_kinds import (
    DEFAULT_DESTINATION,
    TASK_ATTRIBUTES,
    KindConfig,
    TaskKind,
    get_kind_config,
    parse_kind,
    read_kind,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class KindTransition:
    """An ordered (previous, new) kind pair for one task."""

    task_id: str
    previous: TaskKind | None
    new: TaskKind | None

    @property
    def changed(self) -> bool:
        return self.previous != self.new

    @property
    def leaves_binding(self) -> bool:
        return self.previous == TaskKind.BINDING and self.new != TaskKind.BINDING

    @property
    def enters_binding(self) -> bool:
        return self.previous != TaskKind.BINDING and self.new == TaskKind.BINDING

    @property
    def enters_movement(self) -> bool:
        return self.previous != TaskKind.MOVEMENT and self.new == TaskKind.MOVEMENT

    @property
    def leaves_movement(self) -> bool:
        return self.previous == TaskKind.MOVEMENT and self.new != TaskKind.MOVEMENT


TransitionHook = Callable[[KindTransition], None]


class TaskKindStateMachine:
    """Owns a task's kind and the attributes that depend on it.

    Every change goes through the MetadataAccessor; after a change the
    machine fires `elements.changed` with the task.
    """

    def __init__(
        self,
        accessor: MetadataAccessor,
        bus: EventBus,
        default_destination: str | None = DEFAULT_DESTINATION,
    ):
        self.accessor = accessor
        self.bus = bus
        self.default_destination = default_destination
        self.assignments = AssignmentEditor(accessor)
        self._hooks: list[TransitionHook] = []

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_kind(self, task_id: str) -> TaskKind | None:
        """Get a task's kind. Stored values are compared case-insensitively."""
        return read_kind(self.accessor, task_id)

    def has_kind(self, task_id: str, kind: TaskKind | str | None) -> bool:
        """Check whether a task currently has a kind."""
        return self.get_kind(task_id) == parse_kind(kind)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def set_kind(self, task_id: str, kind: TaskKind | str | None) -> KindTransition:
        """Set a task's kind and bring its attributes in line with it.

        Args:
            task_id: The task id.
            kind: The new kind; `None` or "none" clears the kind.

        Returns:
            The transition that was applied.

        Raises:
            ConfigurationError: If the kind is unknown. The task is left untouched.
            KeyError: If no task with this id exists. Pools, lanes and flows
                count as unknown tasks.
        """
        new = parse_kind(kind)
        if self.accessor.graph.element_type(task_id) != ElementType.TASK:
            raise KeyError(f"Unknown task '{task_id}'")

        transition = KindTransition(task_id, self.get_kind(task_id), new)

        if new is None:
            self._clear(task_id)
        else:
            config = get_kind_config(new)
            self.accessor.update_attributes(
                task_id,
                remove=lambda e: e.kind not in config.allowed_attributes,
                add=[make_attribute(AttributeKind.TYPE, new.value)]
                + self._defaults(task_id, config),
            )

        self._dispatch(transition)
        self.bus.fire(Notification.ELEMENTS_CHANGED, elements=[task_id])
        return transition

    def clear_kind(self, task_id: str) -> KindTransition:
        """Remove the kind and every kind-related attribute from a task."""
        return self.set_kind(task_id, None)

    def _clear(self, task_id: str) -> None:
        self.accessor.remove_attributes(task_id, lambda e: e.kind in TASK_ATTRIBUTES)

    def _defaults(self, task_id: str, config: KindConfig) -> list[Attribute]:
        defaults = []

        if AttributeKind.DESTINATION in config.attributes:
            current = self.accessor.get_attribute(task_id, AttributeKind.DESTINATION)
            if not current and self.default_destination:
                defaults.append(
                    make_attribute(AttributeKind.DESTINATION, self.default_destination)
                )

        if AttributeKind.BINDING in config.attributes:
            if self.accessor.get_attribute(task_id, AttributeKind.BINDING) is None:
                defaults.append(make_attribute(AttributeKind.BINDING, ""))

        return defaults

    # -------------------------------------------------------------------------
    # Hooks
    # -------------------------------------------------------------------------

    def on_transition(self, hook: TransitionHook) -> None:
        """Register a callback run after every kind transition."""
        self._hooks.append(hook)

    def _dispatch(self, transition: KindTransition) -> None:
        # Independent checks: one transition may fire several of them
        if transition.leaves_binding:
            self._on_leave_binding(transition)
        if transition.enters_binding:
            self._on_enter_binding(transition)
        if transition.enters_movement:
            self._on_enter_movement(transition)
        if transition.leaves_movement:
            self._on_leave_movement(transition)

        for hook in self._hooks:
            hook(transition)

    def _on_leave_binding(self, transition: KindTransition) -> None:
        logger.info(
            "Changing binding task %s to %s",
            transition.task_id,
            _label(transition.new),
        )

    def _on_enter_binding(self, transition: KindTransition) -> None:
        logger.info(
            "Changing %s task %s to binding",
            _label(transition.previous),
            transition.task_id,
        )

    def _on_enter_movement(self, transition: KindTransition) -> None:
        logger.debug("Task %s is now a movement task", transition.task_id)

    def _on_leave_movement(self, transition: KindTransition) -> None:
        logger.debug("Task %s is no longer a movement task", transition.task_id)


def _label(kind: TaskKind | None) -> str:
    return kind.value if kind is not None else "none"
