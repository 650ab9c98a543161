"""Task kind definitions and per-kind configuration."""

from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from ..metadata.attributes import AttributeKind
from .errors import ConfigurationError

if TYPE_CHECKING:
    from ..metadata.accessor import MetadataAccessor

DEFAULT_DESTINATION = "${destination}"


class TaskKind(str, Enum):
    """Kinds a task can carry. A task without a kind has `None`."""

    MOVEMENT = "movement"
    BINDING = "binding"
    UNBINDING = "unbinding"


@dataclass(frozen=True)
class KindConfig:
    """Static configuration of one task kind."""

    kind: TaskKind
    type_value: str
    attributes: frozenset[AttributeKind]
    validation_rules: tuple[str, ...] = ()  # checked when a task becomes this kind
    leave_rules: tuple[str, ...] = ()  # checked when a task stops being this kind
    form_type: str = "none"

    @property
    def allowed_attributes(self) -> frozenset[AttributeKind]:
        """Attributes that survive a change to this kind."""
        return self.attributes | {AttributeKind.TYPE}


_ASSIGNMENTS = frozenset(
    {AttributeKind.TASK_ASSIGNMENT, AttributeKind.TASK_ASSIGNMENT_REACHED}
)

TASK_KINDS_CONFIG: dict[TaskKind, KindConfig] = {
    TaskKind.MOVEMENT: KindConfig(
        kind=TaskKind.MOVEMENT,
        type_value="Movement",
        attributes=_ASSIGNMENTS | {AttributeKind.DESTINATION},
        form_type="destination",
    ),
    TaskKind.BINDING: KindConfig(
        kind=TaskKind.BINDING,
        type_value="Binding",
        attributes=_ASSIGNMENTS | {AttributeKind.BINDING},
        leave_rules=("no_downstream_unbinding",),
    ),
    TaskKind.UNBINDING: KindConfig(
        kind=TaskKind.UNBINDING,
        type_value="Unbinding",
        attributes=_ASSIGNMENTS,
        validation_rules=("requires_upstream_binding",),
    ),
}

# Every attribute a task kind may own; cleared together with the kind.
TASK_ATTRIBUTES = frozenset(
    {AttributeKind.TYPE, AttributeKind.DESTINATION, AttributeKind.BINDING}
) | _ASSIGNMENTS

_NO_KIND = {"", "none"}


def parse_kind(value: "TaskKind | str | None") -> TaskKind | None:
    """Normalize a kind key, case-insensitively.

    `None`, `""` and `"none"` mean "no kind".

    Raises:
        ConfigurationError: If the key is not a known kind.
    """
    if value is None or isinstance(value, TaskKind):
        return value

    key = str(value).strip().lower()
    if key in _NO_KIND:
        return None
    try:
        return TaskKind(key)
    except ValueError:
        raise ConfigurationError(f"Unknown task kind: {value}", str(value)) from None


def get_kind_config(kind: TaskKind) -> KindConfig:
    """Get the configuration of a kind."""
    return TASK_KINDS_CONFIG[kind]


def get_kind_by_type_value(type_value: str) -> KindConfig | None:
    """Find a kind by its display type value ("Binding", "Movement", ...)."""
    for config in TASK_KINDS_CONFIG.values():
        if config.type_value.lower() == type_value.lower():
            return config
    return None


def requires_validation(previous: TaskKind | None, new: TaskKind | None) -> bool:
    """Check whether a kind transition triggers advisory validation."""
    # Changing away from Binding
    if previous == TaskKind.BINDING and new != TaskKind.BINDING:
        return True

    # Changing to Unbinding
    if new == TaskKind.UNBINDING:
        return True

    return False


def read_kind(accessor: "MetadataAccessor", element_id: str) -> TaskKind | None:
    """Read the kind stored on an element, case-insensitively.

    Unrecognised stored values read as no kind.
    """
    value = accessor.get_attribute(element_id, AttributeKind.TYPE)
    if not value:
        return None
    try:
        return parse_kind(value)
    except ConfigurationError:
        return None
