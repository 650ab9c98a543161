"""Task kinds: kind table, state machine and assignments."""

from .errors import ConfigurationError
from .task_kinds import (
    DEFAULT_DESTINATION,
    TASK_KINDS_CONFIG,
    KindConfig,
    TaskKind,
    get_kind_by_type_value,
    get_kind_config,
    parse_kind,
    read_kind,
    requires_validation,
)
from .assignments import Assignment, AssignmentEditor
from .state_machine import KindTransition, TaskKindStateMachine

__all__ = [
    "ConfigurationError",
    "DEFAULT_DESTINATION",
    "TASK_KINDS_CONFIG",
    "KindConfig",
    "TaskKind",
    "get_kind_by_type_value",
    "get_kind_config",
    "parse_kind",
    "read_kind",
    "requires_validation",
    "Assignment",
    "AssignmentEditor",
    "KindTransition",
    "TaskKindStateMachine",
]
