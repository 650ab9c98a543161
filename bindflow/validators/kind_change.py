"""Advisory checks run before a task changes kind.

None of these checks block the change: they only describe what the change
will do to the Binding/Unbinding structure of the task's pool.
"""

from typing import Any, Callable

from ..graph.diagram import DiagramGraph
from ..kinds.task_kinds import (
    TaskKind,
    get_kind_config,
    parse_kind,
    read_kind,
    requires_validation,
)
from ..metadata.accessor import MetadataAccessor
from .base import Severity, ValidationResult, ValidationWarning
from .traversal import find_dependent_unbinding_tasks, find_upstream_binding_tasks

NAME_PREVIEW_LIMIT = 3


def validate_kind_change(
    graph: DiagramGraph,
    accessor: MetadataAccessor,
    task_id: str,
    new_kind: TaskKind | str | None,
    name_preview_limit: int = NAME_PREVIEW_LIMIT,
) -> ValidationResult:
    """Collect the advisories for changing a task to a new kind.

    The result is always valid. Its first advisory is the one to show.

    Raises:
        ConfigurationError: If `new_kind` is not a known kind.
    """
    new = parse_kind(new_kind)
    current = read_kind(accessor, task_id)
    result = ValidationResult()

    if current == new or not requires_validation(current, new):
        return result

    rules: list[str] = []
    if new is not None:
        rules += get_kind_config(new).validation_rules
    if current is not None:
        rules += get_kind_config(current).leave_rules
    for rule in rules:
        result.add_issue(RULES[rule](graph, accessor, task_id, name_preview_limit))

    if current == TaskKind.BINDING:
        result.add_issue(describe_binding_dependents(graph, accessor, task_id))

    return result


def quick_check(
    graph: DiagramGraph,
    accessor: MetadataAccessor,
    task_id: str,
    new_kind: TaskKind | str | None,
) -> dict[str, Any]:
    """Summarize `validate_kind_change` for UI feedback."""
    return validate_kind_change(graph, accessor, task_id, new_kind).summary()


def missing_upstream_binding_warning(
    graph: DiagramGraph, accessor: MetadataAccessor, task_id: str
) -> ValidationWarning | None:
    """Warn when no Binding task precedes a task in its pool."""
    if find_upstream_binding_tasks(graph, accessor, task_id):
        return None

    return ValidationWarning(
        code="missing_upstream_binding",
        message=(
            "No preceding Binding task found in the same pool. "
            "Consider adding a Binding task before this Unbinding."
        ),
        severity=Severity.WARNING,
        task=task_id,
        suggestion="Add a Binding task earlier in the flow to establish what should be unbound.",
    )


def orphaned_unbinding_warning(
    graph: DiagramGraph,
    accessor: MetadataAccessor,
    task_id: str,
    name_preview_limit: int = NAME_PREVIEW_LIMIT,
) -> ValidationWarning | None:
    """Warn that Unbinding tasks after a Binding task would lose their Binding."""
    dependents = sorted(find_dependent_unbinding_tasks(graph, accessor, task_id))
    if not dependents:
        return None

    names = ", ".join(graph.get_name(t) for t in dependents[:name_preview_limit])
    suffix = "..." if len(dependents) > name_preview_limit else ""

    return ValidationWarning(
        code="orphaned_unbinding",
        message=(
            "This change will leave Unbinding tasks without a corresponding "
            f"Binding: {names}{suffix}"
        ),
        severity=Severity.WARNING,
        task=task_id,
        affected_tasks=dependents,
        suggestion=(
            "Consider changing those Unbinding tasks to a different type "
            "or keeping this as a Binding task."
        ),
    )


def describe_binding_dependents(
    graph: DiagramGraph, accessor: MetadataAccessor, task_id: str
) -> ValidationWarning | None:
    """Describe which Unbinding tasks depend on a Binding task.

    Returns None when the task is not Binding or has no dependents.
    """
    if read_kind(accessor, task_id) != TaskKind.BINDING:
        return None

    dependents = sorted(find_dependent_unbinding_tasks(graph, accessor, task_id))
    if not dependents:
        return None

    names = ", ".join(f'"{graph.get_name(t)}"' for t in dependents)
    return ValidationWarning(
        code="binding_change_impact",
        message=f"Changing this Binding will affect these Unbinding tasks: {names}",
        severity=Severity.INFO,
        task=task_id,
        affected_tasks=dependents,
        suggestion="Make sure this change aligns with your process design.",
    )


RuleCheck = Callable[
    [DiagramGraph, MetadataAccessor, str, int], ValidationWarning | None
]

# Rule names used by `KindConfig.validation_rules` and `KindConfig.leave_rules`
RULES: dict[str, RuleCheck] = {
    "requires_upstream_binding": lambda graph, accessor, task_id, _limit: (
        missing_upstream_binding_warning(graph, accessor, task_id)
    ),
    "no_downstream_unbinding": orphaned_unbinding_warning,
}
