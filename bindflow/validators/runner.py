"""Validation runner that audits a whole diagram."""

from pathlib import Path

from ..classifier.classifier import MAX_POOL_DEPTH, ConnectionClassifier
from ..events import EventBus
from ..graph.builder import build_graph
from ..graph.diagram import DiagramGraph
from ..graph.mutator import GraphMutator
from ..graph.node_types import EdgeType, ElementType
from ..kinds.task_kinds import TaskKind, read_kind
from ..metadata.accessor import MetadataAccessor
from ..schema.config import EngineConfig
from ..schema.loader import parse_diagram
from .base import ValidationResult
from .kind_change import describe_binding_dependents, missing_upstream_binding_warning


def check_missing_upstream_bindings(
    graph: DiagramGraph, accessor: MetadataAccessor
) -> ValidationResult:
    """Warn about Unbinding tasks with no Binding task before them."""
    result = ValidationResult()

    for task_id in sorted(graph.iter_elements(ElementType.TASK)):
        if read_kind(accessor, task_id) == TaskKind.UNBINDING:
            result.add_issue(missing_upstream_binding_warning(graph, accessor, task_id))

    return result


def check_binding_dependents(
    graph: DiagramGraph, accessor: MetadataAccessor
) -> ValidationResult:
    """Note which Unbinding tasks each Binding task carries."""
    result = ValidationResult()

    for task_id in sorted(graph.iter_elements(ElementType.TASK)):
        result.add_issue(describe_binding_dependents(graph, accessor, task_id))

    return result


def check_stale_classifications(
    graph: DiagramGraph,
    accessor: MetadataAccessor,
    max_pool_depth: int = MAX_POOL_DEPTH,
) -> ValidationResult:
    """Warn about message flows whose stored classification is out of date."""
    result = ValidationResult()
    classifier = ConnectionClassifier(graph, accessor, max_pool_depth)

    for flow_id in sorted(graph.iter_flows(EdgeType.MESSAGE_FLOW)):
        if not classifier.needs_update(flow_id):
            continue

        stored = classifier.stored_state(flow_id)
        desired = classifier.desired_state(flow_id)
        result.add_warning(
            "stale_classification",
            f"Message flow '{flow_id}' is stored as {stored.classification or 'unclassified'} "
            f"but its tasks make it {desired.classification or 'unclassified'}",
            suggestion="Re-run classification on this diagram.",
            connection=flow_id,
            stored=stored.classification,
            expected=desired.classification,
        )

    return result


def run_validators(
    graph: DiagramGraph,
    accessor: MetadataAccessor,
    config: EngineConfig | None = None,
) -> ValidationResult:
    """Run all diagram audits.

    Args:
        graph: The diagram graph.
        accessor: Metadata accessor for the graph.
        config: Engine settings; defaults apply when omitted.

    Returns:
        Combined ValidationResult from all audits.
    """
    config = config or EngineConfig()
    result = ValidationResult()

    result.merge(check_missing_upstream_bindings(graph, accessor))
    result.merge(check_stale_classifications(graph, accessor, config.max_pool_depth))
    result.merge(check_binding_dependents(graph, accessor))

    return result


def validate_diagram_file(
    path: str | Path, config: EngineConfig | None = None
) -> ValidationResult:
    """Load and audit a diagram file.

    Raises:
        SchemaLoadError: If the file cannot be loaded.
        SchemaValidationError: If the diagram fails schema validation.
    """
    graph = build_graph(parse_diagram(path))
    accessor = MetadataAccessor(graph, GraphMutator(graph, EventBus()))
    return run_validators(graph, accessor, config)
