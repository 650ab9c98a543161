"""Sequence-flow traversal within a pool."""

from ..graph.diagram import DiagramGraph
from ..graph.node_types import EdgeType, ElementType
from ..kinds.task_kinds import TaskKind, read_kind
from ..metadata.accessor import MetadataAccessor


def find_containing_pool(graph: DiagramGraph, task_id: str) -> str | None:
    """Find the pool whose process reference matches the task's owning process."""
    if not graph.has_element(task_id) or graph.is_flow(task_id):
        return None
    return graph.find_pool_by_process(graph.get_process(task_id))


def find_upstream_binding_tasks(
    graph: DiagramGraph, accessor: MetadataAccessor, task_id: str
) -> set[str]:
    """Find Binding tasks that precede a task in its pool.

    Walks sequence flows backward, depth first, visiting each node once.
    The task itself only counts when a cycle leads back to it.
    """
    return _collect(graph, accessor, task_id, TaskKind.BINDING, backward=True)


def find_dependent_unbinding_tasks(
    graph: DiagramGraph, accessor: MetadataAccessor, task_id: str
) -> set[str]:
    """Find Unbinding tasks that follow a task in its pool."""
    return _collect(graph, accessor, task_id, TaskKind.UNBINDING, backward=False)


def _collect(
    graph: DiagramGraph,
    accessor: MetadataAccessor,
    start: str,
    kind: TaskKind,
    backward: bool,
) -> set[str]:
    pool = find_containing_pool(graph, start)
    if pool is None:
        return set()

    found: set[str] = set()
    visited: set[str] = set()
    stack = [start]

    while stack:
        node = stack.pop()
        if node in visited:
            continue
        visited.add(node)

        if backward:
            neighbours = graph.get_incoming(node, EdgeType.SEQUENCE_FLOW)
        else:
            neighbours = graph.get_outgoing(node, EdgeType.SEQUENCE_FLOW)

        for _, neighbour in neighbours:
            if not graph.is_descendant_of(neighbour, pool):
                continue

            if (
                graph.element_type(neighbour) == ElementType.TASK
                and read_kind(accessor, neighbour) == kind
            ):
                found.add(neighbour)

            stack.append(neighbour)

    return found
