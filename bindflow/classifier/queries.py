"""Read-only queries over classified message flows."""

from dataclasses import dataclass
from typing import Iterator

from ..graph.diagram import DiagramGraph
from ..graph.node_types import EdgeType
from ..metadata.accessor import MetadataAccessor
from ..metadata.attributes import AttributeKind
from .classifier import Classification


@dataclass(frozen=True)
class ConnectionInfo:
    """Stored classification data of one message flow."""

    connection_id: str
    classification: str
    source_pool: str
    target_pool: str
    source_task: str
    target_task: str


def get_connection_info(
    graph: DiagramGraph, accessor: MetadataAccessor, connection_id: str
) -> ConnectionInfo | None:
    """Get the stored classification of a message flow.

    Returns None unless the type and both pool references are stored.
    """
    if graph.element_type(connection_id) != EdgeType.MESSAGE_FLOW:
        return None

    stored_type = accessor.get_attribute(connection_id, AttributeKind.TYPE)
    source_pool = accessor.get_attribute(connection_id, AttributeKind.PARTICIPANT1)
    target_pool = accessor.get_attribute(connection_id, AttributeKind.PARTICIPANT2)
    if not stored_type or not source_pool or not target_pool:
        return None

    source, target = graph.get_flow_endpoints(connection_id)
    return ConnectionInfo(
        connection_id=connection_id,
        classification=stored_type.lower(),
        source_pool=source_pool,
        target_pool=target_pool,
        source_task=source,
        target_task=target,
    )


def iter_typed_connections(
    graph: DiagramGraph,
    accessor: MetadataAccessor,
    classification: Classification | None = None,
) -> Iterator[ConnectionInfo]:
    """Iterate over message flows carrying a classification.

    Args:
        graph: The diagram graph.
        accessor: Metadata accessor for the graph.
        classification: Only yield flows with this classification.
    """
    for flow_id in graph.iter_flows(EdgeType.MESSAGE_FLOW):
        info = get_connection_info(graph, accessor, flow_id)
        if info is None:
            continue
        if classification is not None and info.classification != classification.value:
            continue
        yield info


def connections_for_task(
    graph: DiagramGraph, accessor: MetadataAccessor, task_id: str
) -> list[ConnectionInfo]:
    """Get typed connections starting or ending at a task."""
    return [
        info
        for info in iter_typed_connections(graph, accessor)
        if task_id in (info.source_task, info.target_task)
    ]


def connections_for_pool(
    graph: DiagramGraph, accessor: MetadataAccessor, pool_id: str
) -> list[ConnectionInfo]:
    """Get typed connections whose stored references include a pool."""
    return [
        info
        for info in iter_typed_connections(graph, accessor)
        if pool_id in (info.source_pool, info.target_pool)
    ]


def binding_pairs(
    graph: DiagramGraph, accessor: MetadataAccessor
) -> list[tuple[str, str, str]]:
    """Get (source_pool, target_pool, connection_id) of every binding flow."""
    return _pairs(graph, accessor, Classification.BINDING)


def unbinding_pairs(
    graph: DiagramGraph, accessor: MetadataAccessor
) -> list[tuple[str, str, str]]:
    """Get (source_pool, target_pool, connection_id) of every unbinding flow."""
    return _pairs(graph, accessor, Classification.UNBINDING)


def _pairs(
    graph: DiagramGraph, accessor: MetadataAccessor, classification: Classification
) -> list[tuple[str, str, str]]:
    return [
        (info.source_pool, info.target_pool, info.connection_id)
        for info in iter_typed_connections(graph, accessor, classification)
    ]


def are_pools_bound(
    graph: DiagramGraph, accessor: MetadataAccessor, pool_a: str, pool_b: str
) -> bool:
    """Check whether a binding flow joins two pools, in either direction."""
    return any(
        {source, target} == {pool_a, pool_b}
        for source, target, _ in binding_pairs(graph, accessor)
    )
