"""Builder for converting a DiagramModel into a DiagramGraph."""

from ..metadata.attributes import Attribute, AttributeKind, new_assignment_id
from ..schema.models import DiagramModel, MessageFlow, Task
from .diagram import DiagramGraph
from .node_types import ElementType


def build_graph(model: DiagramModel, graph: DiagramGraph | None = None) -> DiagramGraph:
    """Build a DiagramGraph from a DiagramModel.

    Metadata is written directly, the way a host restores a saved file: no
    notification is fired. Flow ids come resolved from the validated model.

    Args:
        model: The parsed diagram.
        graph: Graph to add the diagram to. A new one is created if omitted.

    Returns:
        The populated DiagramGraph.
    """
    graph = graph if graph is not None else DiagramGraph()

    # Containers and nodes first
    for pool_id, pool in model.pools.items():
        graph.add_pool(pool_id, name=pool.name, process_ref=pool.process or f"Process_{pool_id}")

        for lane_id in pool.lanes:
            graph.add_lane(lane_id, pool_id)

        for task_id, task in pool.tasks.items():
            graph.add_task(task_id, task.lane or pool_id, name=task.name)
            graph.set_metadata(task_id, _task_metadata(task))

        for node_id, node in pool.nodes.items():
            graph.add_flow_node(
                node_id, ElementType(node.type), node.lane or pool_id, name=node.name
            )

    # Flows once every endpoint exists
    for pool in model.pools.values():
        for flow in pool.sequence_flows:
            graph.add_sequence_flow(flow.id, flow.source, flow.target, name=flow.name)

    for flow in model.message_flows:
        graph.add_message_flow(flow.id, flow.source, flow.target, name=flow.name)
        graph.set_metadata(flow.id, _flow_metadata(flow))

    return graph


def _task_metadata(task: Task) -> list[Attribute]:
    entries = []

    if task.kind is not None:
        entries.append(Attribute(kind=AttributeKind.TYPE, value=task.kind))
    if task.destination is not None:
        entries.append(Attribute(kind=AttributeKind.DESTINATION, value=task.destination))
    if task.binding is not None:
        entries.append(Attribute(kind=AttributeKind.BINDING, value=task.binding))

    for assignment in task.assignments:
        slot = assignment.id or new_assignment_id()
        entries.append(
            Attribute(kind=AttributeKind.TASK_ASSIGNMENT, value=assignment.condition, slot=slot)
        )
        entries.append(
            Attribute(kind=AttributeKind.TASK_ASSIGNMENT_REACHED, value=assignment.value, slot=slot)
        )

    return entries


def _flow_metadata(flow: MessageFlow) -> list[Attribute]:
    stored = flow.classification
    if stored is None:
        return []

    fields = [
        (AttributeKind.TYPE, stored.type),
        (AttributeKind.PARTICIPANT1, stored.participant1),
        (AttributeKind.PARTICIPANT2, stored.participant2),
    ]
    return [Attribute(kind=kind, value=value) for kind, value in fields if value is not None]
