"""Host-side diagram edits that fire the host's notifications."""

from pathlib import Path

from ..events import EventBus, Notification
from ..schema.loader import parse_diagram, parse_diagram_from_string
from ..schema.models import DiagramModel
from .builder import build_graph
from .diagram import DiagramGraph


class DiagramModeler:
    """Stands in for the diagram editor hosting the engine.

    Edits the graph the way the editor would and announces each edit on the
    bus with the editor's notification.
    """

    def __init__(self, graph: DiagramGraph, bus: EventBus):
        self.graph = graph
        self.bus = bus

    def import_model(self, model: DiagramModel) -> DiagramGraph:
        """Load a parsed diagram into the graph and fire `import.done`."""
        build_graph(model, self.graph)
        self.bus.fire(Notification.IMPORT_DONE)
        return self.graph

    def import_file(self, path: str | Path) -> DiagramGraph:
        """Load a diagram file into the graph and fire `import.done`."""
        return self.import_model(parse_diagram(path))

    def import_string(self, yaml_string: str) -> DiagramGraph:
        """Load a YAML diagram into the graph and fire `import.done`."""
        return self.import_model(parse_diagram_from_string(yaml_string))

    def add_message_flow(
        self, flow_id: str, source: str, target: str, name: str | None = None
    ) -> str:
        """Connect two elements with a message flow."""
        self.graph.add_message_flow(flow_id, source, target, name=name)
        self.bus.fire(Notification.CONNECTION_CREATED, element=flow_id)
        return flow_id

    def add_sequence_flow(
        self, flow_id: str, source: str, target: str, name: str | None = None
    ) -> str:
        """Connect two flow nodes with a sequence flow."""
        self.graph.add_sequence_flow(flow_id, source, target, name=name)
        self.bus.fire(Notification.CONNECTION_CREATED, element=flow_id)
        return flow_id

    def reconnect(
        self, flow_id: str, source: str | None = None, target: str | None = None
    ) -> None:
        """Move one or both ends of a flow."""
        self.graph.reconnect_flow(flow_id, source=source, target=target)
        self.bus.fire(Notification.CONNECTION_RECONNECTED, element=flow_id)

    def remove_element(self, element_id: str) -> None:
        """Delete an element together with its attached flows."""
        self.graph.remove_element(element_id)
