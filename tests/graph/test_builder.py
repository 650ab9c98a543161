"""Tests for graph building from diagram files."""

from bindflow.graph.builder import build_graph
from bindflow.graph.diagram import DiagramGraph
from bindflow.graph.node_types import EdgeType, ElementType
from bindflow.metadata.attributes import Attribute, AttributeKind
from bindflow.schema.loader import parse_diagram_from_string


class TestBuildGraph:
    def test_pools_and_processes(self, factory_graph):
        pools = {p["id"]: p["process_ref"] for p in factory_graph.get_pools()}

        assert pools == {"Robot": "Process_Robot", "Cart": "Process_Cart"}

    def test_default_process_reference(self):
        graph = build_graph(parse_diagram_from_string("pools: {Shelf: {tasks: {T: {}}}}"))

        assert graph.get_process("T") == "Process_Shelf"

    def test_tasks_in_lanes(self, factory_graph):
        assert factory_graph.get_parent("Grab") == "Lane_Left"
        assert factory_graph.get_parent("Move") == "Robot"

    def test_flow_nodes(self, factory_graph):
        assert factory_graph.element_type("Start") == ElementType.START_EVENT
        assert factory_graph.element_type("End") == ElementType.END_EVENT

    def test_sequence_flow_ids(self, factory_graph):
        flows = list(factory_graph.iter_flows(EdgeType.SEQUENCE_FLOW))

        assert "Flow_Start_Grab" in flows
        assert "F_end" in flows

    def test_task_metadata(self, factory_graph):
        assert factory_graph.get_metadata("Grab") == [
            Attribute(kind=AttributeKind.TYPE, value="binding"),
            Attribute(kind=AttributeKind.BINDING, value="part"),
        ]
        assert factory_graph.get_metadata("Idle") == []

    def test_assignment_pairs_share_a_slot(self, factory_graph):
        assert factory_graph.get_metadata("Release")[1:] == [
            Attribute(kind=AttributeKind.TASK_ASSIGNMENT, value="part.ready", slot="a1"),
            Attribute(
                kind=AttributeKind.TASK_ASSIGNMENT_REACHED, value="part.released", slot="a1"
            ),
        ]

    def test_generated_assignment_slot(self):
        graph = build_graph(
            parse_diagram_from_string(
                """
pools:
  P:
    tasks:
      T:
        assignments:
          - {condition: c, value: v}
"""
            )
        )

        condition, value = graph.get_metadata("T")
        assert condition.slot == value.slot
        assert condition.slot.startswith("assignment_")

    def test_stored_classification(self, factory_graph):
        assert factory_graph.get_metadata("M_bind") == [
            Attribute(kind=AttributeKind.TYPE, value="binding"),
            Attribute(kind=AttributeKind.PARTICIPANT1, value="Robot"),
            Attribute(kind=AttributeKind.PARTICIPANT2, value="Cart"),
        ]
        assert factory_graph.get_metadata("M_mixed") == []

    def test_message_flow_default_id(self):
        graph = build_graph(
            parse_diagram_from_string(
                """
pools:
  P: {tasks: {A: {}}}
  Q: {tasks: {B: {}}}
message_flows:
  - [A, B]
"""
            )
        )

        assert list(graph.iter_flows(EdgeType.MESSAGE_FLOW)) == ["MessageFlow_A_B"]

    def test_builds_into_existing_graph(self, factory_model):
        graph = DiagramGraph()
        assert build_graph(factory_model, graph) is graph
        assert graph.has_element("Grab")
