"""Tests for DiagramGraph."""

import pytest

from bindflow.graph.diagram import DiagramGraph
from bindflow.graph.node_types import EdgeType, ElementType
from bindflow.metadata.accessor import make_attribute
from bindflow.metadata.attributes import AttributeKind


@pytest.fixture
def graph():
    graph = DiagramGraph()
    graph.add_pool("Robot", name="Robot arm", process_ref="Process_Robot")
    graph.add_lane("Lane", "Robot")
    graph.add_task("Grab", "Lane", name="Grab part")
    graph.add_task("Move", "Robot")
    graph.add_pool("Cart", process_ref="Process_Cart")
    graph.add_task("Hold", "Cart")
    graph.add_sequence_flow("F1", "Grab", "Move")
    graph.add_message_flow("M1", "Grab", "Hold")
    return graph


class TestNodes:
    def test_element_types(self, graph):
        assert graph.element_type("Robot") == ElementType.POOL
        assert graph.element_type("Lane") == ElementType.LANE
        assert graph.element_type("Grab") == ElementType.TASK
        assert graph.element_type("M1") == EdgeType.MESSAGE_FLOW
        assert graph.element_type("Nope") is None

    def test_process_inherited_through_lane(self, graph):
        assert graph.get_process("Grab") == "Process_Robot"
        assert graph.get_process("Hold") == "Process_Cart"

    def test_explicit_process_wins(self, graph):
        graph.add_task("Odd", "Robot", process="Process_Other")

        assert graph.get_process("Odd") == "Process_Other"

    def test_containment(self, graph):
        assert graph.get_parent("Grab") == "Lane"
        assert graph.get_children("Robot") == ["Lane", "Move"]
        assert graph.is_descendant_of("Grab", "Robot")
        assert not graph.is_descendant_of("Grab", "Cart")

    def test_name_falls_back_to_id(self, graph):
        assert graph.get_name("Grab") == "Grab part"
        assert graph.get_name("Move") == "Move"

    def test_find_pool_by_process(self, graph):
        assert graph.find_pool_by_process("Process_Cart") == "Cart"
        assert graph.find_pool_by_process("Process_Nope") is None
        assert graph.find_pool_by_process(None) is None

    def test_duplicate_id_rejected(self, graph):
        with pytest.raises(ValueError):
            graph.add_task("M1", "Robot")

    def test_unknown_parent_rejected(self, graph):
        with pytest.raises(KeyError):
            graph.add_task("X", "Nowhere")

    def test_pool_is_not_a_flow_node(self, graph):
        with pytest.raises(ValueError):
            graph.add_flow_node("X", ElementType.POOL, None)


class TestFlows:
    def test_endpoints(self, graph):
        assert graph.get_flow_endpoints("M1") == ("Grab", "Hold")
        assert graph.is_flow("F1")
        assert not graph.is_flow("Grab")

    def test_incoming_outgoing_by_type(self, graph):
        assert graph.get_outgoing("Grab", EdgeType.SEQUENCE_FLOW) == [("F1", "Move")]
        assert graph.get_outgoing("Grab", EdgeType.MESSAGE_FLOW) == [("M1", "Hold")]
        assert graph.get_incoming("Hold", EdgeType.MESSAGE_FLOW) == [("M1", "Grab")]
        assert graph.get_incoming("Robot", EdgeType.CONTAINS) == []

    def test_attached_flows(self, graph):
        assert graph.get_attached_flows("Hold") == ["M1"]
        assert graph.get_attached_flows("Move") == []

    def test_iter_flows(self, graph):
        assert list(graph.iter_flows(EdgeType.MESSAGE_FLOW)) == ["M1"]
        assert list(graph.iter_flows(EdgeType.SEQUENCE_FLOW)) == ["F1"]

    def test_reconnect_keeps_metadata(self, graph):
        entry = make_attribute(AttributeKind.TYPE, "binding")
        graph.set_metadata("M1", [entry])

        graph.reconnect_flow("M1", target="Move")

        assert graph.get_flow_endpoints("M1") == ("Grab", "Move")
        assert graph.get_metadata("M1") == [entry]
        assert graph.get_attached_flows("Hold") == []

    def test_reconnect_to_unknown_endpoint_keeps_flow(self, graph):
        entry = make_attribute(AttributeKind.TYPE, "binding")
        graph.set_metadata("M1", [entry])

        with pytest.raises(KeyError, match="Nope"):
            graph.reconnect_flow("M1", target="Nope")

        assert graph.get_flow_endpoints("M1") == ("Grab", "Hold")
        assert graph.get_metadata("M1") == [entry]
        assert graph.get_attached_flows("Hold", EdgeType.MESSAGE_FLOW) == ["M1"]

    def test_reconnect_unknown_flow(self, graph):
        with pytest.raises(KeyError):
            graph.reconnect_flow("M9", target="Move")

    def test_remove_flow(self, graph):
        graph.remove_element("M1")

        assert not graph.has_element("M1")
        assert graph.get_attached_flows("Grab") == []

    def test_remove_node_removes_attached_flows(self, graph):
        graph.remove_element("Hold")

        assert not graph.has_element("M1")
        assert list(graph.iter_flows(EdgeType.MESSAGE_FLOW)) == []

    def test_unknown_endpoint_rejected(self, graph):
        with pytest.raises(KeyError):
            graph.add_message_flow("M2", "Grab", "Nowhere")


class TestMetadata:
    def test_get_metadata_is_a_copy(self, graph):
        graph.get_metadata("Grab").append("junk")

        assert graph.get_metadata("Grab") == []

    def test_get_element(self, graph):
        data = graph.get_element("Robot")

        assert data["id"] == "Robot"
        assert data["process_ref"] == "Process_Robot"
        assert graph.get_element("Nope") is None
