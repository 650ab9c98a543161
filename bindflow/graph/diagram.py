"""DiagramGraph wrapper around networkx for process diagrams."""

from typing import Any, Iterator

import networkx as nx

from .node_types import EdgeType, ElementType, FLOW_EDGE_TYPES


class DiagramGraph:
    """A graph representation of a process diagram.

    Wraps a networkx MultiDiGraph. Pools, lanes and flow nodes are nodes;
    sequence flows, message flows and containment are edges. Flow edges are
    keyed by their element id so they can carry metadata of their own.
    """

    def __init__(self):
        """Initialize an empty diagram graph."""
        self._graph = nx.MultiDiGraph()
        self._flows: dict[str, tuple[str, str]] = {}

    @property
    def graph(self) -> nx.MultiDiGraph:
        """Get the underlying networkx graph."""
        return self._graph

    # -------------------------------------------------------------------------
    # Node management
    # -------------------------------------------------------------------------

    def add_pool(
        self, pool_id: str, name: str | None = None, process_ref: str | None = None
    ) -> str:
        """Add a pool (participant) node.

        Args:
            pool_id: The pool id.
            name: Display name.
            process_ref: Id of the process the pool declares.

        Returns:
            The node ID.
        """
        self._check_free(pool_id)
        self._graph.add_node(
            pool_id,
            element_type=ElementType.POOL,
            name=name,
            process_ref=process_ref,
            metadata=[],
        )
        return pool_id

    def add_lane(self, lane_id: str, parent: str, name: str | None = None) -> str:
        """Add a lane inside a pool (or another lane)."""
        self._check_free(lane_id)
        self._graph.add_node(
            lane_id,
            element_type=ElementType.LANE,
            name=name,
            metadata=[],
        )
        self._add_child(parent, lane_id)
        return lane_id

    def add_task(
        self,
        task_id: str,
        parent: str | None,
        name: str | None = None,
        process: str | None = None,
    ) -> str:
        """Add a task node.

        Args:
            task_id: The task id.
            parent: The containing pool, lane or sub-process, if any.
            name: Display name.
            process: Owning process id. Inherited from the containing pool
                when not given.

        Returns:
            The node ID.
        """
        return self.add_flow_node(
            task_id, ElementType.TASK, parent, name=name, process=process
        )

    def add_flow_node(
        self,
        node_id: str,
        element_type: ElementType,
        parent: str | None,
        name: str | None = None,
        process: str | None = None,
    ) -> str:
        """Add a flow node (task, event, gateway, sub-process)."""
        if element_type in (ElementType.POOL, ElementType.LANE):
            raise ValueError(f"'{element_type.value}' is not a flow node type")

        self._check_free(node_id)
        self._graph.add_node(
            node_id,
            element_type=element_type,
            name=name,
            process=process,
            metadata=[],
        )
        if parent is not None:
            self._add_child(parent, node_id)
            if process is None:
                self._graph.nodes[node_id]["process"] = self._inherit_process(parent)

        return node_id

    def _add_child(self, parent: str, child: str) -> None:
        if not self._graph.has_node(parent):
            raise KeyError(f"Unknown parent element '{parent}'")
        self._graph.add_edge(
            parent, child, key=f"contains:{child}", edge_type=EdgeType.CONTAINS
        )

    def _inherit_process(self, parent: str) -> str | None:
        current: str | None = parent
        seen: set[str] = set()
        while current is not None and current not in seen:
            seen.add(current)
            data = self._graph.nodes[current]
            if data.get("element_type") == ElementType.POOL:
                return data.get("process_ref")
            if data.get("process"):
                return data["process"]
            current = self.get_parent(current)
        return None

    def _check_free(self, element_id: str) -> None:
        if self.has_element(element_id):
            raise ValueError(f"Element id '{element_id}' is already in use")

    # -------------------------------------------------------------------------
    # Flow management
    # -------------------------------------------------------------------------

    def add_sequence_flow(
        self, flow_id: str, source: str, target: str, name: str | None = None
    ) -> str:
        """Add a sequence flow between two flow nodes."""
        return self._add_flow(flow_id, source, target, EdgeType.SEQUENCE_FLOW, name)

    def add_message_flow(
        self, flow_id: str, source: str, target: str, name: str | None = None
    ) -> str:
        """Add a message flow (connection) between two elements."""
        return self._add_flow(flow_id, source, target, EdgeType.MESSAGE_FLOW, name)

    def _add_flow(
        self,
        flow_id: str,
        source: str,
        target: str,
        edge_type: EdgeType,
        name: str | None,
        metadata: list | None = None,
    ) -> str:
        self._check_free(flow_id)
        for endpoint in (source, target):
            if not self._graph.has_node(endpoint):
                raise KeyError(f"Unknown flow endpoint '{endpoint}'")

        self._graph.add_edge(
            source,
            target,
            key=flow_id,
            edge_type=edge_type,
            name=name,
            metadata=metadata if metadata is not None else [],
        )
        self._flows[flow_id] = (source, target)
        return flow_id

    def reconnect_flow(
        self, flow_id: str, source: str | None = None, target: str | None = None
    ) -> None:
        """Move one or both ends of a flow, keeping its id and metadata.

        Raises:
            KeyError: If the flow or a new endpoint does not exist. The flow
                is left unchanged.
        """
        old_source, old_target = self.get_flow_endpoints(flow_id)
        for endpoint in (source, target):
            if endpoint is not None and not self._graph.has_node(endpoint):
                raise KeyError(f"Unknown flow endpoint '{endpoint}'")

        data = dict(self._graph.edges[old_source, old_target, flow_id])

        self._graph.remove_edge(old_source, old_target, key=flow_id)
        del self._flows[flow_id]

        self._add_flow(
            flow_id,
            source or old_source,
            target or old_target,
            data["edge_type"],
            data.get("name"),
            data.get("metadata"),
        )

    def remove_element(self, element_id: str) -> None:
        """Remove a node (with its attached flows) or a flow."""
        if element_id in self._flows:
            source, target = self._flows.pop(element_id)
            self._graph.remove_edge(source, target, key=element_id)
            return

        if not self._graph.has_node(element_id):
            raise KeyError(f"Unknown element '{element_id}'")

        attached = [
            key
            for _, _, key in list(self._graph.in_edges(element_id, keys=True))
            + list(self._graph.out_edges(element_id, keys=True))
            if key in self._flows
        ]
        for flow_id in attached:
            self._flows.pop(flow_id, None)
        self._graph.remove_node(element_id)

    # -------------------------------------------------------------------------
    # Element access
    # -------------------------------------------------------------------------

    def has_element(self, element_id: str) -> bool:
        """Check whether a node or flow with this id exists."""
        return element_id in self._flows or self._graph.has_node(element_id)

    def is_flow(self, element_id: str) -> bool:
        """Check whether the id names a sequence or message flow."""
        return element_id in self._flows

    def element_type(self, element_id: str) -> ElementType | EdgeType | None:
        """Get the element or edge type of an element."""
        if not self.has_element(element_id):
            return None
        return self._data(element_id).get(
            "edge_type" if self.is_flow(element_id) else "element_type"
        )

    def get_element(self, element_id: str) -> dict[str, Any] | None:
        """Get a copy of an element's data, with its id."""
        if not self.has_element(element_id):
            return None
        data = dict(self._data(element_id))
        data["id"] = element_id
        data["metadata"] = list(data.get("metadata", []))
        return data

    def get_name(self, element_id: str) -> str:
        """Get the display name of an element, falling back to its id."""
        return self._data(element_id).get("name") or element_id

    def get_metadata(self, element_id: str) -> list:
        """Get a copy of the metadata entries stored on an element."""
        return list(self._data(element_id).get("metadata", []))

    def set_metadata(self, element_id: str, entries: list) -> None:
        """Replace the metadata entries of an element.

        This is a raw write: no notification is fired. Hosts go through a
        ModelMutator instead.
        """
        self._data(element_id)["metadata"] = list(entries)

    def _data(self, element_id: str) -> dict[str, Any]:
        if element_id in self._flows:
            source, target = self._flows[element_id]
            return self._graph.edges[source, target, element_id]
        if self._graph.has_node(element_id):
            return self._graph.nodes[element_id]
        raise KeyError(f"Unknown element '{element_id}'")

    # -------------------------------------------------------------------------
    # Structure queries
    # -------------------------------------------------------------------------

    def get_parent(self, element_id: str) -> str | None:
        """Get the containing element of a node, if any."""
        if not self._graph.has_node(element_id):
            return None
        for source, _, data in self._graph.in_edges(element_id, data=True):
            if data.get("edge_type") == EdgeType.CONTAINS:
                return source
        return None

    def get_children(self, element_id: str) -> list[str]:
        """Get the directly contained elements of a node."""
        return [
            target
            for _, target, data in self._graph.out_edges(element_id, data=True)
            if data.get("edge_type") == EdgeType.CONTAINS
        ]

    def is_descendant_of(self, child: str, ancestor: str) -> bool:
        """Check whether `child` is `ancestor` or sits inside it."""
        current: str | None = child
        seen: set[str] = set()
        while current is not None and current not in seen:
            if current == ancestor:
                return True
            seen.add(current)
            current = self.get_parent(current)
        return False

    def get_process(self, element_id: str) -> str | None:
        """Get the owning process id of a flow node."""
        return self._data(element_id).get("process")

    def get_pools(self) -> list[dict[str, Any]]:
        """Get all pool nodes."""
        return [
            {"id": node_id, **data}
            for node_id, data in self._graph.nodes(data=True)
            if data.get("element_type") == ElementType.POOL
        ]

    def find_pool_by_process(self, process_id: str | None) -> str | None:
        """Find the pool whose declared process reference matches."""
        if not process_id:
            return None
        for pool in self.get_pools():
            if pool.get("process_ref") == process_id:
                return pool["id"]
        return None

    def iter_elements(self, element_type: ElementType) -> Iterator[str]:
        """Iterate over node ids of one element type."""
        for node_id, data in self._graph.nodes(data=True):
            if data.get("element_type") == element_type:
                yield node_id

    # -------------------------------------------------------------------------
    # Flow queries
    # -------------------------------------------------------------------------

    def get_flow_endpoints(self, flow_id: str) -> tuple[str, str]:
        """Get the (source, target) of a flow."""
        try:
            return self._flows[flow_id]
        except KeyError:
            raise KeyError(f"Unknown flow '{flow_id}'") from None

    def get_incoming(
        self, node_id: str, edge_type: EdgeType
    ) -> list[tuple[str, str]]:
        """Get (flow_id, source) pairs of incoming flows of one type."""
        if edge_type not in FLOW_EDGE_TYPES or not self._graph.has_node(node_id):
            return []
        return [
            (key, source)
            for source, _, key, data in self._graph.in_edges(
                node_id, keys=True, data=True
            )
            if data.get("edge_type") == edge_type
        ]

    def get_outgoing(
        self, node_id: str, edge_type: EdgeType
    ) -> list[tuple[str, str]]:
        """Get (flow_id, target) pairs of outgoing flows of one type."""
        if edge_type not in FLOW_EDGE_TYPES or not self._graph.has_node(node_id):
            return []
        return [
            (key, target)
            for _, target, key, data in self._graph.out_edges(
                node_id, keys=True, data=True
            )
            if data.get("edge_type") == edge_type
        ]

    def get_attached_flows(
        self, node_id: str, edge_type: EdgeType = EdgeType.MESSAGE_FLOW
    ) -> list[str]:
        """Get ids of all flows of one type entering or leaving a node."""
        incoming = [flow_id for flow_id, _ in self.get_incoming(node_id, edge_type)]
        outgoing = [flow_id for flow_id, _ in self.get_outgoing(node_id, edge_type)]
        return incoming + [f for f in outgoing if f not in incoming]

    def iter_flows(self, edge_type: EdgeType) -> Iterator[str]:
        """Iterate over flow ids of one type, in insertion order."""
        for flow_id in list(self._flows):
            if self._data(flow_id).get("edge_type") == edge_type:
                yield flow_id
