"""Element and edge type definitions for the diagram graph."""

from enum import Enum


class ElementType(str, Enum):
    """Types of nodes in the diagram graph."""

    # Containers
    POOL = "pool"
    LANE = "lane"

    # Flow nodes
    TASK = "task"
    START_EVENT = "start_event"
    END_EVENT = "end_event"
    INTERMEDIATE_EVENT = "intermediate_event"
    GATEWAY = "gateway"
    SUB_PROCESS = "sub_process"


class EdgeType(str, Enum):
    """Types of edges in the diagram graph."""

    SEQUENCE_FLOW = "sequence_flow"  # Within one pool
    MESSAGE_FLOW = "message_flow"  # Usually across pools

    # Structure edges
    CONTAINS = "contains"  # Pool/Lane -> child


FLOW_EDGE_TYPES = frozenset({EdgeType.SEQUENCE_FLOW, EdgeType.MESSAGE_FLOW})
