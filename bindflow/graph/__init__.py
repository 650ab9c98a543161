"""Graph layer for diagram structure and edits."""

from .node_types import EdgeType, ElementType, FLOW_EDGE_TYPES
from .diagram import DiagramGraph
from .mutator import GraphMutator, ModelMutator, MutationError
from .builder import build_graph
from .modeler import DiagramModeler

__all__ = [
    "EdgeType",
    "ElementType",
    "FLOW_EDGE_TYPES",
    "DiagramGraph",
    "GraphMutator",
    "ModelMutator",
    "MutationError",
    "build_graph",
    "DiagramModeler",
]
