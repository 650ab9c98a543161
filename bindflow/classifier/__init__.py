"""Classification of message flows from the kinds of the tasks they join."""

from .errors import ResolutionFailure
from .classifier import (
    MAX_POOL_DEPTH,
    UNCLASSIFIED,
    Classification,
    ClassificationState,
    ConnectionClassifier,
    classify,
    resolve_pool,
)
from .queries import (
    ConnectionInfo,
    are_pools_bound,
    binding_pairs,
    connections_for_pool,
    connections_for_task,
    get_connection_info,
    iter_typed_connections,
    unbinding_pairs,
)

__all__ = [
    "ResolutionFailure",
    "MAX_POOL_DEPTH",
    "UNCLASSIFIED",
    "Classification",
    "ClassificationState",
    "ConnectionClassifier",
    "classify",
    "resolve_pool",
    "ConnectionInfo",
    "are_pools_bound",
    "binding_pairs",
    "connections_for_pool",
    "connections_for_task",
    "get_connection_info",
    "iter_typed_connections",
    "unbinding_pairs",
]
