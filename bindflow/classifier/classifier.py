"""Derive and reconcile the classification of message flows."""

import logging
from dataclasses import dataclass
from enum import Enum

from ..graph.diagram import DiagramGraph
from ..graph.node_types import EdgeType, ElementType
from ..kinds.task_kinds import TaskKind, read_kind
from ..metadata.accessor import MetadataAccessor, make_attribute
from ..metadata.attributes import CLASSIFICATION_KINDS, AttributeKind
from .errors import ResolutionFailure

logger = logging.getLogger(__name__)

MAX_POOL_DEPTH = 10


class Classification(str, Enum):
    """Derived label of a message flow. No label is `None`."""

    BINDING = "binding"
    UNBINDING = "unbinding"


@dataclass(frozen=True)
class ClassificationState:
    """The three classification fields of a connection."""

    classification: str | None = None
    source_pool: str | None = None
    target_pool: str | None = None


UNCLASSIFIED = ClassificationState()


def resolve_pool(
    graph: DiagramGraph, element_id: str | None, max_depth: int = MAX_POOL_DEPTH
) -> str | None:
    """Find the pool containing an element by walking up its containment chain.

    Returns None when no pool is found within `max_depth` steps.
    """
    current = element_id
    depth = 0

    while current is not None and depth < max_depth:
        if graph.element_type(current) == ElementType.POOL:
            return current
        current = graph.get_parent(current)
        depth += 1

    return None


def classify(
    graph: DiagramGraph, accessor: MetadataAccessor, connection_id: str
) -> Classification | None:
    """Derive a connection's classification from its endpoint task kinds."""
    if not graph.is_flow(connection_id):
        return None

    source, target = graph.get_flow_endpoints(connection_id)
    for endpoint in (source, target):
        if graph.element_type(endpoint) != ElementType.TASK:
            return None

    source_kind = read_kind(accessor, source)
    target_kind = read_kind(accessor, target)

    if source_kind == TaskKind.BINDING and target_kind == TaskKind.BINDING:
        return Classification.BINDING
    if source_kind == TaskKind.UNBINDING and target_kind == TaskKind.UNBINDING:
        return Classification.UNBINDING

    return None


class ConnectionClassifier:
    """Keeps the stored classification of message flows equal to the derived one."""

    def __init__(
        self,
        graph: DiagramGraph,
        accessor: MetadataAccessor,
        max_pool_depth: int = MAX_POOL_DEPTH,
    ):
        self.graph = graph
        self.accessor = accessor
        self.max_pool_depth = max_pool_depth

    def is_message_flow(self, element_id: str) -> bool:
        """Check whether an element is a message flow."""
        return self.graph.element_type(element_id) == EdgeType.MESSAGE_FLOW

    def classify(self, connection_id: str) -> Classification | None:
        """Derive the classification of a connection."""
        return classify(self.graph, self.accessor, connection_id)

    def stored_state(self, connection_id: str) -> ClassificationState:
        """Read the classification currently stored on a connection."""
        stored_type = self.accessor.get_attribute(connection_id, AttributeKind.TYPE)
        return ClassificationState(
            classification=stored_type.lower() if stored_type else None,
            source_pool=self.accessor.get_attribute(connection_id, AttributeKind.PARTICIPANT1) or None,
            target_pool=self.accessor.get_attribute(connection_id, AttributeKind.PARTICIPANT2) or None,
        )

    def desired_state(self, connection_id: str) -> ClassificationState:
        """Compute the classification a connection should carry."""
        classification = self.classify(connection_id)
        if classification is None:
            return UNCLASSIFIED

        source, target = self.graph.get_flow_endpoints(connection_id)
        return ClassificationState(
            classification=classification.value,
            source_pool=resolve_pool(self.graph, source, self.max_pool_depth),
            target_pool=resolve_pool(self.graph, target, self.max_pool_depth),
        )

    def needs_update(self, connection_id: str) -> bool:
        """Check whether stored and derived classification differ."""
        return self.stored_state(connection_id) != self.desired_state(connection_id)

    def reconcile(self, connection_id: str, force: bool = False) -> bool:
        """Bring a connection's stored classification in line with its endpoints.

        Args:
            connection_id: The message flow id.
            force: Clear the stored classification first and recompute it.

        Returns:
            True if the connection's metadata was written.
        """
        if not self.is_message_flow(connection_id):
            logger.debug("Skipping %s: not a message flow", connection_id)
            return False

        cleared = self.clear(connection_id) if force else False

        stored = self.stored_state(connection_id)
        desired = self.desired_state(connection_id)
        if stored == desired:
            logger.debug("Connection %s already consistent", connection_id)
            return cleared

        try:
            self._check_resolved(connection_id, desired)
        except ResolutionFailure as e:
            logger.warning("Not classifying %s: %s", connection_id, e)
            return cleared

        add = []
        if desired.classification is not None:
            add = [
                make_attribute(AttributeKind.TYPE, desired.classification),
                make_attribute(AttributeKind.PARTICIPANT1, desired.source_pool),
                make_attribute(AttributeKind.PARTICIPANT2, desired.target_pool),
            ]

        self.accessor.update_attributes(
            connection_id,
            remove=lambda e: e.kind in CLASSIFICATION_KINDS,
            add=add,
        )

        if desired.classification is None:
            logger.info("Cleared classification of %s", connection_id)
        else:
            logger.info(
                "Classified %s as %s (%s -> %s)",
                connection_id,
                desired.classification,
                desired.source_pool,
                desired.target_pool,
            )
        return True

    def clear(self, connection_id: str) -> bool:
        """Remove all classification metadata from a connection."""
        return self.accessor.remove_attributes(
            connection_id, lambda e: e.kind in CLASSIFICATION_KINDS
        )

    def _check_resolved(self, connection_id: str, desired: ClassificationState) -> None:
        if desired.classification is None:
            return

        source, target = self.graph.get_flow_endpoints(connection_id)
        if desired.source_pool is None:
            raise ResolutionFailure(
                f"no pool found for source '{source}'", connection_id, source
            )
        if desired.target_pool is None:
            raise ResolutionFailure(
                f"no pool found for target '{target}'", connection_id, target
            )
