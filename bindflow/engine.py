"""Wires the task-kind layer to a diagram's notification bus."""

import logging

from .classifier.classifier import ConnectionClassifier
from .events import Event, EventBus, Notification
from .graph.diagram import DiagramGraph
from .graph.modeler import DiagramModeler
from .graph.mutator import GraphMutator
from .graph.node_types import EdgeType, ElementType
from .kinds.state_machine import KindTransition, TaskKindStateMachine
from .kinds.task_kinds import TaskKind
from .metadata.accessor import MetadataAccessor
from .scheduler.change_scheduler import ChangeScheduler
from .scheduler.timers import ManualTimerService, TimerService
from .schema.config import EngineConfig
from .validators.base import ValidationResult
from .validators.kind_change import validate_kind_change
from .validators.runner import run_validators

logger = logging.getLogger(__name__)


class BindingEngine:
    """Keeps message-flow classifications consistent with task kinds.

    Subscribes to the host's notifications and reconciles affected message
    flows through the change scheduler.

    Args:
        graph: The diagram graph. A new empty one is created if omitted.
        bus: The host's notification bus. A new one is created if omitted.
        config: Engine settings.
        timers: Timer service for debouncing. Defaults to a virtual clock
            driven by `settle`.
    """

    def __init__(
        self,
        graph: DiagramGraph | None = None,
        bus: EventBus | None = None,
        config: EngineConfig | None = None,
        timers: TimerService | None = None,
    ):
        self.config = config or EngineConfig()
        self.graph = graph if graph is not None else DiagramGraph()
        self.bus = bus or EventBus()
        self.timers = timers if timers is not None else ManualTimerService()

        self.mutator = GraphMutator(self.graph, self.bus)
        self.accessor = MetadataAccessor(self.graph, self.mutator)
        self.kinds = TaskKindStateMachine(
            self.accessor, self.bus, default_destination=self.config.default_destination
        )
        self.classifier = ConnectionClassifier(
            self.graph, self.accessor, self.config.max_pool_depth
        )
        self.scheduler = ChangeScheduler(
            self.timers,
            self.classifier.reconcile,
            debounce_ms=self.config.debounce_ms,
            cooldown_ms=self.config.cooldown_ms,
            shared_timer=self.config.shared_timer,
        )
        self.modeler = DiagramModeler(self.graph, self.bus)

        self.bus.subscribe(Notification.CONNECTION_CREATED, self._on_connection_created)
        self.bus.subscribe(Notification.CONNECTION_RECONNECTED, self._on_connection_reconnected)
        self.bus.subscribe(Notification.IMPORT_DONE, self._on_import_done)
        self.bus.subscribe(Notification.ELEMENT_CHANGED, self._on_element_changed)

    # -------------------------------------------------------------------------
    # Operations
    # -------------------------------------------------------------------------

    def set_kind(self, task_id: str, kind: TaskKind | str | None) -> KindTransition:
        """Change a task's kind. Affected message flows are reconciled later."""
        return self.kinds.set_kind(task_id, kind)

    def validate_kind_change(
        self, task_id: str, kind: TaskKind | str | None
    ) -> ValidationResult:
        """Get the advisories for changing a task's kind."""
        return validate_kind_change(
            self.graph,
            self.accessor,
            task_id,
            kind,
            name_preview_limit=self.config.name_preview_limit,
        )

    def audit(self) -> ValidationResult:
        """Audit the whole diagram."""
        return run_validators(self.graph, self.accessor, self.config)

    def settle(self, max_ms: int = 60_000) -> int:
        """Run pending reconciliations on the virtual clock until idle.

        Returns:
            Number of timer callbacks run.

        Raises:
            TypeError: If the engine does not run on a ManualTimerService.
        """
        if not isinstance(self.timers, ManualTimerService):
            raise TypeError("settle() needs a ManualTimerService")
        return self.timers.run_until_idle(max_ms)

    def close(self) -> None:
        """Unsubscribe from the bus and cancel pending work."""
        self.bus.unsubscribe(Notification.CONNECTION_CREATED, self._on_connection_created)
        self.bus.unsubscribe(Notification.CONNECTION_RECONNECTED, self._on_connection_reconnected)
        self.bus.unsubscribe(Notification.IMPORT_DONE, self._on_import_done)
        self.bus.unsubscribe(Notification.ELEMENT_CHANGED, self._on_element_changed)
        self.scheduler.cancel_all()

    # -------------------------------------------------------------------------
    # Notification handlers
    # -------------------------------------------------------------------------

    def _on_connection_created(self, event: Event) -> None:
        element = event.get("element")
        if element and self.classifier.is_message_flow(element):
            self.scheduler.schedule(element)

    def _on_connection_reconnected(self, event: Event) -> None:
        element = event.get("element")
        if element and self.classifier.is_message_flow(element):
            self.scheduler.schedule(element, force=True)

    def _on_import_done(self, event: Event) -> None:
        flows = list(self.graph.iter_flows(EdgeType.MESSAGE_FLOW))
        logger.debug("Import done, scheduling %d message flows", len(flows))
        for flow_id in flows:
            self.scheduler.schedule(flow_id)

    def _on_element_changed(self, event: Event) -> None:
        element = event.get("element")
        if not element:
            return

        element_type = self.graph.element_type(element)
        if element_type == ElementType.TASK:
            for flow_id in self.graph.get_attached_flows(element, EdgeType.MESSAGE_FLOW):
                self.scheduler.schedule(flow_id)
        elif element_type == EdgeType.MESSAGE_FLOW:
            # May be our own classification write coming back
            self.scheduler.schedule(element, echo=True)
