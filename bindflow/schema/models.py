"""Pydantic models for diagram files."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator, model_validator

KindKey = Literal["movement", "binding", "unbinding"]
FlowNodeType = Literal[
    "start_event", "end_event", "intermediate_event", "gateway", "sub_process"
]


def _normalize_flow(flow):
    """Accept `[source, target]` as shorthand for a flow mapping."""
    if isinstance(flow, (list, tuple)) and len(flow) == 2:
        return {"source": flow[0], "target": flow[1]}
    return flow


class AssignmentSpec(BaseModel):
    """A condition/value assignment on a task."""

    id: str | None = None
    condition: str = ""
    value: str = ""


class Task(BaseModel):
    """A task inside a pool."""

    name: str | None = None
    kind: KindKey | None = None
    destination: str | None = None
    binding: str | None = None
    lane: str | None = None
    assignments: list[AssignmentSpec] = Field(default_factory=list)

    @field_validator("kind", mode="before")
    @classmethod
    def normalize_kind(cls, value):
        """Kinds are case-insensitive; "none" and "" mean no kind."""
        if isinstance(value, str):
            value = value.strip().lower()
            if value in ("", "none"):
                return None
        return value


class FlowNode(BaseModel):
    """A non-task flow node (event, gateway, sub-process)."""

    type: FlowNodeType
    name: str | None = None
    lane: str | None = None


class SequenceFlow(BaseModel):
    """A sequence flow inside a pool."""

    id: str | None = None
    source: str
    target: str
    name: str | None = None


class StoredClassification(BaseModel):
    """Classification metadata already present on a message flow."""

    type: str | None = None
    participant1: str | None = None
    participant2: str | None = None


class MessageFlow(BaseModel):
    """A message flow (connection) between two elements."""

    id: str | None = None
    source: str
    target: str
    name: str | None = None
    classification: StoredClassification | None = None


class Pool(BaseModel):
    """A pool (participant) and the process it declares."""

    name: str | None = None
    process: str | None = None
    lanes: list[str] = Field(default_factory=list)
    tasks: dict[str, Task] = Field(default_factory=dict)
    nodes: dict[str, FlowNode] = Field(default_factory=dict)
    sequence_flows: list[SequenceFlow] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_pool(cls, data):
        """Normalize empty task entries and shorthand flows."""
        if not isinstance(data, dict):
            return data

        # `Grab:` with no body is a task without attributes
        tasks = data.get("tasks")
        if isinstance(tasks, dict):
            data["tasks"] = {k: (v if v is not None else {}) for k, v in tasks.items()}

        flows = data.get("sequence_flows")
        if isinstance(flows, list):
            data["sequence_flows"] = [_normalize_flow(f) for f in flows]

        return data

    def element_ids(self) -> list[str]:
        """Get the ids of all nodes declared in this pool."""
        return [*self.lanes, *self.tasks, *self.nodes]


class DiagramModel(BaseModel):
    """Root model for a diagram YAML file."""

    pools: dict[str, Pool] = Field(default_factory=dict)
    message_flows: list[MessageFlow] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def normalize_model(cls, data):
        """Normalize empty pools and shorthand message flows."""
        if not isinstance(data, dict):
            return data

        pools = data.get("pools")
        if isinstance(pools, dict):
            data["pools"] = {k: (v if v is not None else {}) for k, v in pools.items()}

        flows = data.get("message_flows")
        if isinstance(flows, list):
            data["message_flows"] = [_normalize_flow(f) for f in flows]

        return data

    @model_validator(mode="after")
    def check_references(self) -> "DiagramModel":
        """Check that ids are unique and every reference resolves."""
        seen: set[str] = set()
        for pool_id, pool in self.pools.items():
            for element_id in [pool_id, *pool.element_ids()]:
                if element_id in seen:
                    raise ValueError(f"Duplicate element id '{element_id}'")
                seen.add(element_id)

        for pool_id, pool in self.pools.items():
            local = set(pool.element_ids())
            for element_id, element in [*pool.tasks.items(), *pool.nodes.items()]:
                if element.lane is not None and element.lane not in pool.lanes:
                    raise ValueError(
                        f"'{element_id}' references unknown lane '{element.lane}' in pool '{pool_id}'"
                    )
            for flow in pool.sequence_flows:
                for endpoint in (flow.source, flow.target):
                    if endpoint not in local:
                        raise ValueError(
                            f"Sequence flow endpoint '{endpoint}' is not in pool '{pool_id}'"
                        )

        for flow in self.message_flows:
            for endpoint in (flow.source, flow.target):
                if endpoint not in seen:
                    raise ValueError(f"Message flow endpoint '{endpoint}' does not exist")

        # Flows share the element id space; unnamed flows get generated ids
        flows: list[SequenceFlow | MessageFlow] = [
            *(f for pool in self.pools.values() for f in pool.sequence_flows),
            *self.message_flows,
        ]
        for flow in flows:
            if flow.id is None:
                prefix = "MessageFlow" if isinstance(flow, MessageFlow) else "Flow"
                flow.id = f"{prefix}_{flow.source}_{flow.target}"
            if flow.id in seen:
                raise ValueError(
                    f"Duplicate element id '{flow.id}'; give parallel flows explicit ids"
                )
            seen.add(flow.id)

        return self

    def find_task(self, task_id: str) -> tuple[str, Task] | None:
        """Find a task and the id of its pool."""
        for pool_id, pool in self.pools.items():
            if task_id in pool.tasks:
                return pool_id, pool.tasks[task_id]
        return None
