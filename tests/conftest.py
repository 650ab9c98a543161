"""Shared fixtures for tests."""

from pathlib import Path

import pytest

from bindflow.engine import BindingEngine
from bindflow.events import EventBus
from bindflow.graph.builder import build_graph
from bindflow.graph.mutator import GraphMutator
from bindflow.metadata.accessor import MetadataAccessor
from bindflow.schema.loader import parse_diagram_from_string


@pytest.fixture
def examples_dir() -> Path:
    """Return the path to the examples directory."""
    return Path(__file__).parent.parent / "examples"


@pytest.fixture
def factory_yaml() -> str:
    """Return a two-pool diagram whose stored classifications are up to date."""
    return """
pools:
  Robot:
    name: Robot arm
    process: Process_Robot
    lanes: [Lane_Left]
    tasks:
      Grab: {name: Grab part, kind: binding, binding: part, lane: Lane_Left}
      Move: {name: Move part, kind: movement, destination: Dock}
      Release:
        name: Release part
        kind: unbinding
        assignments:
          - {id: a1, condition: "part.ready", value: "part.released"}
    nodes:
      Start: {type: start_event}
      End: {type: end_event}
    sequence_flows:
      - [Start, Grab]
      - [Grab, Move]
      - [Move, Release]
      - {id: F_end, source: Release, target: End}

  Cart:
    name: Cart
    process: Process_Cart
    tasks:
      Hold: {name: Hold part, kind: binding}
      Drop: {name: Drop part, kind: unbinding}
      Idle: {name: Idle}
    sequence_flows:
      - [Hold, Drop]
      - [Drop, Idle]

message_flows:
  - id: M_bind
    source: Grab
    target: Hold
    classification: {type: binding, participant1: Robot, participant2: Cart}
  - id: M_unbind
    source: Release
    target: Drop
    classification: {type: unbinding, participant1: Robot, participant2: Cart}
  - {id: M_mixed, source: Move, target: Idle}
"""


@pytest.fixture
def unclassified_yaml() -> str:
    """Return a diagram whose message flows carry no stored classification."""
    return """
pools:
  Robot:
    process: Process_Robot
    tasks:
      Grab: {kind: binding}
      Release: {kind: unbinding}
      Move: {kind: movement}
    sequence_flows:
      - [Grab, Move]
      - [Move, Release]
  Cart:
    process: Process_Cart
    tasks:
      Hold: {kind: binding}
      Drop: {kind: unbinding}
      Park: {}
message_flows:
  - {id: M1, source: Grab, target: Hold}
  - {id: M2, source: Release, target: Drop}
  - {id: M3, source: Move, target: Park}
"""


@pytest.fixture
def factory_model(factory_yaml):
    """Return the parsed factory diagram."""
    return parse_diagram_from_string(factory_yaml)


@pytest.fixture
def factory_graph(factory_model):
    """Return a graph built from the factory diagram."""
    return build_graph(factory_model)


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def accessor(factory_graph, bus):
    """Return a metadata accessor over the factory graph."""
    return MetadataAccessor(factory_graph, GraphMutator(factory_graph, bus))


@pytest.fixture
def engine(factory_yaml):
    """Return an engine that imported the factory diagram and settled."""
    engine = BindingEngine()
    engine.modeler.import_string(factory_yaml)
    engine.settle()
    return engine
