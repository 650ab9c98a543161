"""Schema layer for parsing and validating diagram and config files."""

from .errors import SchemaError, SchemaLoadError, SchemaValidationError
from .config import EngineConfig
from .models import (
    AssignmentSpec,
    DiagramModel,
    FlowNode,
    MessageFlow,
    Pool,
    SequenceFlow,
    StoredClassification,
    Task,
)
from .loader import (
    load_yaml,
    load_yaml_string,
    parse_config,
    parse_config_from_string,
    parse_diagram,
    parse_diagram_from_string,
)

__all__ = [
    "SchemaError",
    "SchemaLoadError",
    "SchemaValidationError",
    "EngineConfig",
    "AssignmentSpec",
    "DiagramModel",
    "FlowNode",
    "MessageFlow",
    "Pool",
    "SequenceFlow",
    "StoredClassification",
    "Task",
    "load_yaml",
    "load_yaml_string",
    "parse_config",
    "parse_config_from_string",
    "parse_diagram",
    "parse_diagram_from_string",
]
