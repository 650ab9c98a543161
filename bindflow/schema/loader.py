"""Read diagram and engine config files."""

from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from .config import EngineConfig
from .errors import SchemaLoadError, SchemaValidationError
from .models import DiagramModel

ModelT = TypeVar("ModelT", bound=BaseModel)


def load_yaml(path: str | Path) -> dict:
    """Read a YAML file whose root is a mapping.

    An empty file reads as `{}`.

    Raises:
        SchemaLoadError: If the file is missing, unreadable or not a YAML mapping.
    """
    path = Path(path)
    if not path.exists():
        raise SchemaLoadError("File not found", str(path))
    if not path.is_file():
        raise SchemaLoadError("Not a file", str(path))

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise SchemaLoadError(f"Cannot read file: {e}", str(path)) from e

    return _as_mapping(text, str(path))


def load_yaml_string(yaml_string: str) -> dict:
    """Parse YAML text whose root is a mapping.

    Raises:
        SchemaLoadError: If the text is not YAML or its root is not a mapping.
    """
    return _as_mapping(yaml_string, None)


def _as_mapping(text: str, source: str | None) -> dict:
    try:
        data: Any = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise SchemaLoadError(f"Invalid YAML: {e}", source) from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise SchemaLoadError(
            f"Expected YAML mapping at root, got {type(data).__name__}", source
        )
    return data


def parse_diagram(path: str | Path) -> DiagramModel:
    """Read and validate a diagram file.

    Raises:
        SchemaLoadError: If the file cannot be read.
        SchemaValidationError: If the content is not a valid diagram.
    """
    return _validate(DiagramModel, load_yaml(path), "diagram")


def parse_diagram_from_string(yaml_string: str) -> DiagramModel:
    """Validate a diagram given as YAML text."""
    return _validate(DiagramModel, load_yaml_string(yaml_string), "diagram")


def parse_config(path: str | Path) -> EngineConfig:
    """Read and validate an engine config file."""
    return _validate(EngineConfig, load_yaml(path), "engine config")


def parse_config_from_string(yaml_string: str) -> EngineConfig:
    return _validate(EngineConfig, load_yaml_string(yaml_string), "engine config")


def _validate(model: type[ModelT], data: dict, what: str) -> ModelT:
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise SchemaValidationError.from_pydantic(what, e) from e
