"""Typed metadata attributes and their accessor."""

from .errors import MetadataError
from .attributes import (
    CLASSIFICATION_KINDS,
    SLOTTED_KINDS,
    Attribute,
    AttributeKind,
    new_assignment_id,
)
from .accessor import MetadataAccessor, make_attribute

__all__ = [
    "MetadataError",
    "CLASSIFICATION_KINDS",
    "SLOTTED_KINDS",
    "Attribute",
    "AttributeKind",
    "new_assignment_id",
    "MetadataAccessor",
    "make_attribute",
]
