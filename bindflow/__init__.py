"""bindflow: task kinds and binding-aware message flows for process diagrams."""

__version__ = "0.1.0"
