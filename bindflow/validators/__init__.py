"""Advisory validation of task kinds and diagrams."""

from .base import Severity, ValidationResult, ValidationWarning
from .traversal import (
    find_containing_pool,
    find_dependent_unbinding_tasks,
    find_upstream_binding_tasks,
)
from .kind_change import (
    describe_binding_dependents,
    missing_upstream_binding_warning,
    orphaned_unbinding_warning,
    quick_check,
    validate_kind_change,
)
from .runner import (
    check_binding_dependents,
    check_missing_upstream_bindings,
    check_stale_classifications,
    run_validators,
    validate_diagram_file,
)

__all__ = [
    "Severity",
    "ValidationResult",
    "ValidationWarning",
    "find_containing_pool",
    "find_dependent_unbinding_tasks",
    "find_upstream_binding_tasks",
    "describe_binding_dependents",
    "missing_upstream_binding_warning",
    "orphaned_unbinding_warning",
    "quick_check",
    "validate_kind_change",
    "check_binding_dependents",
    "check_missing_upstream_bindings",
    "check_stale_classifications",
    "run_validators",
    "validate_diagram_file",
]
