"""Text and JSON rendering for advisories and connection listings."""

import json
from collections import Counter
from typing import Any, Literal

from ..validators.base import Severity, ValidationResult, ValidationWarning

OutputFormat = Literal["text", "json"]

SYMBOLS = {Severity.WARNING: "⚠", Severity.INFO: "ℹ"}


def format_validation_result(result: ValidationResult, format: OutputFormat = "text") -> str:
    """Render a validation result.

    Text output lists warnings, then notes, then a one-line verdict. JSON
    output carries every advisory with its details.
    """
    if format == "json":
        return json.dumps(_result_data(result), indent=2)

    warnings = result.warnings
    lines = _section("WARNINGS", warnings) + [""] + _section("NOTES", result.infos) + [""]
    if warnings:
        lines.append(f"Validation passed with {len(warnings)} warning(s)")
    else:
        lines.append("Validation passed")
    return "\n".join(lines)


def _section(title: str, issues: list[ValidationWarning]) -> list[str]:
    lines = [f"{title}:"]
    lines += [f"  {_issue_line(issue)}" for issue in issues] or ["  (none)"]
    return lines


def _issue_line(issue: ValidationWarning) -> str:
    task = f"[{issue.task}] " if issue.task else ""
    line = f"{SYMBOLS[issue.severity]} {issue.code}: {task}{issue.message}"
    if issue.suggestion:
        line += f"\n      -> {issue.suggestion}"
    return line


def _result_data(result: ValidationResult) -> dict[str, Any]:
    return {
        "valid": result.valid,
        "warning_count": len(result.warnings),
        "info_count": len(result.infos),
        "issues": [
            {
                "code": issue.code,
                "severity": issue.severity.value,
                "task": issue.task,
                "message": issue.message,
                "affected_tasks": issue.affected_tasks,
                "suggestion": issue.suggestion,
                "details": issue.details,
            }
            for issue in result.issues
        ],
    }


def format_connections(
    connections: list[dict[str, Any]], format: OutputFormat = "text"
) -> str:
    """Render message flows with their classification.

    Each entry has the keys `id`, `source`, `target`, `classification`,
    `participant1` and `participant2`.
    """
    if format == "json":
        return json.dumps({"connections": connections}, indent=2)

    lines = ["CONNECTIONS:"]
    counts: Counter[str] = Counter()
    for conn in connections:
        label = conn.get("classification") or "unclassified"
        counts[label] += 1
        line = f"  {conn['id']}: {conn['source']} -> {conn['target']}  {label}"
        if conn.get("classification"):
            line += f" ({conn.get('participant1')} -> {conn.get('participant2')})"
        lines.append(line)
    if not connections:
        lines.append("  (none)")

    total = f"{len(connections)} message flow(s)"
    if counts:
        total += ": " + ", ".join(f"{n} {label}" for label, n in sorted(counts.items()))
    return "\n".join(lines + ["", total])
