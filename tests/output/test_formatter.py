"""Tests for output formatting."""

import json

from bindflow.output.formatter import format_connections, format_validation_result
from bindflow.validators.base import ValidationResult


def make_result():
    result = ValidationResult()
    result.add_warning(
        "orphaned_unbinding",
        "Unbinding tasks lose their Binding",
        task="Grab",
        affected_tasks=["Release"],
        suggestion="Keep Grab as Binding.",
    )
    result.add_info("binding_change_impact", "Grab carries 1 Unbinding task", task="Grab")
    return result


class TestFormatValidationResult:
    def test_text(self):
        text = format_validation_result(make_result())

        assert "WARNINGS:\n  ⚠ orphaned_unbinding: [Grab] Unbinding tasks lose" in text
        assert "      -> Keep Grab as Binding." in text
        assert "NOTES:\n  ℹ binding_change_impact: [Grab]" in text
        assert text.endswith("Validation passed with 1 warning(s)")

    def test_text_without_advisories(self):
        text = format_validation_result(ValidationResult())

        assert text == "WARNINGS:\n  (none)\n\nNOTES:\n  (none)\n\nValidation passed"

    def test_json(self):
        data = json.loads(format_validation_result(make_result(), "json"))

        assert data["valid"] is True
        assert data["warning_count"] == 1
        assert data["info_count"] == 1
        assert data["issues"][0]["affected_tasks"] == ["Release"]
        assert data["issues"][1]["severity"] == "info"


class TestFormatConnections:
    def test_text(self):
        text = format_connections(
            [
                {
                    "id": "M1",
                    "source": "Grab",
                    "target": "Hold",
                    "classification": "binding",
                    "participant1": "Robot",
                    "participant2": "Cart",
                },
                {"id": "M2", "source": "Move", "target": "Idle", "classification": None},
            ]
        )

        assert text.splitlines() == [
            "CONNECTIONS:",
            "  M1: Grab -> Hold  binding (Robot -> Cart)",
            "  M2: Move -> Idle  unclassified",
            "",
            "2 message flow(s): 1 binding, 1 unclassified",
        ]

    def test_empty(self):
        assert format_connections([]) == "CONNECTIONS:\n  (none)\n\n0 message flow(s)"
