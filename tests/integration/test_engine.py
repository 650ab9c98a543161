"""End-to-end tests for the binding engine."""

import logging
from unittest.mock import patch

import pytest

from bindflow.classifier.classifier import ClassificationState
from bindflow.engine import BindingEngine
from bindflow.graph.node_types import EdgeType
from bindflow.kinds.errors import ConfigurationError
from bindflow.metadata.attributes import AttributeKind
from bindflow.scheduler.change_scheduler import MarkerState
from bindflow.scheduler.timers import AsyncioTimerService
from bindflow.schema.config import EngineConfig


def assert_consistent(engine):
    """Every message flow's stored classification matches its tasks."""
    for flow_id in engine.graph.iter_flows(EdgeType.MESSAGE_FLOW):
        assert not engine.classifier.needs_update(flow_id), flow_id


def count_writes(engine):
    return patch.object(
        engine.mutator, "update_metadata", wraps=engine.mutator.update_metadata
    )


class TestImport:
    def test_consistent_import_writes_nothing(self, factory_yaml):
        engine = BindingEngine()

        with count_writes(engine) as update:
            engine.modeler.import_string(factory_yaml)
            engine.settle()

        update.assert_not_called()
        assert_consistent(engine)

    def test_import_classifies_every_message_flow(self, unclassified_yaml):
        engine = BindingEngine()

        engine.modeler.import_string(unclassified_yaml)
        engine.settle()

        stored = engine.classifier.stored_state
        assert stored("M1") == ClassificationState("binding", "Robot", "Cart")
        assert stored("M2") == ClassificationState("unbinding", "Robot", "Cart")
        assert engine.accessor.get_entries("M3") == []

    def test_nothing_happens_before_the_debounce(self, unclassified_yaml):
        engine = BindingEngine()

        engine.modeler.import_string(unclassified_yaml)

        assert engine.accessor.get_entries("M1") == []
        assert engine.scheduler.state_of("M1") == MarkerState.SCHEDULED


class TestKindChanges:
    def test_classify_then_unclassify(self, engine):
        engine.set_kind("Hold", "movement")
        assert engine.accessor.get_attribute("M_bind", AttributeKind.TYPE) == "binding"

        engine.settle()
        assert engine.accessor.get_entries("M_bind") == []

        engine.set_kind("Hold", "binding")
        engine.settle()
        assert engine.classifier.stored_state("M_bind") == ClassificationState(
            "binding", "Robot", "Cart"
        )

    def test_own_write_does_not_loop(self, engine):
        engine.set_kind("Hold", "unbinding")

        with count_writes(engine) as update:
            engine.settle()

        # One write for M_bind; its echo is absorbed
        assert [c.args[0] for c in update.call_args_list] == ["M_bind"]
        assert engine.timers.pending == 0
        assert engine.settle() == 0

    def test_burst_of_changes_is_coalesced(self, engine):
        with count_writes(engine) as update:
            engine.set_kind("Hold", "movement")
            engine.set_kind("Hold", "unbinding")
            engine.set_kind("Hold", "binding")
            engine.settle()

        flow_writes = [c.args[0] for c in update.call_args_list if c.args[0] == "M_bind"]
        assert flow_writes == []
        assert_consistent(engine)

    def test_invariant_after_mixed_edits(self, engine):
        engine.set_kind("Move", "binding")
        engine.set_kind("Idle", "binding")
        engine.set_kind("Release", None)
        engine.settle()

        assert_consistent(engine)
        assert engine.classifier.stored_state("M_mixed").classification == "binding"
        assert engine.accessor.get_entries("M_unbind") == []

    def test_unknown_kind_schedules_nothing(self, engine):
        with pytest.raises(ConfigurationError):
            engine.set_kind("Hold", "teleport")

        assert not engine.scheduler.is_busy()

    def test_elements_changed_is_fired(self, engine):
        seen = []
        engine.bus.subscribe("elements.changed", seen.append)

        engine.set_kind("Idle", "movement")

        assert seen[0]["elements"] == ["Idle"]


class TestConnections:
    def test_new_connection_is_classified(self, engine):
        engine.modeler.add_message_flow("M_new", "Release", "Drop")
        engine.settle()

        assert engine.classifier.stored_state("M_new").classification == "unbinding"

    def test_sequence_flow_is_ignored(self, engine):
        engine.modeler.add_sequence_flow("F_new", "Move", "End")

        assert not engine.scheduler.is_busy()

    def test_reconnect_recomputes(self, engine):
        engine.modeler.reconnect("M_mixed", source="Grab", target="Hold")
        engine.settle()

        assert engine.classifier.stored_state("M_mixed") == ClassificationState(
            "binding", "Robot", "Cart"
        )

    def test_reconnect_is_forced(self, engine):
        # Stored classification is already correct
        with count_writes(engine) as update:
            engine.modeler.reconnect("M_bind")
            engine.settle()

        # Cleared, then written again
        assert update.call_count == 2
        assert_consistent(engine)

    def test_failed_reconnect_keeps_connection(self, engine):
        with pytest.raises(KeyError):
            engine.modeler.reconnect("M_bind", target="Nope")

        assert engine.graph.get_flow_endpoints("M_bind") == ("Grab", "Hold")
        assert engine.classifier.stored_state("M_bind").classification == "binding"
        assert not engine.scheduler.is_busy()

    def test_manual_edit_is_repaired(self, engine):
        engine.accessor.set_attribute("M_bind", AttributeKind.TYPE, "unbinding")
        engine.settle()

        assert engine.accessor.get_attribute("M_bind", AttributeKind.TYPE) == "binding"

    def test_removed_connection_is_skipped(self, engine):
        engine.set_kind("Hold", "movement")
        engine.modeler.remove_element("M_bind")

        engine.settle()

        assert not engine.graph.has_element("M_bind")
        assert not engine.scheduler.is_busy()


class TestFailures:
    def test_mutator_failure_is_isolated(self, unclassified_yaml, caplog):
        engine = BindingEngine()
        original = engine.mutator.update_metadata

        def update(element_id, entries):
            if element_id == "M1":
                raise RuntimeError("store is read-only")
            original(element_id, entries)

        with patch.object(engine.mutator, "update_metadata", side_effect=update):
            with caplog.at_level(logging.ERROR):
                engine.modeler.import_string(unclassified_yaml)
                engine.settle()

        assert "Reconciliation of M1 failed" in caplog.text
        assert engine.accessor.get_entries("M1") == []
        assert engine.classifier.stored_state("M2").classification == "unbinding"

    def test_settle_needs_manual_timers(self):
        engine = BindingEngine(timers=AsyncioTimerService())

        with pytest.raises(TypeError):
            engine.settle()


class TestConfiguration:
    def test_shared_timer(self, unclassified_yaml):
        engine = BindingEngine(config=EngineConfig(shared_timer=True))

        engine.modeler.import_string(unclassified_yaml)
        engine.settle()

        assert_consistent(engine)
        assert engine.classifier.stored_state("M1").classification == "binding"

    def test_custom_delays(self, unclassified_yaml):
        engine = BindingEngine(config=EngineConfig(debounce_ms=5, cooldown_ms=5))

        engine.modeler.import_string(unclassified_yaml)
        engine.timers.advance(5)

        assert engine.classifier.stored_state("M1").classification == "binding"

    def test_default_destination(self):
        custom = BindingEngine(config=EngineConfig(default_destination="Home"))
        custom.graph.add_pool("P", process_ref="Process_P")
        custom.graph.add_task("T", "P")

        custom.set_kind("T", "movement")

        assert custom.accessor.get_attribute("T", AttributeKind.DESTINATION) == "Home"


class TestAdvisories:
    def test_validate_kind_change(self, engine):
        result = engine.validate_kind_change("Grab", "movement")

        assert result.valid
        assert result.primary.code == "orphaned_unbinding"

    def test_audit(self, engine):
        assert engine.audit().warnings == []

    def test_close_stops_reacting(self, engine):
        engine.close()

        engine.set_kind("Hold", "movement")

        assert not engine.scheduler.is_busy()
        assert engine.accessor.get_attribute("M_bind", AttributeKind.TYPE) == "binding"
