"""Tests for workflow.builder."""

import pytest

from workflow.builder import StateMachineBuilder
from workflow.errors import DefinitionError
from workflow.machine import StateMachine
from workflow.table import TransitionTable


STATES = ["pending", "confirmed", "processing", "shipped"]


def _builder() -> StateMachineBuilder:
    return (
        StateMachineBuilder()
        .initial("pending")
        .states_list(STATES)
        .transition("confirm", "pending", "confirmed")
        .transition("process", "confirmed", "processing")
    )


# ── Building ───────────────────────────────────────────────────────────────────

class TestBuild:
    def test_builds_machine_in_initial_state(self):
        m = _builder().build()
        assert isinstance(m, StateMachine)
        assert m.get_current_state() == "pending"

    def test_chaining_returns_builder(self):
        b = StateMachineBuilder()
        assert b.initial("a") is b
        assert b.states_list(["a"]) is b
        assert b.transition("x", "a", "a") is b
        assert b.context(k=1) is b

    def test_order_independent(self):
        m = (
            StateMachineBuilder()
            .transition("confirm", "pending", "confirmed")
            .states_list(STATES)
            .initial("pending")
            .build()
        )
        assert m.transition("confirm").success is True

    def test_multi_source_transition(self):
        m = (
            StateMachineBuilder()
            .initial("pending")
            .states_list(["pending", "authorized", "failed"])
            .transition("authorize", "pending", "authorized")
            .transition("fail", ["pending", "authorized"], "failed")
            .build()
        )
        m.transition("authorize")
        assert m.transition("fail").success is True
        assert m.is_state("failed")

    def test_repeated_states_list_accumulates(self):
        m = (
            StateMachineBuilder()
            .initial("a")
            .states_list(["a"])
            .states_list(["b"])
            .transition("go", "a", "b")
            .build()
        )
        assert m.transition("go").to_state == "b"

    def test_states_list_with_bare_string(self):
        m = (
            StateMachineBuilder()
            .initial("draft")
            .states_list("draft")
            .states_list(["published"])
            .transition("publish", "draft", "published")
            .build()
        )
        assert m.table.states == frozenset({"draft", "published"})

    def test_context_seeded(self):
        m = _builder().context(customer="ada", total=10).build()
        assert m.get("customer") == "ada"
        assert m.get("total") == 10

    def test_build_table(self):
        table = _builder().build_table()
        assert isinstance(table, TransitionTable)
        assert table.lookup("confirm", "pending") == "confirmed"

    def test_each_build_is_independent(self):
        b = _builder()
        first = b.build()
        second = b.build()
        first.transition("confirm")
        assert second.get_current_state() == "pending"


# ── Equivalence with direct construction ───────────────────────────────────────

class TestEquivalence:
    def test_same_behaviour_as_direct_table(self):
        built = (
            StateMachineBuilder()
            .initial("pending")
            .states_list(STATES)
            .transition("confirm", "pending", "confirmed")
            .build()
        )
        direct = StateMachine(
            TransitionTable.build(STATES, [("confirm", "pending", "confirmed")]),
            "pending",
        )
        for event in ["ship", "confirm", "confirm", "process"]:
            a = built.transition(event)
            b = direct.transition(event)
            assert a.to_dict() == b.to_dict()
            assert built.get_current_state() == direct.get_current_state()
        assert len(built.get_history()) == len(direct.get_history()) == 1


# ── Validation ─────────────────────────────────────────────────────────────────

class TestValidation:
    def test_missing_initial_raises(self):
        with pytest.raises(DefinitionError, match="Initial state must be set"):
            StateMachineBuilder().states_list(STATES).build()

    def test_undeclared_initial_raises(self):
        with pytest.raises(DefinitionError, match="Initial state 'draft'"):
            StateMachineBuilder().initial("draft").states_list(STATES).build()

    def test_undeclared_target_raises(self):
        with pytest.raises(DefinitionError, match="undeclared target state 'delivered'"):
            _builder().transition("deliver", "shipped", "delivered").build()

    def test_undeclared_source_raises(self):
        with pytest.raises(DefinitionError, match="undeclared source state 'draft'"):
            _builder().transition("submit", "draft", "pending").build()

    def test_empty_states_raises(self):
        with pytest.raises(DefinitionError, match="at least one state"):
            StateMachineBuilder().initial("pending").build()

    def test_empty_from_list_raises_immediately(self):
        with pytest.raises(DefinitionError, match="no source states"):
            StateMachineBuilder().transition("fail", [], "failed")
