"""
workflow
~~~~~~~~

A lightweight, framework-agnostic state machine engine for entity lifecycles.

Quick start:
    from workflow import StateMachineBuilder

    order = (
        StateMachineBuilder()
        .initial("pending")
        .states_list(["pending", "confirmed"])
        .transition("confirm", "pending", "confirmed")
        .build()
    )
    order.transition("confirm")
"""

from workflow.builder import StateMachineBuilder
from workflow.errors import DefinitionError
from workflow.machine import StateMachine
from workflow.table import TransitionTable
from workflow.types import (
    INVALID_TRANSITION,
    TransitionRecord,
    TransitionResult,
    TransitionRule,
)
from workflow.helpers import (
    build_transition_table,
    create_transition_rule,
    log_transition,
)

__all__ = [
    "StateMachine",
    "StateMachineBuilder",
    "TransitionTable",
    "TransitionRule",
    "TransitionRecord",
    "TransitionResult",
    "DefinitionError",
    "INVALID_TRANSITION",
    "build_transition_table",
    "create_transition_rule",
    "log_transition",
]
