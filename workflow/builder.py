"""
Fluent construction of state machines.

Example:
    order = (
        StateMachineBuilder()
        .initial("pending")
        .states_list(["pending", "confirmed", "shipped"])
        .transition("confirm", "pending", "confirmed")
        .transition("ship", "confirmed", "shipped")
        .build()
    )

Calls may come in any order; ``build()`` must be last.
"""

from typing import Any, Dict, Iterable, List, Optional, Union

from workflow.errors import DefinitionError
from workflow.machine import StateMachine
from workflow.table import TransitionTable
from workflow.types import TransitionRule, normalize_states


class StateMachineBuilder:
    """Accumulates a machine definition and validates it on ``build()``."""

    def __init__(self):
        self._initial: Optional[str] = None
        self._states: List[str] = []
        self._rules: List[TransitionRule] = []
        self._context: Dict[str, Any] = {}

    def initial(self, state: str) -> "StateMachineBuilder":
        self._initial = state
        return self

    def states_list(self, states: Union[str, Iterable[str]]) -> "StateMachineBuilder":
        """Declare states. A bare string declares one state; repeated calls add to the set."""
        self._states.extend(normalize_states(states))
        return self

    def transition(
        self, event: str, from_: Union[str, Iterable[str]], to: str
    ) -> "StateMachineBuilder":
        """Add a rule. ``from_`` may be one state or a list of states."""
        self._rules.append(TransitionRule.create(event, from_, to))
        return self

    def context(self, **values: Any) -> "StateMachineBuilder":
        """Seed the built machine's context."""
        self._context.update(values)
        return self

    def build_table(self) -> TransitionTable:
        """Validate the accumulated definition and return just the table."""
        return TransitionTable.build(self._states, self._rules)

    def build(self) -> StateMachine:
        """
        Validate and build a machine in its initial state.

        Raises:
            DefinitionError: If no initial state was set, the initial state
                is not declared, or any rule references an undeclared state.
        """
        if self._initial is None:
            raise DefinitionError("Initial state must be set before build()")
        table = self.build_table()
        return StateMachine(table, self._initial, context=self._context)
