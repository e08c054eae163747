"""
StateMachine — one entity's live lifecycle on top of a shared TransitionTable.

Features:
- Query helpers (``is_state``, ``is_in``, ``can``, ``available_events``)
- A single mutator, ``transition()``, that never raises for unknown events
- Arbitrary key/value context, independent of transition validity
- Append-only transition history for auditing

Usage:
    from workflow import StateMachine, TransitionTable

    table = TransitionTable.build(
        ["pending", "confirmed", "shipped"],
        [("confirm", "pending", "confirmed"), ("ship", "confirmed", "shipped")],
    )
    order = StateMachine(table, "pending")

    if order.get("paid"):
        result = order.transition("confirm")
        if not result.success:
            return {"status": 409, "error": result.reason}

Guards are the caller's job: read the context, then decide whether to call
``transition()`` at all.
"""

import logging
import time
from typing import Any, Callable, Dict, FrozenSet, Iterable, List, Mapping, Optional, Union

from workflow.errors import DefinitionError
from workflow.table import TransitionTable
from workflow.types import TransitionRecord, TransitionResult, normalize_states

logger = logging.getLogger(__name__)


class StateMachine:
    """
    A single entity's state, context and transition history.

    Args:
        table: The transition table. Shared read-only between instances.
        initial: Starting state. Must be declared in ``table``.
        context: Optional initial context values.
        clock: Callable returning the current epoch time, used to stamp
               history records (default: ``time.time``).

    Raises:
        DefinitionError: If ``initial`` is not a declared state.
    """

    def __init__(
        self,
        table: TransitionTable,
        initial: str,
        context: Optional[Mapping[str, Any]] = None,
        clock: Callable[[], float] = time.time,
    ):
        if not table.has_state(initial):
            raise DefinitionError(f"Initial state '{initial}' is not a declared state")

        self._table = table
        self._initial = initial
        self._current_state = initial
        self._context: Dict[str, Any] = dict(context or {})
        self._history: List[TransitionRecord] = []
        self._last_transition: Optional[TransitionRecord] = None
        self._clock = clock

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    @property
    def table(self) -> TransitionTable:
        return self._table

    def get_current_state(self) -> str:
        """Return the current state."""
        return self._current_state

    def is_state(self, state: str) -> bool:
        return self._current_state == state

    def is_in(self, states: Union[str, Iterable[str]]) -> bool:
        return self._current_state in normalize_states(states)

    def can(self, event: str) -> bool:
        """True if ``transition(event)`` would succeed right now."""
        return self._table.lookup(event, self._current_state) is not None

    def available_events(self) -> FrozenSet[str]:
        """Every event that can fire from the current state."""
        return self._table.events_from(self._current_state)

    def is_terminal(self) -> bool:
        """True if no event can fire from the current state."""
        return self._table.is_terminal(self._current_state)

    # ------------------------------------------------------------------
    # Transition
    # ------------------------------------------------------------------

    def transition(self, event: str) -> TransitionResult:
        """
        Fire ``event`` from the current state.

        On success the current state, history and last transition are
        updated together. On failure nothing changes and the returned
        result carries ``error="invalid_transition"`` and a reason.
        """
        current = self._current_state
        target = self._table.lookup(event, current)

        if target is None:
            logger.info(f"Rejected transition '{event}' from {current}")
            return TransitionResult.invalid(event, current)

        record = TransitionRecord(
            from_state=current,
            to_state=target,
            event=event,
            timestamp=self._clock(),
        )
        self._current_state = target
        self._history.append(record)
        self._last_transition = record

        logger.info(f"Transition: {current} → {target} ({event})")
        return TransitionResult.ok(event, current, target)

    # ------------------------------------------------------------------
    # Context
    # ------------------------------------------------------------------

    def set(self, key: str, value: Any) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        self._context[key] = value

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored under ``key``, or ``default`` if absent."""
        return self._context.get(key, default)

    @property
    def context(self) -> Dict[str, Any]:
        """A shallow copy of the context."""
        return dict(self._context)

    # ------------------------------------------------------------------
    # History
    # ------------------------------------------------------------------

    def get_history(self, last_n: Optional[int] = None) -> List[TransitionRecord]:
        """
        Return transition history, oldest first.

        Args:
            last_n: If provided, return only the last N entries.
        """
        history = list(self._history)
        if last_n is None:
            return history
        return history[-last_n:] if last_n > 0 else []

    def get_last_transition(self) -> Optional[TransitionRecord]:
        """Return the most recent successful transition, or None."""
        return self._last_transition

    def reset(self) -> None:
        """Return to the initial state and clear history. Context is kept."""
        self._current_state = self._initial
        self._history.clear()
        self._last_transition = None
        logger.info(f"Reset to {self._current_state}")

    def __repr__(self) -> str:
        return (
            f"StateMachine(state={self._current_state!r}, "
            f"transitions={len(self._history)})"
        )
