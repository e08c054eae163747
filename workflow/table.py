"""
TransitionTable — the validated, immutable rule set behind a state machine.

A table is built once from a declared state set and a list of rules, then
shared read-only by every machine instance that uses it. Lookups by
``(event, state)`` are O(1).

Rules may be given in any of three shapes:
    TransitionRule.create("confirm", "pending", "confirmed")
    ("confirm", "pending", "confirmed")
    {"event": "fail", "from": ["pending", "authorized"], "to": "failed"}
"""

import logging
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple, Union

from workflow.errors import DefinitionError
from workflow.types import TransitionRule, normalize_states

logger = logging.getLogger(__name__)


def _coerce_rule(rule) -> TransitionRule:
    """Accept a TransitionRule, an (event, from, to) tuple or a dict."""
    if isinstance(rule, TransitionRule):
        return rule
    if isinstance(rule, dict):
        missing = [k for k in ("event", "from", "to") if k not in rule]
        if missing:
            raise DefinitionError(f"Transition definition {rule!r} missing keys: {missing}")
        return TransitionRule.create(rule["event"], rule["from"], rule["to"])
    if isinstance(rule, (tuple, list)) and len(rule) == 3:
        event, from_, to = rule
        return TransitionRule.create(event, from_, to)
    raise DefinitionError(f"Unsupported transition definition: {rule!r}")


class TransitionTable:
    """
    Immutable mapping from ``(event, current state)`` to target state.

    Use ``TransitionTable.build()`` rather than the constructor; it
    validates the definition and never returns a partially built table.
    """

    def __init__(
        self,
        states: FrozenSet[str],
        rules: Tuple[TransitionRule, ...],
        index: Dict[Tuple[str, str], str],
        events_by_state: Dict[str, FrozenSet[str]],
    ):
        self._states = states
        self._rules = rules
        self._index = index
        self._events_by_state = events_by_state

    @classmethod
    def build(cls, states: Union[str, Iterable[str]], rules: Iterable) -> "TransitionTable":
        """
        Validate a definition and build the lookup index.

        Args:
            states: Every state the machine may be in. A bare string
                declares a single state.
            rules: Transition definitions (see module docstring for shapes).

        Returns:
            A ready-to-share TransitionTable.

        Raises:
            DefinitionError: If ``states`` is empty, a rule references an
                undeclared state, or two rules match the same event from the
                same state.
        """
        declared = normalize_states(states)
        if not declared:
            raise DefinitionError("State machine must declare at least one state")

        normalized: List[TransitionRule] = [_coerce_rule(r) for r in rules]
        index: Dict[Tuple[str, str], str] = {}
        events: Dict[str, set] = {}

        for rule in normalized:
            for source in sorted(rule.sources):
                if source not in declared:
                    raise DefinitionError(
                        f"Transition '{rule.event}' references undeclared source state '{source}'"
                    )
            if rule.target not in declared:
                raise DefinitionError(
                    f"Transition '{rule.event}' references undeclared target state '{rule.target}'"
                )

            for source in sorted(rule.sources):
                key = (rule.event, source)
                if key in index:
                    raise DefinitionError(
                        f"Ambiguous transition '{rule.event}' from state '{source}': "
                        f"already leads to '{index[key]}'"
                    )
                index[key] = rule.target
                events.setdefault(source, set()).add(rule.event)

        table = cls(
            states=declared,
            rules=tuple(normalized),
            index=index,
            events_by_state={s: frozenset(e) for s, e in events.items()},
        )
        logger.debug(f"Built transition table: {len(declared)} states, {len(normalized)} rules")
        return table

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------

    def lookup(self, event: str, state: str) -> Optional[str]:
        """Return the target for ``event`` fired from ``state``, or None."""
        return self._index.get((event, state))

    def events_from(self, state: str) -> FrozenSet[str]:
        """Return every event with at least one rule valid from ``state``."""
        return self._events_by_state.get(state, frozenset())

    def has_state(self, state: str) -> bool:
        return state in self._states

    def is_terminal(self, state: str) -> bool:
        """A state with no outgoing transitions is terminal."""
        return not self.events_from(state)

    @property
    def states(self) -> FrozenSet[str]:
        return self._states

    @property
    def rules(self) -> Tuple[TransitionRule, ...]:
        return self._rules

    def __contains__(self, state: object) -> bool:
        return state in self._states

    def __len__(self) -> int:
        return len(self._rules)

    def __repr__(self) -> str:
        return f"TransitionTable(states={sorted(self._states)!r}, rules={len(self._rules)})"
