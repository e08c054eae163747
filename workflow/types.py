"""
State machine data types and structures.

Defines the core types used by the workflow engine:
- TransitionRule: A declared edge, valid from a set of source states
- TransitionRecord: One entry in an instance's transition history
- TransitionResult: Outcome of a ``transition()`` call
"""

import time
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, Optional, Union

from workflow.errors import DefinitionError

INVALID_TRANSITION = "invalid_transition"


def normalize_states(states: Union[str, Iterable[str]]) -> FrozenSet[str]:
    """Turn a single state or an iterable of states into a frozenset."""
    if isinstance(states, str):
        return frozenset([states])
    return frozenset(states)


@dataclass(frozen=True)
class TransitionRule:
    """
    Defines an event that moves the machine from any source state to a target.

    Args:
        event: Name of the triggering event.
        sources: Non-empty set of states the event is valid from. A single
                 state or any iterable is normalised to a frozenset.
        target: The state the event leads to.

    Raises:
        DefinitionError: If ``sources`` is empty or ``event`` is blank.
    """

    event: str
    sources: FrozenSet[str]
    target: str

    def __post_init__(self):
        object.__setattr__(self, "sources", normalize_states(self.sources))
        if not self.event:
            raise DefinitionError("Transition event name must not be empty")
        if not self.sources:
            raise DefinitionError(f"Transition '{self.event}' has no source states")

    @classmethod
    def create(cls, event: str, from_: Union[str, Iterable[str]], to: str) -> "TransitionRule":
        """
        Build a rule, accepting either one source state or several.

        Example:
            TransitionRule.create("fail", ["pending", "authorized"], "failed")
        """
        return cls(event=event, sources=normalize_states(from_), target=to)

    def applies_to(self, state: str) -> bool:
        """True if the rule can fire from ``state``."""
        return state in self.sources


@dataclass(frozen=True)
class TransitionRecord:
    """
    Records a single successful transition.

    Kept in insertion order on the owning machine for auditing and debugging.
    """

    from_state: str
    to_state: str
    event: str
    timestamp: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        """Serialise to a plain dictionary."""
        return {
            "from": self.from_state,
            "to": self.to_state,
            "event": self.event,
            "timestamp": self.timestamp,
        }


@dataclass(frozen=True)
class TransitionResult:
    """
    Outcome of ``StateMachine.transition()``.

    A rejected transition is reported here rather than raised, so callers
    branch on ``success`` instead of catching exceptions.
    """

    success: bool
    event: str
    from_state: str
    to_state: Optional[str] = None
    error: Optional[str] = None
    reason: Optional[str] = None

    @classmethod
    def ok(cls, event: str, from_state: str, to_state: str) -> "TransitionResult":
        return cls(success=True, event=event, from_state=from_state, to_state=to_state)

    @classmethod
    def invalid(cls, event: str, current: str) -> "TransitionResult":
        return cls(
            success=False,
            event=event,
            from_state=current,
            error=INVALID_TRANSITION,
            reason=f"Cannot transition '{event}' from state '{current}'",
        )

    @property
    def failed(self) -> bool:
        """True if the transition was rejected."""
        return not self.success

    def to_dict(self) -> dict:
        """Serialise to a plain dictionary, shaped by outcome."""
        if self.success:
            return {
                "success": True,
                "from": self.from_state,
                "to": self.to_state,
                "event": self.event,
            }
        return {"success": False, "error": self.error, "reason": self.reason}
