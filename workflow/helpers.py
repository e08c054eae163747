"""
Helper utilities for building state machines.

Provides convenience functions and decorators that reduce boilerplate
when defining transitions and handling their results.
"""

import logging
from functools import wraps
from typing import Dict, Iterable, Union

from workflow.table import TransitionTable
from workflow.types import TransitionResult, TransitionRule

logger = logging.getLogger(__name__)


def create_transition_rule(
    event: str,
    from_: Union[str, Iterable[str]],
    to: str,
) -> TransitionRule:
    """
    Create a TransitionRule from one or several source states.

    Args:
        event: Name of the triggering event.
        from_: A single source state or an iterable of them.
        to: Target state.

    Returns:
        A TransitionRule with its sources normalised to a frozenset.

    Example:
        rule = create_transition_rule("fail", ["pending", "authorized"], "failed")
    """
    return TransitionRule.create(event, from_, to)


def build_transition_table(
    states: Iterable[str],
    configs: Dict[str, dict],
) -> TransitionTable:
    """
    Build a TransitionTable from a compact per-event configuration.

    Each event maps to a plain dict instead of a verbose rule definition.

    Args:
        states: Every declared state.
        configs: Mapping of event name → config dict. Required keys:
            - ``from`` (str or list of str): Source state(s).
            - ``to`` (str): Target state.

    Returns:
        A validated TransitionTable.

    Raises:
        ValueError: If any config dict is missing ``from`` or ``to``.
        DefinitionError: If the resulting table is invalid.

    Example:
        table = build_transition_table(["pending", "paid", "failed"], {
            "pay":  {"from": "pending", "to": "paid"},
            "fail": {"from": ["pending", "paid"], "to": "failed"},
        })
    """
    rules = []
    for event, config in configs.items():
        for key in ("from", "to"):
            if key not in config:
                raise ValueError(f"Event '{event}' config missing required '{key}' field")
        rules.append(create_transition_rule(event, config["from"], config["to"]))
    return TransitionTable.build(states, rules)


def log_transition(func):
    """
    Decorator that logs the outcome of a function returning a TransitionResult.

    Usage:
        @log_transition
        def confirm_order(order):
            if not order.get("paid"):
                return TransitionResult.invalid("confirm", order.get_current_state())
            return order.transition("confirm")

    Note:
        The result is returned untouched; only a DEBUG line is added.
    """

    @wraps(func)
    def wrapper(*args, **kwargs) -> TransitionResult:
        result = func(*args, **kwargs)
        if result.success:
            logger.debug(f"{func.__name__}: {result.from_state} → {result.to_state}")
        else:
            logger.debug(f"{func.__name__}: {result.error} ({result.reason})")
        return result

    return wrapper
