"""Exceptions raised while defining state machines."""


class DefinitionError(ValueError):
    """
    Raised when a transition table or machine definition is invalid.

    Covers an empty state set, rules that reference undeclared states,
    rules without source states, ambiguous rules, and an initial state
    that is not declared. Subclasses ValueError so callers can treat it
    like any other configuration error.
    """
