"""Registry of constraint keywords for the constraint language.

Each keyword ("player", "team", ...) maps to a function that turns the
argument text after ``"<Keyword>:"`` into a constraint. The mapping is
filled at import time by the ``register_constraint`` decorator; nothing is
looked up by class name at runtime.
"""

from collections.abc import Callable

from nba_highlights.constraints.base import Constraint
from nba_highlights.models.entities import EntityRegistry

ConstraintParser = Callable[[str, EntityRegistry], Constraint]

# Registry of keyword -> argument parser
_CONSTRAINT_REGISTRY: dict[str, ConstraintParser] = {}


def register_constraint(keyword: str) -> Callable[[ConstraintParser], ConstraintParser]:
    """
    Register an argument parser under a constraint keyword.

    This is intended to be used as a decorator.

    Args:
        keyword: Keyword as written before the colon, matched case-insensitively.

    Returns:
        Decorator returning the parser unchanged.

    Example:
        @register_constraint("team")
        def parse_team(argument: str, registry: EntityRegistry) -> Constraint:
            ...
    """
    key = keyword.strip().lower()
    if not key.isidentifier():
        raise ValueError(f"Constraint keyword must be a single word, got '{keyword}'")

    def decorator(func: ConstraintParser) -> ConstraintParser:
        if key in _CONSTRAINT_REGISTRY and _CONSTRAINT_REGISTRY[key] is not func:
            raise ValueError(f"Constraint keyword '{key}' is already registered")
        _CONSTRAINT_REGISTRY[key] = func
        return func

    return decorator


def get_constraint_parser(keyword: str) -> ConstraintParser | None:
    """
    Get the argument parser for a keyword.

    Args:
        keyword: Constraint keyword (e.g., "player", "score").

    Returns:
        Parser function if registered, None otherwise.
    """
    return _CONSTRAINT_REGISTRY.get(keyword.strip().lower())


def list_constraint_keywords() -> list[str]:
    """
    List all registered constraint keywords.

    Returns:
        Keywords in registration order.
    """
    return list(_CONSTRAINT_REGISTRY.keys())
