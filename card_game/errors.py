"""Exceptions raised by the card game toolkit.

Every error is raised synchronously where it is detected and is meant to
reach the caller: they signal illegal input or a modelling bug, never a
condition to retry.
"""

from __future__ import annotations


class CardGameError(Exception):
    """Base class for all toolkit errors."""


class InvalidArgument(CardGameError, ValueError):
    """A structurally invalid call, such as a malformed card label."""


class EmptyTrick(InvalidArgument):
    """A trick was resolved before any card was played to it."""


class RankNotSupported(CardGameError, ValueError):
    """A card's rank is outside the domain of an array ranking."""


class IncomparableTokens(CardGameError, TypeError):
    """Two ordering tokens (or poker patterns) from unrelated scopes were compared."""


class StateError(CardGameError, RuntimeError):
    """Raised by the game engine for missing state or illegal actions."""
