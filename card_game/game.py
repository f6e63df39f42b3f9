from __future__ import annotations

import logging
from typing import Any, Optional, Tuple

from .errors import StateError
from .models import Action

# Game couples a phase with an immutable state and knows nothing about any
# particular card game. Rules live in the phases each game defines.

LOGGER = logging.getLogger("card_game.game")


class Phase:
    """Base class for a stage in a game's lifecycle.

    Phases are stateless: every hook is a pure function of the state it is
    given. Two instances of the same phase class are interchangeable.

    After every ``enter`` and ``apply`` the engine asks ``transition`` for the
    next phase. Returning a phase (even another instance of this one) exits
    this phase and enters that one; returning ``None`` stays put.
    """

    @property
    def name(self) -> str:
        return type(self).__name__

    def enter(self, state: Any) -> Any:
        """Called each time the phase becomes active. May return ``state``."""
        return state

    def exit(self, state: Any) -> Any:
        """Called each time the phase is about to be left. May return ``state``."""
        return state

    def apply(self, state: Any, action: Action) -> Any:
        """Return the state produced by ``action``; it must differ from ``state``.

        Phases whose ``transition`` never returns ``None`` need not override
        this: no action can ever reach them.
        """
        raise StateError(f"{self.name} does not accept actions")

    def transition(self, state: Any) -> Optional["Phase"]:
        return None

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Phase):
            return NotImplemented
        return type(self) is type(other)

    def __hash__(self) -> int:
        return hash(type(self))

    def __repr__(self) -> str:
        return self.name


class Game:
    """Life-cycle manager for a game of cards.

    Clients only interact through :meth:`apply`. A failed action leaves the
    current phase and state untouched.
    """

    def __init__(self, phase: Phase, state: Any) -> None:
        state = phase.enter(state)
        self._phase, self._state = self._settle(phase, state)

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def state(self) -> Any:
        return self._state

    def apply(self, action: Action) -> None:
        phase, previous = self._phase, self._state
        try:
            state = phase.apply(previous, action)
        except StateError as exc:
            LOGGER.info("%s rejected %s: %s", phase, action, exc)
            raise
        if state is None:
            raise StateError(f"{phase} returned no state for {action}")
        if state == previous:
            raise StateError(f"{action} did not change the state during {phase}")
        LOGGER.debug("%s applied %s", phase, action)

        # Commit only once the whole transition chain has succeeded.
        self._phase, self._state = self._settle(phase, state)

    @staticmethod
    def _settle(phase: Phase, state: Any) -> Tuple[Phase, Any]:
        # Entering a phase may immediately satisfy its own transition, so
        # setup phases cascade without any external action.
        next_phase = phase.transition(state)
        while next_phase is not None:
            LOGGER.debug("phase %s -> %s", phase, next_phase)
            state = phase.exit(state)
            phase = next_phase
            state = phase.enter(state)
            next_phase = phase.transition(state)
        return phase, state
