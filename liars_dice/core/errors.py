
"""
errors.py
Exception hierarchy for the Liar's Dice engine.
Recoverable errors (IllegalMoveError and its subclasses) never mutate game state.
Fatal errors (EmptySetError, LogicError) halt the engine instance that raised them.
Related modules:
- engine.py: Raises and wraps these errors while applying actions.
- config.py: Raises InvalidConfigurationError from GameConfig.validate.
"""


class LiarsDiceError(Exception):
    """
    Root of every error raised by the liars_dice package.
    """
    pass


class IllegalMoveError(LiarsDiceError):
    """
    Raised when an action is rejected (bad bid, wrong turn, wrong phase).
    The game state is left untouched; the caller may resubmit.
    """
    pass


class InvalidBidError(IllegalMoveError):
    """
    Raised for a malformed bid or a bid that does not raise the current one.
    """
    pass


class InvalidStateError(IllegalMoveError):
    """
    Raised when an action is submitted in a phase that does not accept it.
    """
    pass


class EmptySetError(LiarsDiceError):
    """
    Raised when removing a die from an empty DiceSet. Unreachable with correct elimination handling.
    """
    pass


class InvalidConfigurationError(LiarsDiceError, ValueError):
    """
    Raised by GameConfig validation when the roster or dice settings cannot form a game.
    """
    pass


class LogicError(LiarsDiceError):
    """
    Raised when an AI strategy returns an action the engine rejects.
    Carries enough context to diagnose the faulty strategy.
    Args:
        message (str): Human readable description.
        phase (str|None): Engine phase when the action was rejected.
        player_id (int|None): Seat of the AI player.
        action (object|None): The offending action.
    """
    def __init__(self, message, phase=None, player_id=None, action=None):
        super().__init__(message)
        self.phase = phase
        self.player_id = player_id
        self.action = action

    def __str__(self):
        base = super().__str__()
        return f"{base} (phase={self.phase}, player={self.player_id}, action={self.action!r})"
