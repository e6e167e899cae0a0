"""Exceptions raised across layers."""


class ChessError(Exception):
    """Base class for all errors raised by this package."""


class GameError(ChessError):
    """Something went wrong inside the rules engine."""


class InvariantViolationError(GameError):
    """
    The board reached a state that should be impossible (no king, a captured king, ...).

    This always points at a bug in move generation / execution, never at bad user input.
    """


class IllegalMoveError(GameError):
    """The executor was asked to commit a move that is not in the legal set."""


class InvalidPromotionError(GameError):
    """A pawn can only promote into a queen, rook, bishop or knight."""


class InvalidFENError(ChessError):
    """Board placement string could not be parsed."""


class InvalidRequestError(ChessError):
    """
    Request coming from the host shell is malformed.

    NOTE: deliberately not a ValueError, so pydantic validators let it propagate unchanged.
    """


class RepositoryError(ChessError):
    """Requested history record could not be found."""


class ConfigurationError(ChessError):
    """Settings could not be loaded."""
