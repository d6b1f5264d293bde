from __future__ import annotations


class HexaclashError(Exception):
    pass


class InvalidCellError(HexaclashError, ValueError):
    pass


class OccupiedCellError(HexaclashError, ValueError):
    pass


class EmptyCellError(HexaclashError, ValueError):
    pass


class IllegalMoveError(HexaclashError, ValueError):
    pass


class MatchStateError(HexaclashError, RuntimeError):
    """Raised when a transition is requested that the match cannot take right now."""
