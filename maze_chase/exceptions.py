"""Maze chase exception hierarchy.

Gameplay edge cases (blocked moves, skipped obstacles, ghosts with no exit)
are recovered locally and never raise. These classes cover programming and
configuration errors only.
"""


class MazeChaseError(Exception):
    """Root of all maze-chase domain exceptions."""


class ConfigurationError(MazeChaseError):
    """Invalid or inconsistent game configuration."""


class MazeGenerationError(MazeChaseError):
    """A maze could not be built from the supplied layout or dimensions."""


class InvalidTransitionError(MazeChaseError):
    """A session status change was requested that the transition table forbids."""
