"""Exceptions raised while loading or authoring content."""


class ContentError(Exception):
    """Base exception for roster / catalog content."""


class ContentLoadError(ContentError):
    """Raised when a content file is missing or malformed."""


class GenerationError(ContentError):
    """Raised when a mission cannot be generated."""


class UnknownDifficultyError(GenerationError):
    """Raised for a difficulty label with no profile."""


class DuplicateMissionError(GenerationError):
    """Raised when the mission id already exists in the catalog."""


class EmptyRosterError(GenerationError):
    """Raised when no combatant matches the profile's rarities."""
