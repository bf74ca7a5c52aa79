"""Service-layer exceptions."""


class SaveLoadError(Exception):
    """Raised when a persisted document is corrupt or incompatible."""


class GameNotInitializedError(RuntimeError):
    """Raised when the store is queried before a game is started or loaded."""
