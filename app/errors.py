# app/errors.py


class StudioError(Exception):
    """Base class for storybook studio errors."""


class GenerationError(StudioError):
    """The content provider failed or returned nothing usable. Recoverable."""

    def __init__(self, cause: str):
        super().__init__(cause)
        self.cause = cause


class StructuralViolation(StudioError):
    """An illegal page mutation was attempted; nothing was changed."""


class IllegalTransition(StudioError):
    """A wizard step change that skips or runs off either end."""


class StorageCapacityExceeded(StudioError):
    """The persisted blob does not fit in the storage quota."""


class MalformedPersistedState(StudioError):
    """The persisted blob could not be decoded."""


class StorageUnavailable(StudioError):
    """The persisted blob could not be written (permissions, bad path, I/O fault)."""
