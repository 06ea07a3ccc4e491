"""Exception types raised by autocat."""


class AutocatError(Exception):
    """Base class for all autocat errors."""


class InvalidCategoryName(AutocatError, ValueError):
    """A proposed category name was rejected.

    This is a validation failure: the prompt layer should show the message to
    the user and ask again rather than abort.
    """


class StoreDurabilityError(AutocatError):
    """The persisted category store exists but cannot be read or written.

    Raised at startup so that we never run with a partial history and then
    overwrite the real one on the next save.
    """
