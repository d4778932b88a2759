"""Exceptions raised by regain."""


class RegainError(Exception):
    """Base class for regain errors surfaced to callers."""


class CatalogUnavailableError(RegainError):
    """Neither the document store nor the fallback file produced a catalog.

    No plan can be generated without a catalog, so this is always fatal.
    """


class ProfileNotFoundError(RegainError):
    """The requested user profile does not exist."""


class SessionNotFoundError(RegainError):
    """No session with the requested ID exists in the training system."""
