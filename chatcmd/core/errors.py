"""Exceptions raised by the command interpreter."""


class ConfigurationError(ValueError):
    """A command or argument declaration is invalid.

    Raised while descriptors are built or registered, so it aborts startup
    instead of a single dispatch.
    """


class DirectoryLookupError(Exception):
    """The directory service could not resolve an identifier."""

    def __init__(self, identifier: int, reason: str = "") -> None:
        self.identifier = identifier
        self.reason = reason
        message = f"Could not resolve {identifier}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)
