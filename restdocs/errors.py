"""Exceptions raised while syncing the REST reference pages."""


class SyncError(Exception):
    """Base class for every failure that aborts a sync run."""


class ParseError(SyncError):
    """A schema file or a page frontmatter block could not be parsed."""

    def __init__(self, path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"Failed to parse '{path}': {reason}")


class UnknownVersionError(SyncError):
    """A version identifier has no entry in the release line registry."""

    def __init__(self, identifier: str, detail: str = ""):
        self.identifier = identifier
        message = f"Unknown version '{identifier}'"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class RegistryError(SyncError):
    """The release line table is inconsistent."""


class ConfigError(SyncError):
    """The sync configuration file is missing or malformed."""
