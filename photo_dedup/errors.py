"""Exceptions raised by the photo de-duplication tool."""


class DedupError(Exception):
    """Base class for all tool errors."""


class ConfigurationError(DedupError, ValueError):
    """Invalid options, detected before any file is touched."""


class LinkIntegrityError(DedupError):
    """A link was created but does not resolve back to the file it should point to."""


class MissingSourceError(DedupError, FileNotFoundError):
    """The representative of a group disappeared between grouping and action."""
