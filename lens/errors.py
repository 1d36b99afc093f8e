"""Exception hierarchy for Audience Lens.

Every error raised on purpose by the store or the gateway derives from
``LensError`` so that the web layer can turn it into a user-visible message.
"""

from __future__ import annotations


class LensError(Exception):
    """Base class for all Audience Lens errors."""


class ConfigurationError(LensError, ValueError):
    """A required setting (the API key) is missing."""


class TransportError(LensError):
    """The call to the research API failed."""


class ParseError(LensError):
    """A structured response did not match its expected JSON shape."""


class NotFoundError(LensError):
    """The referenced audience id does not exist."""


class StorageError(LensError):
    """The persistence medium could not be read or written."""


class StorageWriteError(StorageError):
    """The persistence medium rejected a write."""
