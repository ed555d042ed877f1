"""
Exceptions raised while decoding TMX/TSX documents.

Every failure surfaces as a TiledError subclass. Nothing is retried or
partially returned: either a complete structure comes back or one of these
reaches the caller.
"""


class TiledError(Exception):
    """Base class for all decoding failures."""


class MalformedAttributes(TiledError):
    """A required attribute is missing or has the wrong type."""


class PrematureEnd(TiledError):
    """The document ended before an open element was closed."""


class XmlDecodingError(TiledError):
    """The underlying XML is not well formed."""

    def __init__(self, error: Exception):
        super().__init__(f"XML decoding error: {error}")
        self.error = error


class Other(TiledError):
    """Precondition failure outside the document (file location, I/O)."""
