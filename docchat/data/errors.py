"""Error types.

All of them are ``ValueError`` subclasses so callers that already guard
document handling with ``except ValueError`` keep working.
"""


class DocChatError(ValueError):
    """Base class for every error raised by docchat."""


class MalformedPackageError(DocChatError):
    """The bytes are not a readable Word package."""


class NoPlaceholdersError(DocChatError):
    """The template contains no usable placeholder."""


class RenderError(DocChatError):
    """Filling the template failed."""


class SessionNotFoundError(DocChatError):
    """Unknown or expired session id."""


class SessionNotReadyError(DocChatError):
    """Generation requested before every placeholder was filled."""
