"""Custom Exception Hierarchy for the movie streamer.

This module defines specific error types to allow for granular error handling
at the HTTP boundary. All custom exceptions inherit from `StreamerError`.
"""

class StreamerError(Exception):
    """Base exception for all movie streamer errors."""
    def __init__(self, message: str, original_error: Exception | None = None, context: dict | None = None):
        super().__init__(message)
        self.original_error = original_error
        self.context = context or {}

class RangeError(StreamerError):
    """Raised when a Range header cannot be turned into a byte interval."""
    pass

class MalformedHeaderError(RangeError):
    """Raised when a Range header is syntactically invalid."""
    pass

class RangeNotSatisfiableError(RangeError):
    """Raised when a Range start lies outside the file."""
    pass

class StreamError(StreamerError):
    """Raised when copying a byte window fails after headers are committed."""
    pass

class SourceError(StreamError):
    """Raised when seeking or reading the media file fails."""
    pass

class SinkError(StreamError):
    """Raised when writing to the client fails, typically a disconnect."""
    pass

class MovieNotFoundError(StreamerError):
    """Raised when no file exists for a movie identifier."""
    pass

class UnsupportedMediaError(StreamerError):
    """Raised when a movie file has an extension we cannot serve."""
    pass

class TemplateError(StreamerError):
    """Base for HTML template failures."""
    pass

class TemplateNotFoundError(TemplateError):
    """Raised when a template file is missing or unreadable."""
    pass

class TemplateRenderError(TemplateError):
    """Raised when a template references a variable that was not supplied."""
    pass
