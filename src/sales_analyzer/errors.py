class InvalidURLError(ValueError):
    """Raised when the submitted string is not a YouTube video URL."""


class AnalysisBackendError(ValueError):
    """Raised by an analysis backend with a message safe to show to the user."""
