class PreprocessingError(Exception):
    """Base exception for all preprocessing-related errors."""


class PatternCompilationError(PreprocessingError):
    """Raised when a category rule cannot be used for detection."""
