"""Exception hierarchy for souvenir."""


class SouvenirError(Exception):
    """Base class for all souvenir errors."""


class QueryValidationError(SouvenirError, ValueError):
    """Raised when a query is rejected before the pipeline runs."""


class EmbeddingError(SouvenirError):
    """Raised when the embedding provider fails or returns an unusable vector."""


class GenerationError(SouvenirError):
    """Raised when the text-generation provider fails."""
