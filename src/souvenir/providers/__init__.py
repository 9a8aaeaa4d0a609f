"""External collaborators: record store, embeddings, text generation."""

from .base import EmbeddingProvider, RecordStore, TextProvider
from .embedding import HttpEmbeddingClient, cosine_similarity, normalize, parse_embedding
from .llm_client import GroqTextProvider

__all__ = [
    "EmbeddingProvider",
    "GroqTextProvider",
    "HttpEmbeddingClient",
    "RecordStore",
    "TextProvider",
    "cosine_similarity",
    "normalize",
    "parse_embedding",
]
