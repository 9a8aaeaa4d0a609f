"""Embedding client and vector math.

HttpEmbeddingClient talks to any OpenAI-compatible ``/embeddings`` endpoint.
cosine_similarity, normalize and parse_embedding are pure functions, shared by
query-time search and the indexing workflow.
"""

import json
import logging
import math
from typing import Any, Sequence

import httpx

from ..errors import EmbeddingError

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MODEL = "text-embedding-3-small"


def cosine_similarity(a: Sequence[float], b: Sequence[float]) -> float:
    """Cosine similarity of two vectors of equal length.

    Returns 0.0 when either vector has zero norm.

    Raises:
        ValueError: If the vectors differ in length.
    """
    if len(a) != len(b):
        raise ValueError(f"Vectors must have the same length ({len(a)} != {len(b)})")

    dot = 0.0
    norm_a = 0.0
    norm_b = 0.0
    for x, y in zip(a, b):
        dot += x * y
        norm_a += x * x
        norm_b += y * y

    if norm_a == 0 or norm_b == 0:
        return 0.0
    return dot / (math.sqrt(norm_a) * math.sqrt(norm_b))


def normalize(vector: Sequence[float]) -> list[float]:
    """Scale a vector to unit L2 norm. Zero vectors are returned unchanged."""
    norm = math.sqrt(sum(x * x for x in vector))
    if norm == 0:
        return list(vector)
    return [x / norm for x in vector]


def parse_embedding(raw: Any, expected_length: int | None = None) -> list[float] | None:
    """Validate a stored or freshly computed embedding.

    Accepts a list of numbers or its JSON text. Returns None for anything
    unusable: unparseable text, non-numeric or non-finite values, a length
    other than ``expected_length``, or an all-zero vector.
    """
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return None
    if not isinstance(raw, (list, tuple)) or not raw:
        return None

    vector: list[float] = []
    for value in raw:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return None
        if not math.isfinite(value):
            return None
        vector.append(float(value))

    if expected_length is not None and len(vector) != expected_length:
        return None
    if not any(vector):
        return None
    return vector


class HttpEmbeddingClient:
    """EmbeddingProvider backed by an OpenAI-compatible HTTP API.

    Example:
        client = HttpEmbeddingClient(api_key="sk-...")
        vector = await client.embed("Week-end à Lisbonne")
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the embedding client.

        Args:
            api_key: Bearer token for the API.
            model: Embedding model name.
            base_url: API root, without the trailing ``/embeddings``.
            timeout: HTTP timeout in seconds.
            client: Optional shared AsyncClient. A short-lived client is
                opened per call when omitted.
        """
        self._api_key = api_key
        self._model = model
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._client = client

    @property
    def model(self) -> str:
        """Return the embedding model being used."""
        return self._model

    async def embed(self, text: str) -> list[float]:
        """Embed a single text.

        Raises:
            EmbeddingError: If the text is empty or the API call fails.
        """
        if not text or not text.strip():
            raise EmbeddingError("Text cannot be empty")
        vectors = await self.embed_many([text])
        return vectors[0]

    async def embed_many(self, texts: list[str]) -> list[list[float]]:
        """Embed several texts in one request, preserving input order.

        Raises:
            EmbeddingError: If any text is empty or the API call fails.
        """
        if not texts:
            raise EmbeddingError("Texts list cannot be empty")
        if any(not t or not t.strip() for t in texts):
            raise EmbeddingError("Texts cannot be empty")
        if not self._api_key:
            raise EmbeddingError("An API key is required for embeddings")

        payload = {"model": self._model, "input": texts}
        data = await self._post(payload)
        vectors = self._parse_response(data)
        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"Expected {len(texts)} embeddings, received {len(vectors)}"
            )
        return vectors

    async def _post(self, payload: dict[str, Any]) -> Any:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }
        url = f"{self._base_url}/embeddings"

        try:
            if self._client is not None:
                response = await self._client.post(
                    url, json=payload, headers=headers, timeout=self._timeout
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(
                        url, json=payload, headers=headers, timeout=self._timeout
                    )
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as http_err:
            logger.error(
                "HTTP error while creating embedding: %s - Response: %s",
                http_err,
                http_err.response.text[:500],
            )
            raise EmbeddingError(
                f"Embedding API error: {http_err.response.status_code}"
            ) from http_err
        except httpx.RequestError as req_err:
            logger.error("Request error while creating embedding: %s", req_err)
            raise EmbeddingError(f"Embedding request failed: {req_err}") from req_err
        except ValueError as val_err:
            logger.error("Embedding API returned invalid JSON: %s", val_err)
            raise EmbeddingError("Embedding API returned invalid JSON") from val_err

    def _parse_response(self, data: Any) -> list[list[float]]:
        if not isinstance(data, dict) or not isinstance(data.get("data"), list):
            logger.error(f"Unexpected response structure from embedding API: {data!r:.200}")
            raise EmbeddingError("Failed to parse embeddings from API response")

        items = sorted(
            data["data"],
            key=lambda item: item.get("index", 0) if isinstance(item, dict) else 0,
        )
        vectors: list[list[float]] = []
        for item in items:
            embedding = item.get("embedding") if isinstance(item, dict) else None
            if not isinstance(embedding, list) or not embedding:
                raise EmbeddingError("Embedding API returned an empty vector")
            try:
                vectors.append([float(x) for x in embedding])
            except (TypeError, ValueError) as e:
                raise EmbeddingError("Embedding API returned a non-numeric vector") from e
        return vectors
