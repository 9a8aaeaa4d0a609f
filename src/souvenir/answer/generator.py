"""Answer generation with graceful degradation.

The generator tries its strategies in order. With a text provider, the LLM
answers first; any failure falls through to the templates, which always
produce an answer.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol, Sequence

from ..memory.models import MemoryRecord
from ..providers.base import TextProvider
from ..query.classifier import classify_query_type
from ..query.models import QueryFilters, QueryType
from .prompts import build_system_prompt, build_user_message
from .templates import no_results_answer, template_answer

logger = logging.getLogger(__name__)


@dataclass
class GeneratedAnswer:
    """An answer and how it was produced."""

    answer: str
    query_type: QueryType
    generated_by_text_provider: bool = False
    model: str | None = None


class AnswerStrategy(Protocol):
    """One way of producing an answer. Returns None to pass to the next one."""

    name: str

    async def generate(
        self,
        query: str,
        records: list[MemoryRecord],
        query_type: QueryType,
        filters: QueryFilters | None,
    ) -> GeneratedAnswer | None: ...


class GenerativeAnswerStrategy:
    """Delegate the answer to a text provider."""

    name = "llm"

    def __init__(self, provider: TextProvider, timeout: float | None = None) -> None:
        self.provider = provider
        self.timeout = timeout

    async def generate(
        self,
        query: str,
        records: list[MemoryRecord],
        query_type: QueryType,
        filters: QueryFilters | None,
    ) -> GeneratedAnswer | None:
        system = build_system_prompt(query_type)
        prompt = build_user_message(query, records, query_type)

        try:
            completion = self.provider.complete(prompt, system=system)
            if self.timeout is not None:
                text = await asyncio.wait_for(completion, self.timeout)
            else:
                text = await completion
        except asyncio.TimeoutError:
            logger.warning("Text generation timed out, using templates")
            return None
        except Exception as e:
            logger.warning(f"Text generation failed, using templates: {e}")
            return None

        if not text or not text.strip():
            logger.warning("Text generation returned an empty answer, using templates")
            return None

        return GeneratedAnswer(
            answer=text,
            query_type=query_type,
            generated_by_text_provider=True,
            model=getattr(self.provider, "model", None),
        )


class TemplateAnswerStrategy:
    """Fixed templates per query type."""

    name = "template"

    async def generate(
        self,
        query: str,
        records: list[MemoryRecord],
        query_type: QueryType,
        filters: QueryFilters | None,
    ) -> GeneratedAnswer | None:
        return GeneratedAnswer(
            answer=template_answer(query, records, query_type, filters),
            query_type=query_type,
        )


class AnswerGenerator:
    """Produce the final natural-language answer for a set of records."""

    def __init__(
        self,
        text_provider: TextProvider | None = None,
        generation_timeout: float | None = None,
        strategies: Sequence[AnswerStrategy] | None = None,
    ) -> None:
        """Initialize the generator.

        Args:
            text_provider: Optional LLM. Without one, templates answer.
            generation_timeout: Seconds allowed for the LLM call.
            strategies: Explicit strategy chain, overriding the default.
        """
        if strategies is None:
            chain: list[AnswerStrategy] = []
            if text_provider is not None:
                chain.append(GenerativeAnswerStrategy(text_provider, timeout=generation_timeout))
            chain.append(TemplateAnswerStrategy())
            strategies = chain
        self.strategies = list(strategies)

    async def generate(
        self,
        query: str,
        records: list[MemoryRecord],
        query_type: QueryType | None = None,
        filters: QueryFilters | None = None,
    ) -> GeneratedAnswer:
        """Answer ``query`` from ``records``.

        Args:
            query: The original question.
            records: Ranked records, best first.
            query_type: Shape of the answer, classified from the query if None.
            filters: Filters used for the search.

        Returns:
            The answer. Without records, the fixed "nothing found" message
            for the query type, without calling any provider.
        """
        if query_type is None:
            query_type = classify_query_type(query)

        if not records:
            return GeneratedAnswer(answer=no_results_answer(query_type), query_type=query_type)

        for strategy in self.strategies:
            result = await strategy.generate(query, records, query_type, filters)
            if result is not None:
                logger.debug(f"Answer produced by strategy {strategy.name}")
                return result

        return GeneratedAnswer(
            answer=template_answer(query, records, query_type, filters),
            query_type=query_type,
        )
