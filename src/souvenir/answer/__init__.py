"""Answer generation: LLM prompts, templates and the fallback chain."""

from .generator import (
    AnswerGenerator,
    AnswerStrategy,
    GeneratedAnswer,
    GenerativeAnswerStrategy,
    TemplateAnswerStrategy,
)
from .prompts import build_system_prompt, build_user_message
from .templates import NO_RESULTS_MESSAGES, no_results_answer, template_answer

__all__ = [
    "AnswerGenerator",
    "AnswerStrategy",
    "GeneratedAnswer",
    "GenerativeAnswerStrategy",
    "NO_RESULTS_MESSAGES",
    "TemplateAnswerStrategy",
    "build_system_prompt",
    "build_user_message",
    "no_results_answer",
    "template_answer",
]
