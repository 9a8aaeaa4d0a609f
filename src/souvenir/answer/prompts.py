"""Prompt builders for LLM-generated answers."""

from ..memory.models import MemoryRecord
from ..query.models import QueryType
from .formatting import format_date_fr

SYSTEM_PROMPT_BASE = """Tu es un assistant personnel qui aide à analyser et raconter des souvenirs personnels.

RÈGLES GÉNÉRALES
- Réponds toujours en français et tutoie l'utilisateur (tu, ton, tes).
- Ne t'appuie que sur les souvenirs fournis dans le contexte.
- Si une information n'apparaît pas dans ces souvenirs, dis-le clairement.
- N'invente jamais de contenu, même pour faire joli.
- Ton ton est chaleureux, naturel et concis.
- À la fin de chaque réponse, ajoute un séparateur --- puis une section "Sources :"
  avec, pour chaque souvenir utilisé, une ligne : [Date] – [extrait court]."""

TYPE_INSTRUCTIONS = {
    QueryType.COUNT: (
        "Question de comptage : identifie tous les souvenirs pertinents et donne "
        "le nombre exact en 1 à 2 phrases, sous la forme \"Tu as fait X [activité] "
        "en [période].\" Ne compte pas un souvenir si l'activité n'y est pas "
        "explicitement décrite."
    ),
    QueryType.NARRATIVE: (
        "Question narrative : raconte les faits marquants en 2 à 3 phrases, en "
        "mentionnant les dates et les lieux clés. Style vivant mais sobre."
    ),
    QueryType.SUMMARY: (
        "Résumé : fais une synthèse concise des thèmes principaux et indique le "
        "nombre de souvenirs."
    ),
    QueryType.LIST: (
        "Liste : une puce par souvenir, par ordre chronologique (ou de pertinence "
        "si aucune date), au format [JJ/MM/AAAA] - [phrase reformulée de moins de "
        "15 mots]."
    ),
}


def build_system_prompt(query_type: QueryType) -> str:
    """Build the system instruction for a query type.

    Args:
        query_type: Shape of the expected answer.

    Returns:
        The general grounding rules followed by the type-specific rules.
    """
    return f"{SYSTEM_PROMPT_BASE}\n\n{TYPE_INSTRUCTIONS[query_type]}"


def format_memories(records: list[MemoryRecord]) -> str:
    """One line per record: date, optional location, content."""
    lines = []
    for record in records:
        place = f" à {record.location}" if record.location else ""
        lines.append(f"- {format_date_fr(record.date)}{place} : {record.content}")
    return "\n".join(lines)


def build_user_message(
    query: str, records: list[MemoryRecord], query_type: QueryType
) -> str:
    """Build the user message carrying the question and the memories."""
    return (
        f'Question de l\'utilisateur : "{query}"\n\n'
        f"Souvenirs disponibles :\n{format_memories(records)}\n\n"
        f"Génère une réponse appropriée au type de question ({query_type.value})."
    )
