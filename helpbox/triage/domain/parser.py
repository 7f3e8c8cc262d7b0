"""
Triage Response Parser
======================

Turns raw model output into a ``TriageResult``.

The model is asked to answer ``LETTER|solution text``. Anything else is
normalized rather than rejected: a missing or unknown priority code becomes
"M" and the text is kept whole. Only an empty answer is an error.
"""

import re
from typing import Optional

from helpbox.config import VALID_PRIORITIES, Priority
from helpbox.core import EmptyModelOutputException
from helpbox.triage.domain.entities import NON_TECHNICAL_MESSAGE, TriageResult

SEPARATOR = "|"

_RATIONALE_HEADING = r"(?:c[áa]lculo\s+d[ae]\s+prioridade|priority\s+calculation)"
_SOLUTION_HEADING = r"(?:solu[çc][ãa]o\s+sugerida|suggested\s+solution)"

# Rationale heading up to and including the solution heading, or to the end.
_RATIONALE_BLOCK = re.compile(
    r"(?:\*\*)?\s*" + _RATIONALE_HEADING + r".*?"
    r"(?:(?:\*\*)?\s*" + _SOLUTION_HEADING + r"(?:\s*\*\*)?\s*:?(?:\*\*)?|$)",
    re.IGNORECASE | re.DOTALL,
)

# "**Análise:**", "**Análise de impacto**:" and friends.
_BOLD_ANALYSIS = re.compile(
    r"\*\*\s*(?:an[áa]lise|analysis)\b[^*\n]*\*\*\s*:?",
    re.IGNORECASE,
)

_EXTRA_BLANK_LINES = re.compile(r"\n{3,}")


def strip_leaked_rationale(text: str) -> str:
    """
    Remove scoring rationale the model was told to keep to itself.

    The prompt forbids it, this makes sure of it.
    """
    cleaned = _RATIONALE_BLOCK.sub("", text)
    cleaned = _BOLD_ANALYSIS.sub("", cleaned)
    cleaned = _EXTRA_BLANK_LINES.sub("\n\n", cleaned)
    return cleaned.strip()


def parse_model_output(raw: Optional[str]) -> TriageResult:
    """
    Parse a raw model answer.

    Args:
        raw: Text returned by the model

    Returns:
        TriageResult with a valid priority code and the cleaned solution

    Raises:
        EmptyModelOutputException: If there is no text at all
    """
    text = (raw or "").strip()
    if not text:
        raise EmptyModelOutputException()

    if NON_TECHNICAL_MESSAGE in text:
        return TriageResult.non_technical()

    if SEPARATOR not in text:
        return TriageResult(priority=Priority.MEDIUM, solution=strip_leaked_rationale(text))

    candidate, solution = text.split(SEPARATOR, 1)
    candidate = candidate.strip().upper()

    if candidate not in VALID_PRIORITIES:
        return TriageResult(priority=Priority.MEDIUM, solution=strip_leaked_rationale(text))

    return TriageResult(priority=Priority(candidate), solution=strip_leaked_rationale(solution))
