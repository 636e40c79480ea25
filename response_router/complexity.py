"""
Matching reply length to how involved the user's message was.

``estimate_complexity`` turns the user's input into a number in [0, 1];
``ComplexityAdapter.adjust`` then aims the reply at
``words * (0.5 + complexity)``: trimming trailing sentences when the reply is
too long, adding one elaboration (and maybe one persona question) when it is
too short.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from loguru import logger

from .collaborators import Persona
from .config import PhraseBanks
from .constants import (
    COMPLEXITY_EMOTION_CAP,
    COMPLEXITY_EMOTION_WORDS,
    COMPLEXITY_INDICATORS,
    LONG_QUESTION_CHARS,
    MULTI_CLAUSE_CONNECTORS,
    WORDS_LONG,
    WORDS_VERY_LONG,
)
from .phrase_bank import load_phrase_banks
from .text_utils import clean_text, contains_any, count_hits, count_words, ensure_terminal, join_sentences, split_sentences


def estimate_complexity(user_input: Optional[str]) -> float:
    text = clean_text(user_input)
    if not text:
        return 0.0

    indicators = min(COMPLEXITY_EMOTION_CAP, count_hits(text, COMPLEXITY_EMOTION_WORDS))

    if contains_any(text, MULTI_CLAUSE_CONNECTORS):
        indicators += 1

    if "?" in text and len(text) > LONG_QUESTION_CHARS:
        indicators += 1

    words = count_words(text)
    if words > WORDS_LONG:
        indicators += 1
    if words > WORDS_VERY_LONG:
        indicators += 1

    return min(1.0, indicators / COMPLEXITY_INDICATORS)


def target_words(current: int, complexity: float) -> int:
    c = min(1.0, max(0.0, complexity))
    return int(current * (0.5 + c))


class ComplexityAdapter:
    def __init__(self, phrase_banks: Optional[PhraseBanks] = None, persona: Optional[Persona] = None):
        self.phrases = phrase_banks if phrase_banks is not None else load_phrase_banks()
        self.persona = persona
        # shortest first; ties broken by character length
        self._elaborations: List[Tuple[int, int, str]] = sorted(
            (count_words(e), len(e), e) for e in self.phrases.elaborations
        )

    def simplify(self, text: str, target: int) -> str:
        """
        Keep leading sentences while the running word count stays within
        ``target``.  The first sentence is always kept.
        """
        sentences = split_sentences(text)
        kept: List[str] = []
        total = 0
        for s in sentences:
            n = count_words(s)
            if kept and total + n > target:
                break
            kept.append(s)
            total += n
        return join_sentences(kept)

    def pick_elaboration(self, gap: int) -> str:
        """Longest elaboration that fits in ``gap`` words, else the shortest."""
        fitting = [e for e in self._elaborations if e[0] <= gap]
        chosen = fitting[-1] if fitting else self._elaborations[0]
        return chosen[2]

    def elaborate(self, text: str, target: int) -> str:
        current = count_words(text)
        out = [ensure_terminal(text), self.pick_elaboration(target - current)]
        if self.persona is not None and self.persona.should_ask_question():
            question = clean_text(self.persona.catchphrase())
            if question:
                out.append(ensure_terminal(question))
        return " ".join(out)

    def adjust(self, response_text: Optional[str], complexity: float) -> str:
        text = clean_text(response_text)
        if not text:
            return ""

        current = count_words(text)
        target = target_words(current, complexity)

        if current > target:
            adjusted = self.simplify(text, target)
            logger.debug("simplified reply {} -> {} words (target {})", current, count_words(adjusted), target)
        elif current < target:
            adjusted = self.elaborate(text, target)
            logger.debug("elaborated reply {} -> {} words (target {})", current, count_words(adjusted), target)
        else:
            adjusted = ensure_terminal(text)
        return adjusted
