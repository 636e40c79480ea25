# response_router/scorer.py
from __future__ import annotations

from typing import Optional

import numpy as np
from loguru import logger

from .collaborators import Persona, ReferenceResolver
from .config import BASELINE_SCORE, ScoreVector, ScoreWeights
from .constants import (
    ACKNOWLEDGMENT_PHRASES,
    CATCHPHRASES,
    CONTINUITY_CONNECTORS,
    DISPOSITION_TAGS,
    HABITUAL_PHRASES,
    LENGTH_RATIO_MAX,
    LENGTH_RATIO_MIN,
    LOGICAL_CONNECTIVES,
    PHRASE_HIT_BONUS,
    PHRASE_HIT_CAP,
    REDUNDANCY_OVERLAP,
    TOPIC_TRANSITION_TAG,
)
from .pipeline_types import Candidate, TurnContext
from .text_utils import contains_any, contains_phrase, count_hits, count_words, tokens
from .tone import (
    detect_candidate_tone,
    detect_user_tone,
    is_tone_appropriate_for_emotion,
    tone_fits_intent,
    tones_compatible,
    tones_conflicting,
)


def _clamp(x: float) -> float:
    return float(min(1.0, max(0.0, x)))


def has_logical_flow(text: Optional[str]) -> bool:
    return contains_any(text, LOGICAL_CONNECTIVES)


def is_redundant(text: str, history) -> bool:
    """
    True when most of ``text``'s words already appeared in one prior turn.
    """
    words = tokens(text)
    if not words:
        return False
    for prior in history or ():
        seen = set(tokens(prior))
        if not seen:
            continue
        overlap = sum(1 for w in words if w in seen) / len(words)
        if overlap >= REDUNDANCY_OVERLAP:
            return True
    return False


class Scorer:
    """
    Four-dimensional heuristic scoring of one candidate reply.

    ``score`` is pure: it reads the candidate and turn context and returns a
    new :class:`ScoreVector`; nothing is written back to the candidate.
    Collaborators are optional and their bonuses are skipped when absent.
    """

    def __init__(self, persona: Optional[Persona] = None, resolver: Optional[ReferenceResolver] = None):
        self.persona = persona
        self.resolver = resolver

    # ------------------------------------------------------------------
    # context
    # ------------------------------------------------------------------

    def score_context(self, candidate: Candidate, ctx: TurnContext) -> float:
        text = candidate.text
        score = BASELINE_SCORE

        if ctx.topic and ctx.topic.strip():
            if ctx.topic.strip().lower() in text.lower():
                score += 0.2
            if candidate.has_tag(TOPIC_TRANSITION_TAG):
                score += 0.1

        if ctx.emotion and ctx.emotion.strip():
            if is_tone_appropriate_for_emotion(detect_candidate_tone(text), ctx.emotion):
                score += 0.2
            else:
                score -= 0.1

        if "?" in (ctx.user_input or "") and "?" in text:
            score += 0.1

        if contains_any(text, ACKNOWLEDGMENT_PHRASES):
            score += 0.1

        return _clamp(score)

    # ------------------------------------------------------------------
    # persona
    # ------------------------------------------------------------------

    def score_persona(self, candidate: Candidate) -> float:
        if self.persona is None:
            return BASELINE_SCORE

        text = candidate.text
        score = BASELINE_SCORE
        disposition = (self.persona.disposition or "").lower()

        wanted_tag = DISPOSITION_TAGS.get(disposition)
        if wanted_tag and candidate.has_tag(wanted_tag):
            score += 0.2

        if disposition == "curious" and "?" in text:
            score += 0.1

        if "?" in text and self.persona.should_ask_question():
            score += 0.1

        hits = count_hits(text, CATCHPHRASES) + count_hits(text, HABITUAL_PHRASES)
        score += min(PHRASE_HIT_CAP, hits * PHRASE_HIT_BONUS)

        return _clamp(score)

    # ------------------------------------------------------------------
    # tone
    # ------------------------------------------------------------------

    def score_tone(self, candidate: Candidate, ctx: TurnContext) -> float:
        text = candidate.text
        score = BASELINE_SCORE

        user_tone = detect_user_tone(ctx.user_input, ctx.emotion)
        reply_tone = detect_candidate_tone(text)

        if user_tone == reply_tone:
            score += 0.3
        elif tones_compatible(user_tone, reply_tone):
            score += 0.15
        elif tones_conflicting(user_tone, reply_tone):
            score -= 0.2
        # tones in neither table: no bonus, no penalty

        if ctx.intent and tone_fits_intent(reply_tone, ctx.intent):
            score += 0.2

        ratio = count_words(text) / max(count_words(ctx.user_input), 1)
        if LENGTH_RATIO_MIN <= ratio <= LENGTH_RATIO_MAX:
            score += 0.1

        return _clamp(score)

    # ------------------------------------------------------------------
    # coherence
    # ------------------------------------------------------------------

    def score_coherence(self, candidate: Candidate, ctx: TurnContext) -> float:
        text = candidate.text
        score = BASELINE_SCORE

        previous = ctx.previous_turn
        if previous and previous.strip() and contains_any(text, CONTINUITY_CONNECTORS):
            score += 0.2

        if self.resolver is not None:
            resolved = self.resolver.resolve(text)
            if resolved and resolved != text:
                score += 0.1

        if has_logical_flow(text):
            score += 0.2

        if is_redundant(text, ctx.history):
            score -= 0.1

        return _clamp(score)

    # ------------------------------------------------------------------
    # combined
    # ------------------------------------------------------------------

    def score(self, candidate: Optional[Candidate], ctx: Optional[TurnContext] = None) -> ScoreVector:
        if candidate is None or not (candidate.text or "").strip():
            return ScoreVector.neutral()
        ctx = ctx or TurnContext()

        vector = ScoreVector(
            context=self.score_context(candidate, ctx),
            persona=self.score_persona(candidate),
            tone=self.score_tone(candidate, ctx),
            coherence=self.score_coherence(candidate, ctx),
        )
        logger.debug("scored {} ({}): {}", candidate.candidate_id, candidate.source, vector.as_tuple())
        return vector


def overall_score(scores: ScoreVector, weights: ScoreWeights) -> float:
    """Weighted sum of the four scores; stays in [0, 1] because weights sum to 1."""
    value = float(np.dot(np.asarray(scores.as_tuple()), np.asarray(weights.as_tuple())))
    return _clamp(value)
