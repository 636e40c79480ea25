"""
Merging several full candidate replies into one.

Assembly order is greeting -> main content -> question -> farewell:

1) a greeting segment, only when the user did not just greet us;
2) the two longest segments that are neither greeting nor farewell;
3) a question-bearing segment if nothing assembled so far asks one;
4) a farewell segment, only when the user is signing off.

The assembled text is then cleaned (whitespace collapsed, repeated sentences
dropped case-insensitively, first occurrence kept) and optionally styled by
the persona.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from loguru import logger

from .collaborators import Persona
from .config import BlendResult
from .constants import (
    BLEND_CONTENT_SEGMENTS,
    BLEND_RATIO_MAX,
    BLEND_RATIO_MIN,
    CLOSING_SIGNALS,
    FAREWELL_PHRASES,
    GREETING_PHRASES,
)
from .pipeline_types import TurnContext
from .scorer import has_logical_flow
from .text_utils import contains_any, count_words, dedupe_text
from .tone import detect_candidate_tone


def is_greeting(text: Optional[str]) -> bool:
    return contains_any(text, GREETING_PHRASES)


def is_farewell(text: Optional[str]) -> bool:
    return contains_any(text, FAREWELL_PHRASES)


def signals_closing(text: Optional[str]) -> bool:
    return contains_any(text, CLOSING_SIGNALS)


def clean_blended(text: str) -> str:
    """Collapse whitespace, drop repeated sentences, end with punctuation."""
    # Sentences keep their own "?" or "!" rather than being rejoined with ". ",
    # otherwise the question step and the question bonus never show.
    return dedupe_text(text)


@dataclass
class _Segment:
    index: int
    text: str
    tone: str
    length: int
    has_question: bool
    has_greeting: bool
    has_farewell: bool


def _analyze(index: int, text: str) -> _Segment:
    return _Segment(
        index=index,
        text=text,
        tone=detect_candidate_tone(text),
        length=count_words(text),
        has_question="?" in text,
        has_greeting=is_greeting(text),
        has_farewell=is_farewell(text),
    )


class Blender:
    def __init__(self, persona: Optional[Persona] = None):
        self.persona = persona

    def blend(self, texts: Optional[Sequence[str]], ctx: Optional[TurnContext] = None) -> BlendResult:
        ctx = ctx or TurnContext()
        inputs = [t for t in (texts or []) if t and t.strip()]

        if not inputs:
            return BlendResult(text="", sources=[], metadata={"original_count": 0}, score=0.0)
        if len(inputs) == 1:
            only = inputs[0]
            return BlendResult(
                text=only,
                sources=["single"],
                metadata={"original_count": 1, "tone": detect_candidate_tone(only)},
                score=1.0,
            )

        segments = [_analyze(i, t) for i, t in enumerate(inputs)]
        parts: List[str] = []
        sources: List[str] = []
        used = set()

        def take(seg: _Segment, label: str) -> None:
            parts.append(seg.text)
            sources.append(label)
            used.add(seg.index)

        # 1) greeting
        if not is_greeting(ctx.user_input):
            greeting = next((s for s in segments if s.has_greeting), None)
            if greeting is not None:
                take(greeting, "greeting")

        # 2) main content, longest first (stable for equal lengths)
        by_length = sorted(segments, key=lambda s: -s.length)
        content = [s for s in by_length if not s.has_greeting and not s.has_farewell and s.index not in used]
        for n, seg in enumerate(content[:BLEND_CONTENT_SEGMENTS]):
            take(seg, f"content_{n}")

        # 3) question
        if not any("?" in p for p in parts):
            question = next((s for s in by_length if s.has_question and s.index not in used), None)
            if question is not None:
                take(question, "question")

        # 4) farewell
        if signals_closing(ctx.user_input):
            farewell = next((s for s in segments if s.has_farewell and s.index not in used), None)
            if farewell is not None:
                take(farewell, "farewell")

        if not parts:
            # every input was a greeting/farewell the turn did not call for
            take(by_length[0], "fallback")

        result = clean_blended(" ".join(parts))
        if self.persona is not None:
            # styling may re-introduce a sentence that is already there
            result = clean_blended(self.persona.style(result))

        score = blend_score(segments, result)
        logger.debug("blended {} inputs via {} -> score {:.2f}", len(inputs), sources, score)

        metadata = {
            "tone": detect_candidate_tone(result),
            "original_count": len(inputs),
            "sources": list(sources),
        }
        return BlendResult(text=result, sources=sources, metadata=metadata, score=score)


def blend_score(segments: Sequence[_Segment], result: str) -> float:
    score = 0.5

    total = sum(s.length for s in segments)
    ratio = count_words(result) / max(total, 1)
    if BLEND_RATIO_MIN <= ratio <= BLEND_RATIO_MAX:
        score += 0.2

    if "?" in result:
        score += 0.1

    if has_logical_flow(result):
        score += 0.1

    if is_greeting(result) or is_farewell(result):
        score += 0.1

    return min(1.0, score)
