from __future__ import annotations

from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

from loguru import logger

from .collaborators import Persona
from .config import CombinedResponse
from .pipeline_types import ResponseType, TurnContext, TypedSegment
from .text_utils import attach, clean_text, dedupe_text, fresh_sentences
from .transitions import TransitionGenerator

# Emotions are addressed first, disagreement last.
TYPE_PRIORITY: Dict[ResponseType, int] = {
    ResponseType.EMOTIONAL: 10,
    ResponseType.INQUIRY: 9,
    ResponseType.INFORMATIONAL: 8,
    ResponseType.ADVISORY: 7,
    ResponseType.AFFIRMATIVE: 6,
    ResponseType.NARRATIVE: 5,
    ResponseType.HUMOROUS: 4,
    ResponseType.DISSENTIVE: 3,
}
DEFAULT_PRIORITY = 1

SegmentsInput = Union[Mapping[ResponseType, str], Iterable[TypedSegment]]


def type_priority(rtype: ResponseType) -> int:
    return TYPE_PRIORITY.get(rtype, DEFAULT_PRIORITY)


def _coerce_type(rtype: Any) -> Optional[ResponseType]:
    if isinstance(rtype, ResponseType):
        return rtype
    try:
        return ResponseType(str(rtype).strip().lower())
    except ValueError:
        return None


def _as_pairs(segments: Optional[SegmentsInput]) -> List[Tuple[ResponseType, str]]:
    """
    Accept a {type: text} mapping or TypedSegments; first text per type wins.
    Unknown type labels are skipped with a warning.
    """
    if not segments:
        return []
    if isinstance(segments, Mapping):
        items = list(segments.items())
    else:
        items = [(s.type, s.text) for s in segments]

    pairs: List[Tuple[ResponseType, str]] = []
    seen = set()
    for label, text in items:
        rtype = _coerce_type(label)
        if rtype is None:
            logger.warning("Unknown response type {!r}; fragment skipped.", label)
            continue
        if rtype in seen:
            continue
        seen.add(rtype)
        pairs.append((rtype, text))
    return pairs


def multi_type_coherence(types: List[ResponseType], transitions: List[str]) -> float:
    score = 0.5
    if transitions:
        score += 0.2
    if ResponseType.EMOTIONAL in types and ResponseType.INFORMATIONAL in types:
        score += 0.1
    if ResponseType.INQUIRY in types and ResponseType.ADVISORY in types:
        score += 0.1
    return min(1.0, score)


class TypeCombiner:
    """
    Composes typed fragments into one reply: highest-priority type first,
    a transition phrase before every fragment after the first.
    """

    def __init__(self, transitions: Optional[TransitionGenerator] = None, persona: Optional[Persona] = None):
        self.transitions = transitions if transitions is not None else TransitionGenerator()
        self.persona = persona

    def combine(self, segments: Optional[SegmentsInput], ctx: Optional[TurnContext] = None) -> CombinedResponse:
        pairs = _as_pairs(segments)
        # sorted() is stable, so equal priorities keep input order
        pairs.sort(key=lambda p: -type_priority(p[0]))

        used: List[ResponseType] = []
        transitions: List[str] = []
        combined = ""
        prev: Optional[ResponseType] = None
        seen: Set[str] = set()

        for rtype, text in pairs:
            # sentences already said by a higher-priority fragment are dropped
            text = fresh_sentences(text, seen)
            if not text:
                continue
            if prev is None:
                combined = text
            else:
                phrase = self.transitions.generate(prev.value, rtype.value).text
                transitions.append(phrase)
                combined = f"{combined} {attach(phrase, text)}"
            used.append(rtype)
            prev = rtype

        if not used:
            return CombinedResponse(text="", types_used=[], transitions=[], metadata={"type_count": 0}, coherence_score=0.0)

        if self.persona is not None:
            combined = clean_text(self.persona.style(combined))
        combined = dedupe_text(combined)

        coherence = multi_type_coherence(used, transitions)
        logger.debug("combined types {} with {} transitions", [t.value for t in used], len(transitions))

        return CombinedResponse(
            text=combined,
            types_used=used,
            transitions=transitions,
            metadata={
                "type_count": len(used),
                "types": [t.value for t in used],
                "has_transition": bool(transitions),
                "topic": (ctx.topic if ctx else None),
            },
            coherence_score=coherence,
        )
