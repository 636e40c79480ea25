"""Typed containers shared across pipeline modules."""

from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Optional, Tuple


class ResponseType(str, Enum):
    """Kinds of response fragment the type combiner knows how to order."""

    INFORMATIONAL = "informational"
    EMOTIONAL = "emotional"
    HUMOROUS = "humorous"
    INQUIRY = "inquiry"
    ADVISORY = "advisory"
    NARRATIVE = "narrative"
    AFFIRMATIVE = "affirmative"
    DISSENTIVE = "dissentive"


@dataclass(frozen=True)
class TypedSegment:
    """One response fragment paired with its type."""

    type: ResponseType
    text: str


@dataclass(frozen=True)
class TurnContext:
    """
    Everything the scorer and composers know about the current turn.

    ``topic``, ``emotion`` and ``intent`` come from upstream classifiers and
    may be absent.  ``history`` holds prior turn texts, oldest first.
    """

    user_input: str = ""
    topic: Optional[str] = None
    emotion: Optional[str] = None
    intent: Optional[str] = None
    history: Tuple[str, ...] = ()

    @property
    def previous_turn(self) -> Optional[str]:
        return self.history[-1] if self.history else None


@dataclass
class Candidate:
    """A draft reply proposed by an upstream generator for this turn."""

    text: str
    source: str = "unknown"
    tags: FrozenSet[str] = frozenset()
    emotional_tone: str = "neutral"
    intent_type: str = "general"
    candidate_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_at: float = field(default_factory=time.time)
    context_score: float = 0.5
    persona_score: float = 0.5
    tone_score: float = 0.5
    coherence_score: float = 0.5
    overall_score: float = 0.5

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags
