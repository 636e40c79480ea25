from __future__ import annotations

import math
import os
from pathlib import Path
from string import Formatter
from typing import Any, Dict, List, Optional, Tuple

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .pipeline_types import ResponseType


# ---------------------------
# Paths
# ---------------------------

PACKAGE_ROOT = Path(__file__).resolve().parent

DATA_DIR = PACKAGE_ROOT / "data"
DEFAULT_PHRASE_BANK_PATH = DATA_DIR / "phrase_banks.json"
PHRASE_BANK_PATH = Path(os.getenv("ROUTER_PHRASE_BANK", str(DEFAULT_PHRASE_BANK_PATH)))


# ---------------------------
# Candidate pool
# ---------------------------

DEFAULT_MAX_CANDIDATES = 10
MAX_CANDIDATES = int(os.getenv("ROUTER_MAX_CANDIDATES", str(DEFAULT_MAX_CANDIDATES)))


# ---------------------------
# Phrase sampling
# ---------------------------

_seed_env = os.getenv("ROUTER_RANDOM_SEED")
RANDOM_SEED: Optional[int] = int(_seed_env) if _seed_env else None


# ---------------------------
# Scoring weights
# ---------------------------

DEFAULT_CONTEXT_WEIGHT = 0.35
DEFAULT_PERSONA_WEIGHT = 0.25
DEFAULT_TONE_WEIGHT = 0.25
DEFAULT_COHERENCE_WEIGHT = 0.15

BASELINE_SCORE = 0.5

WEIGHT_FIELDS = ("context", "persona", "tone", "coherence")
_WEIGHT_GRID = float(2 ** 52)

TEMPLATE_FIELDS = frozenset({"from_topic", "to_topic"})


# ---------------------------
# Pydantic models shared around the package
# ---------------------------

class ScoreWeights(BaseModel):
    """
    Relative importance of the four scoring dimensions.

    Values are re-normalised to sum to 1.0 every time a model is built, so
    ``ScoreWeights(context=2, persona=1, tone=1, coherence=0)`` is a valid way
    to say "context counts double".  A total of zero, or any negative or
    non-finite weight, is a configuration error and falls back to equal
    weighting.
    """

    model_config = ConfigDict(frozen=True)

    context: float = DEFAULT_CONTEXT_WEIGHT
    persona: float = DEFAULT_PERSONA_WEIGHT
    tone: float = DEFAULT_TONE_WEIGHT
    coherence: float = DEFAULT_COHERENCE_WEIGHT

    @model_validator(mode="before")
    @classmethod
    def _normalise(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        raw = {
            "context": data.get("context", DEFAULT_CONTEXT_WEIGHT),
            "persona": data.get("persona", DEFAULT_PERSONA_WEIGHT),
            "tone": data.get("tone", DEFAULT_TONE_WEIGHT),
            "coherence": data.get("coherence", DEFAULT_COHERENCE_WEIGHT),
        }
        values = {k: float(v) for k, v in raw.items()}
        total = sum(values.values())
        bad = any(v < 0 or not math.isfinite(v) for v in values.values())
        if bad or total <= 0 or not math.isfinite(total):
            logger.warning("Invalid score weights {}; falling back to equal weighting.", values)
            return {k: 0.25 for k in WEIGHT_FIELDS}
        # First three snapped down to a 2**-52 grid, the last takes the remainder;
        # every partial sum is then exact, so the four add up to exactly 1.0 in
        # any order.
        head = [math.floor(values[k] / total * _WEIGHT_GRID) / _WEIGHT_GRID for k in WEIGHT_FIELDS[:-1]]
        normalised = dict(zip(WEIGHT_FIELDS[:-1], head))
        normalised[WEIGHT_FIELDS[-1]] = 1.0 - sum(head)
        return normalised

    @classmethod
    def equal(cls) -> "ScoreWeights":
        return cls(context=1.0, persona=1.0, tone=1.0, coherence=1.0)

    def with_updates(self, **changes: float) -> "ScoreWeights":
        """Return a new, re-normalised model with some weights replaced."""
        unknown = set(changes) - set(WEIGHT_FIELDS)
        if unknown:
            raise ValueError(f"Unknown weight names: {sorted(unknown)}")
        merged = self.model_dump()
        merged.update(changes)
        return ScoreWeights(**merged)

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.context, self.persona, self.tone, self.coherence)


class ScoreVector(BaseModel):
    """Per-dimension scores of one candidate, each clamped to [0, 1]."""

    model_config = ConfigDict(frozen=True)

    context: float = Field(default=BASELINE_SCORE, ge=0.0, le=1.0)
    persona: float = Field(default=BASELINE_SCORE, ge=0.0, le=1.0)
    tone: float = Field(default=BASELINE_SCORE, ge=0.0, le=1.0)
    coherence: float = Field(default=BASELINE_SCORE, ge=0.0, le=1.0)

    @classmethod
    def neutral(cls) -> "ScoreVector":
        return cls()

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.context, self.persona, self.tone, self.coherence)


class BlendResult(BaseModel):
    """
    Output of merging several full candidate texts.
    """

    text: str
    sources: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    score: float = Field(ge=0.0, le=1.0)


class CombinedResponse(BaseModel):
    """
    Output of composing typed fragments in priority order.
    """

    text: str
    types_used: List[ResponseType] = Field(default_factory=list)
    transitions: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)
    coherence_score: float = Field(ge=0.0, le=1.0)


class TransitionPhrase(BaseModel):
    """A connective clause between two topics, with how smooth the move is."""

    text: str
    from_topic: str
    to_topic: str
    smoothness: float = Field(ge=0.0, le=1.0)


class PhraseBanks(BaseModel):
    """
    Wording tables used by the composition steps.

    Loaded once from JSON (see :mod:`response_router.phrase_bank`) and shared
    read-only.  Templates may use ``{from_topic}`` and ``{to_topic}``.
    """

    model_config = ConfigDict(frozen=True)

    continuation: Tuple[str, ...] = Field(min_length=1)
    related_templates: Tuple[str, ...] = Field(min_length=1)
    shift_templates: Tuple[str, ...] = Field(min_length=1)
    related_pairs: Tuple[Tuple[str, str], ...] = Field(min_length=1)
    closing_connectives: Tuple[str, ...] = Field(min_length=1)
    leading_fillers: Tuple[str, ...] = Field(min_length=1)
    elaborations: Tuple[str, ...] = Field(min_length=1)
    between_parts: Tuple[str, ...] = Field(min_length=1)
    before_question: Tuple[str, ...] = Field(min_length=1)
    tone_transitions: Tuple[Tuple[str, str, str], ...] = Field(min_length=1)
    default_tone_transition: str = "Also,"

    @field_validator("related_templates", "shift_templates")
    @classmethod
    def _known_placeholders(cls, templates: Tuple[str, ...]) -> Tuple[str, ...]:
        for t in templates:
            try:
                fields = {name for _, name, _, _ in Formatter().parse(t) if name is not None}
            except ValueError as e:
                raise ValueError(f"malformed template {t!r}: {e}") from e
            unknown = fields - TEMPLATE_FIELDS
            if unknown:
                raise ValueError(f"template {t!r} uses unknown placeholders {sorted(unknown)}")
        return templates
