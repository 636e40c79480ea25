"""
Candidate pool and ranking.

The pool is a bounded FIFO: adding past capacity evicts the oldest entry.
Ranking never reorders or mutates the pool; it returns new, scored copies in
a stable descending order (ties keep insertion order).
"""

from __future__ import annotations

from collections import deque
from dataclasses import replace
from typing import Deque, Iterable, List, Optional, Sequence

import numpy as np
from loguru import logger

from .config import MAX_CANDIDATES, ScoreWeights
from .pipeline_types import Candidate, TurnContext
from .scorer import Scorer, overall_score
from .tone import detect_candidate_tone


class CandidatePool:
    def __init__(self, max_candidates: int = MAX_CANDIDATES):
        if max_candidates < 1:
            logger.warning("max_candidates={} is not positive; using 1.", max_candidates)
            max_candidates = 1
        self.max_candidates = max_candidates
        self._items: Deque[Candidate] = deque(maxlen=max_candidates)

    def add(self, candidate: Candidate) -> Candidate:
        if len(self._items) == self.max_candidates:
            evicted = self._items[0]
            logger.debug("Candidate pool full ({}); evicting {}", self.max_candidates, evicted.candidate_id)
        self._items.append(candidate)
        return candidate

    def add_text(self, text: str, source: str = "unknown", tags: Optional[Iterable[str]] = None) -> Candidate:
        return self.add(Candidate(text=text or "", source=source, tags=frozenset(tags or ())))

    def clear(self) -> None:
        self._items.clear()

    def snapshot(self) -> List[Candidate]:
        return list(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items))


def score_candidate(candidate: Candidate, ctx: TurnContext, scorer: Scorer, weights: ScoreWeights) -> Candidate:
    """Scored copy of ``candidate``; the original is left untouched."""
    vec = scorer.score(candidate, ctx)
    return replace(
        candidate,
        emotional_tone=detect_candidate_tone(candidate.text),
        context_score=vec.context,
        persona_score=vec.persona,
        tone_score=vec.tone,
        coherence_score=vec.coherence,
        overall_score=overall_score(vec, weights),
    )


def rank_candidates(
    candidates: Sequence[Candidate],
    ctx: TurnContext,
    scorer: Optional[Scorer] = None,
    weights: Optional[ScoreWeights] = None,
) -> List[Candidate]:
    """
    Score every candidate and return them best-first.

    The sort is stable, so equal overall scores keep the order the
    candidates were added in.
    """
    if not candidates:
        return []
    scorer = scorer or Scorer()
    weights = weights or ScoreWeights()

    scored = [score_candidate(c, ctx, scorer, weights) for c in candidates]
    overall = np.array([c.overall_score for c in scored], dtype="float64")
    order = np.argsort(-overall, kind="stable")
    ranked = [scored[int(i)] for i in order]

    logger.debug(
        "ranked {} candidates; best={} ({:.3f})",
        len(ranked),
        ranked[0].candidate_id,
        ranked[0].overall_score,
    )
    return ranked


def select_best_response(
    candidates: Sequence[Candidate],
    ctx: TurnContext,
    scorer: Optional[Scorer] = None,
    weights: Optional[ScoreWeights] = None,
) -> Optional[Candidate]:
    ranked = rank_candidates(candidates, ctx, scorer, weights)
    return ranked[0] if ranked else None


def get_top_candidates(
    candidates: Sequence[Candidate],
    ctx: TurnContext,
    k: int,
    scorer: Optional[Scorer] = None,
    weights: Optional[ScoreWeights] = None,
) -> List[Candidate]:
    if k <= 0:
        return []
    return rank_candidates(candidates, ctx, scorer, weights)[:k]
