"""
Per-turn facade over scoring, selection and composition.

One :class:`ResponseRouter` holds everything that is mutable for a turn (the
candidate pool and the weights in use) next to the read-only pieces (phrase
banks, collaborators).  Create one per conversation turn; do not share an
instance between concurrent conversations.

Typical use::

    router = ResponseRouter(persona=persona)
    router.add_candidate("That's great!", source="smalltalk")
    router.add_candidate("What happened?", source="inquiry", tags=["question"])
    best = router.select_best_response(TurnContext(topic="work", emotion="happy"))
    reply = router.adjust_complexity(best.text, user_input)
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional, Sequence

from loguru import logger

from .blender import Blender
from .collaborators import Persona, ReferenceResolver
from .complexity import ComplexityAdapter, estimate_complexity
from .config import MAX_CANDIDATES, BlendResult, CombinedResponse, PhraseBanks, ScoreWeights
from .emotional import EmotionalComposer
from .phrase_bank import load_phrase_banks
from .pipeline_types import Candidate, TurnContext
from .sampling import Picker, default_picker
from .scorer import Scorer
from .selector import CandidatePool, rank_candidates
from .transitions import TransitionGenerator
from .type_combiner import SegmentsInput, TypeCombiner


class ResponseRouter:
    def __init__(
        self,
        weights: Optional[ScoreWeights] = None,
        max_candidates: int = MAX_CANDIDATES,
        persona: Optional[Persona] = None,
        resolver: Optional[ReferenceResolver] = None,
        picker: Optional[Picker] = None,
        phrase_banks: Optional[PhraseBanks] = None,
    ):
        self._weights = weights or ScoreWeights()
        self.pool = CandidatePool(max_candidates)
        self.persona = persona
        self.resolver = resolver

        phrases = phrase_banks if phrase_banks is not None else load_phrase_banks()
        picker = picker if picker is not None else default_picker()

        self.scorer = Scorer(persona=persona, resolver=resolver)
        self.transitions = TransitionGenerator(phrases, picker)
        self.blender = Blender(persona=persona)
        self.combiner = TypeCombiner(self.transitions, persona=persona)
        self.adapter = ComplexityAdapter(phrases, persona=persona)
        self.emotional = EmotionalComposer(self.transitions, persona=persona)

        self._last_ranked: List[Candidate] = []

    # ---------------------------------------------------------------------
    # Weights
    # ---------------------------------------------------------------------

    @property
    def weights(self) -> ScoreWeights:
        return self._weights

    def set_weights(self, context: float, persona: float, tone: float, coherence: float) -> ScoreWeights:
        self._weights = ScoreWeights(context=context, persona=persona, tone=tone, coherence=coherence)
        logger.debug("weights set to {}", self._weights.as_tuple())
        return self._weights

    # ---------------------------------------------------------------------
    # Candidates
    # ---------------------------------------------------------------------

    def add_candidate(self, text: str, source: str = "unknown", tags: Optional[Iterable[str]] = None) -> Candidate:
        return self.pool.add_text(text, source=source, tags=tags)

    def clear_candidates(self) -> None:
        self.pool.clear()
        self._last_ranked = []

    @property
    def candidates(self) -> List[Candidate]:
        return self.pool.snapshot()

    def rank(self, ctx: TurnContext) -> List[Candidate]:
        self._last_ranked = rank_candidates(self.pool.snapshot(), ctx, self.scorer, self._weights)
        return list(self._last_ranked)

    def select_best_response(self, ctx: TurnContext) -> Optional[Candidate]:
        ranked = self.rank(ctx)
        if not ranked:
            logger.debug("no candidates to select from")
            return None
        return ranked[0]

    def get_top_candidates(self, ctx: TurnContext, n: int) -> List[Candidate]:
        if n <= 0:
            return []
        return self.rank(ctx)[:n]

    # ---------------------------------------------------------------------
    # Composition
    # ---------------------------------------------------------------------

    def blend(self, texts: Sequence[str], ctx: Optional[TurnContext] = None) -> BlendResult:
        return self.blender.blend(texts, ctx)

    def combine(self, segments: SegmentsInput, ctx: Optional[TurnContext] = None) -> CombinedResponse:
        return self.combiner.combine(segments, ctx)

    def bridge(self, from_topic: Optional[str], to_topic: Optional[str], from_text: str, to_text: str) -> str:
        return self.transitions.create_bridge(from_topic, to_topic, from_text, to_text)

    def adjust_complexity(self, response_text: str, user_input: str) -> str:
        return self.adapter.adjust(response_text, estimate_complexity(user_input))

    def create_mixed_emotional_response(
        self,
        primary: str = "",
        support: str = "",
        humor: str = "",
        inquiry: str = "",
        user_emotion: Optional[str] = None,
    ) -> str:
        return self.emotional.create_mixed_emotional_response(primary, support, humor, inquiry, user_emotion)

    def blend_emotional_tones(
        self,
        sad: str = "",
        supportive: str = "",
        hopeful: str = "",
        user_emotion: Optional[str] = None,
    ) -> str:
        return self.emotional.blend_emotional_tones(sad, supportive, hopeful, user_emotion)

    # ---------------------------------------------------------------------
    # Diagnostics
    # ---------------------------------------------------------------------

    def statistics(self) -> Dict[str, Any]:
        stats: Dict[str, Any] = {
            "candidate_count": len(self.pool),
            "max_candidates": self.pool.max_candidates,
            "weights": self._weights.model_dump(),
        }
        if self._last_ranked:
            scores = [c.overall_score for c in self._last_ranked]
            stats["average_score"] = sum(scores) / len(scores)
            stats["best_score"] = max(scores)
        return stats
