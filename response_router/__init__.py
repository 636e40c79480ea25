"""Multi-criteria selection and composition of candidate replies for one conversational turn."""

from .config import BlendResult, CombinedResponse, ScoreVector, ScoreWeights, TransitionPhrase
from .pipeline_types import Candidate, ResponseType, TurnContext, TypedSegment
from .router import ResponseRouter

__all__ = [
    "BlendResult",
    "Candidate",
    "CombinedResponse",
    "ResponseRouter",
    "ResponseType",
    "ScoreVector",
    "ScoreWeights",
    "TransitionPhrase",
    "TurnContext",
    "TypedSegment",
]
