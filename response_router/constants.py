from __future__ import annotations

"""Shared keyword lists used across the scoring and composition heuristics.

These are classification lexicons (what a text *is*), kept separate from the
phrase banks (what the router *says*).  Everything here is read-only after
import and safe to share between threads.

Multi-word entries are matched on word boundaries, so they are stored without
trailing punctuation.
"""

from typing import Dict, FrozenSet, Tuple

# ---------------------------------------------------------------------------
# Context scoring
# ---------------------------------------------------------------------------

ACKNOWLEDGMENT_PHRASES: Tuple[str, ...] = (
    "i see",
    "i understand",
    "that makes sense",
    "got it",
    "right",
    "i hear you",
    "thanks for",
    "appreciate",
    "good point",
)

TOPIC_TRANSITION_TAG = "topic-transition"

NEGATIVE_EMOTIONS: Tuple[str, ...] = ("sad", "unhappy", "angry", "frustrated", "upset", "hurt", "anxious", "worried")
POSITIVE_EMOTIONS: Tuple[str, ...] = ("happy", "excited", "amused", "joy", "proud")
INQUISITIVE_EMOTIONS: Tuple[str, ...] = ("confused", "curious")

# bucket -> (accepted tones, rejected tones); an empty accepted set means
# "anything not rejected"
EMOTION_TONE_RULES: Dict[str, Tuple[FrozenSet[str], FrozenSet[str]]] = {
    "negative": (frozenset({"supportive", "neutral"}), frozenset()),
    "positive": (frozenset(), frozenset({"dismissive", "questioning"})),
    "inquisitive": (frozenset({"helpful", "neutral"}), frozenset()),
}

# ---------------------------------------------------------------------------
# Persona scoring
# ---------------------------------------------------------------------------

# disposition -> tag that fits it
DISPOSITION_TAGS: Dict[str, str] = {
    "playful": "humorous",
    "supportive": "empathetic",
}

CATCHPHRASES: Tuple[str, ...] = (
    "what do you think",
    "that's just my take on it",
    "i'd love to hear your perspective",
    "makes you think",
    "anyway, that's enough from me",
    "i could be wrong though",
)

HABITUAL_PHRASES: Tuple[str, ...] = (
    "you know",
    "honestly",
    "here's the thing",
    "between us",
    "i've always thought",
    "the thing is",
    "funnily enough",
    "it's funny you mention",
)

PHRASE_HIT_BONUS = 0.05
PHRASE_HIT_CAP = 0.10

# ---------------------------------------------------------------------------
# Tone detection
# ---------------------------------------------------------------------------

# Checked in order; first hit wins.
CANDIDATE_TONE_LEXICON: Tuple[Tuple[str, Tuple[str, ...]], ...] = (
    ("supportive", ("i understand", "i hear you", "i'm here", "that makes sense")),
    ("enthusiastic", ("great", "awesome", "love that", "exciting")),
    ("helpful", ("here's", "you can", "try this", "one way")),
    ("humorous", ("haha", "lol", "funny", "joke")),
    ("dismissive", ("whatever", "who cares", "doesn't matter", "not a big deal")),
)

EXCITED_WORDS: Tuple[str, ...] = ("wow", "amazing", "great", "awesome", "love")
SAD_WORDS: Tuple[str, ...] = ("unfortunately", "sadly", "oh no")

COMPATIBLE_TONES: FrozenSet[str] = frozenset({"neutral", "helpful", "supportive"})
CONFLICTING_TONES: FrozenSet[str] = frozenset({"enthusiastic", "serious"})

INTENT_TONES: Dict[str, FrozenSet[str]] = {
    "question": frozenset({"neutral", "helpful", "questioning"}),
    "advice": frozenset({"helpful", "supportive"}),
    "emotional_support": frozenset({"supportive", "helpful"}),
    "casual": frozenset({"neutral", "humorous", "enthusiastic"}),
    "information": frozenset({"helpful", "neutral"}),
}
DEFAULT_INTENT_TONES: FrozenSet[str] = frozenset({"neutral"})

LENGTH_RATIO_MIN = 0.5
LENGTH_RATIO_MAX = 2.0

# ---------------------------------------------------------------------------
# Coherence scoring
# ---------------------------------------------------------------------------

CONTINUITY_CONNECTORS: Tuple[str, ...] = (
    "that",
    "this",
    "it",
    "these",
    "those",
    "also",
    "another",
    "related",
    "speaking of",
    "speaking about",
    "as i said",
)

LOGICAL_CONNECTIVES: Tuple[str, ...] = (
    "because",
    "since",
    "therefore",
    "however",
    "but",
    "first",
    "next",
    "then",
    "finally",
    "so",
    "which means",
    "that means",
    "in other words",
)

REDUNDANCY_OVERLAP = 0.8

# ---------------------------------------------------------------------------
# Blending
# ---------------------------------------------------------------------------

GREETING_PHRASES: Tuple[str, ...] = ("hello", "hi", "hey", "good morning", "good afternoon", "good evening")
FAREWELL_PHRASES: Tuple[str, ...] = ("bye", "goodbye", "see you", "talk later", "take care")
CLOSING_SIGNALS: Tuple[str, ...] = ("bye", "goodbye", "see you")

BLEND_CONTENT_SEGMENTS = 2
BLEND_RATIO_MIN = 0.4
BLEND_RATIO_MAX = 0.8

# ---------------------------------------------------------------------------
# Complexity
# ---------------------------------------------------------------------------

COMPLEXITY_EMOTION_WORDS: Tuple[str, ...] = ("sad", "happy", "angry", "excited", "worried", "frustrated", "confused")
COMPLEXITY_EMOTION_CAP = 2
MULTI_CLAUSE_CONNECTORS: Tuple[str, ...] = ("and", "but", "however")
LONG_QUESTION_CHARS = 50
WORDS_LONG = 20
WORDS_VERY_LONG = 50
COMPLEXITY_INDICATORS = 5.0

# ---------------------------------------------------------------------------
# Emotional composition
# ---------------------------------------------------------------------------

HUMOR_INAPPROPRIATE_EMOTIONS: Tuple[str, ...] = ("sad", "angry", "frustrated", "upset", "hurt")
