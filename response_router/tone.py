"""Lexicon-based tone and emotion helpers used by the scorer and blender."""

from __future__ import annotations

from typing import Optional

from .constants import (
    CANDIDATE_TONE_LEXICON,
    COMPATIBLE_TONES,
    CONFLICTING_TONES,
    DEFAULT_INTENT_TONES,
    EMOTION_TONE_RULES,
    EXCITED_WORDS,
    INQUISITIVE_EMOTIONS,
    INTENT_TONES,
    NEGATIVE_EMOTIONS,
    POSITIVE_EMOTIONS,
    SAD_WORDS,
)
from .text_utils import contains_any

EMPHATIC_CAPS_RATIO = 0.5


def detect_candidate_tone(text: Optional[str]) -> str:
    """Classify a reply as supportive/enthusiastic/helpful/humorous/dismissive/questioning/neutral."""
    if not text:
        return "neutral"
    for tone, phrases in CANDIDATE_TONE_LEXICON:
        if contains_any(text, phrases):
            return tone
    if "?" in text:
        return "questioning"
    return "neutral"


def emotion_bucket(emotion: Optional[str]) -> str:
    """Map a free-form emotion label to negative/positive/inquisitive/neutral."""
    e = (emotion or "").strip().lower()
    if not e:
        return "neutral"
    if any(w in e for w in NEGATIVE_EMOTIONS):
        return "negative"
    if any(w in e for w in POSITIVE_EMOTIONS):
        return "positive"
    if any(w in e for w in INQUISITIVE_EMOTIONS):
        return "inquisitive"
    return "neutral"


def detect_user_tone(user_input: Optional[str], emotion: Optional[str] = None) -> str:
    """
    Estimate the user's tone.

    The classifier's emotion label wins when it is decisive; otherwise
    punctuation, shouting and a few giveaway words decide.
    """
    bucket = emotion_bucket(emotion)
    if bucket == "negative":
        return "serious"
    if bucket == "positive":
        return "enthusiastic"
    if bucket == "inquisitive":
        return "questioning"

    text = user_input or ""
    questions = text.count("?")
    exclamations = text.count("!")
    if questions > 0 and questions >= exclamations:
        return "questioning"
    if exclamations > 0:
        return "enthusiastic"

    letters = [c for c in text if c.isalpha()]
    if letters:
        caps = sum(1 for c in letters if c.isupper())
        if len(letters) > 1 and caps > len(letters) * EMPHATIC_CAPS_RATIO:
            return "emphatic"

    if contains_any(text, EXCITED_WORDS):
        return "enthusiastic"
    if contains_any(text, SAD_WORDS):
        return "serious"
    return "neutral"


def is_tone_appropriate_for_emotion(tone: str, emotion: Optional[str]) -> bool:
    rule = EMOTION_TONE_RULES.get(emotion_bucket(emotion))
    if rule is None:
        return True
    accepted, rejected = rule
    if tone in rejected:
        return False
    return not accepted or tone in accepted


def tones_compatible(a: str, b: str) -> bool:
    return a in COMPATIBLE_TONES and b in COMPATIBLE_TONES


def tones_conflicting(a: str, b: str) -> bool:
    return a != b and a in CONFLICTING_TONES and b in CONFLICTING_TONES


def tone_fits_intent(tone: str, intent: Optional[str]) -> bool:
    allowed = INTENT_TONES.get((intent or "").strip().lower(), DEFAULT_INTENT_TONES)
    return tone in allowed
