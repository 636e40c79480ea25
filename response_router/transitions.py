"""
Connective phrases between discourse topics.

A move between two topics is classified as:

* same topic      -> continuation phrase, smoothness 0.9
* related topics  -> related template,    smoothness 0.8
* anything else   -> topic-shift template, smoothness 0.6

"Related" is a fixed, symmetric table of topic pairs from the phrase banks.
The choice among equivalent phrasings goes through the injected picker.
"""

from __future__ import annotations

from typing import FrozenSet, Optional, Tuple

from loguru import logger

from .config import PhraseBanks, TransitionPhrase
from .phrase_bank import load_phrase_banks
from .sampling import Picker, default_picker
from .text_utils import attach, clean_text

DEFAULT_TOPIC = "general"

SAME_TOPIC_SMOOTHNESS = 0.9
RELATED_TOPIC_SMOOTHNESS = 0.8
SHIFT_SMOOTHNESS = 0.6


def _norm_topic(topic: Optional[str]) -> str:
    t = clean_text(topic).lower()
    return t or DEFAULT_TOPIC


class TransitionGenerator:
    def __init__(self, phrase_banks: Optional[PhraseBanks] = None, picker: Optional[Picker] = None):
        self.phrases = phrase_banks if phrase_banks is not None else load_phrase_banks()
        self.picker = picker if picker is not None else default_picker()
        self._related: FrozenSet[Tuple[str, str]] = frozenset(
            (a.lower(), b.lower()) for a, b in self.phrases.related_pairs
        )

    def are_related(self, a: str, b: str) -> bool:
        a, b = a.lower(), b.lower()
        return (a, b) in self._related or (b, a) in self._related

    def generate(self, from_topic: Optional[str], to_topic: Optional[str]) -> TransitionPhrase:
        src, dst = _norm_topic(from_topic), _norm_topic(to_topic)

        if src == dst:
            text = self.picker.pick(self.phrases.continuation)
            smoothness = SAME_TOPIC_SMOOTHNESS
        elif self.are_related(src, dst):
            template = self.picker.pick(self.phrases.related_templates)
            text = template.format(from_topic=src, to_topic=dst)
            smoothness = RELATED_TOPIC_SMOOTHNESS
        else:
            template = self.picker.pick(self.phrases.shift_templates)
            text = template.format(from_topic=src, to_topic=dst)
            smoothness = SHIFT_SMOOTHNESS

        logger.debug("transition {} -> {} ({}): {!r}", src, dst, smoothness, text)
        return TransitionPhrase(text=text, from_topic=src, to_topic=dst, smoothness=smoothness)

    def strip_leading_filler(self, text: str) -> str:
        """Drop one leading article/filler ('the ', 'so ', 'however, ', ...)."""
        stripped = text.lstrip()
        lower = stripped.lower()
        for filler in self.phrases.leading_fillers:
            if lower.startswith(filler.lower()):
                return stripped[len(filler):].lstrip()
        return stripped

    def create_bridge(
        self,
        from_topic: Optional[str],
        to_topic: Optional[str],
        from_text: str,
        to_text: str,
    ) -> str:
        """
        Join two passages about (possibly) different topics:

          <from_text>[. <closing connective>] <transition> <to_text minus filler>
        """
        transition = self.generate(from_topic, to_topic)
        bridge = transition.text

        tail = self.strip_leading_filler(clean_text(to_text))
        if tail:
            bridge = attach(bridge, tail)

        head = clean_text(from_text)
        if not head:
            return bridge
        if head.endswith(("?", "!")):
            return f"{head} {bridge}"
        closing = self.picker.pick(self.phrases.closing_connectives)
        return f"{head.rstrip('.')}. {attach(closing, bridge)}"

    def emotional_transition(self, position: int, total: int) -> str:
        """Lead-in for the part at ``position`` (0-based) of ``total`` emotional parts."""
        if position == total - 1:
            return self.picker.pick(self.phrases.before_question)
        return self.picker.pick(self.phrases.between_parts)

    def tone_transition(self, from_tone: str, to_tone: str) -> str:
        for src, dst, phrase in self.phrases.tone_transitions:
            if src == from_tone and dst == to_tone:
                return phrase
        return self.phrases.default_tone_transition
