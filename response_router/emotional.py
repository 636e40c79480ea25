from __future__ import annotations

from typing import List, Optional, Set

from .collaborators import Persona
from .constants import HUMOR_INAPPROPRIATE_EMOTIONS
from .text_utils import attach, dedupe_text, fresh_sentences
from .transitions import TransitionGenerator


def is_humor_appropriate(emotion: Optional[str]) -> bool:
    e = (emotion or "").lower()
    return not any(w in e for w in HUMOR_INAPPROPRIATE_EMOTIONS)


class EmotionalComposer:
    """
    Builds replies that carry more than one emotional register, e.g. support
    followed by information and a closing question.
    """

    def __init__(self, transitions: Optional[TransitionGenerator] = None, persona: Optional[Persona] = None):
        self.transitions = transitions if transitions is not None else TransitionGenerator()
        self.persona = persona

    def _finish(self, text: str) -> str:
        if text and self.persona is not None:
            text = self.persona.style(text)
        return dedupe_text(text)

    def create_mixed_emotional_response(
        self,
        primary: str = "",
        support: str = "",
        humor: str = "",
        inquiry: str = "",
        user_emotion: Optional[str] = None,
    ) -> str:
        """Support first, then the main content, optional humor, and a closing question."""
        wanted = [support, primary]
        if is_humor_appropriate(user_emotion):
            wanted.append(humor)
        wanted.append(inquiry)

        seen: Set[str] = set()
        parts = [p for p in (fresh_sentences(w, seen) for w in wanted) if p]

        pieces: List[str] = []
        for i, part in enumerate(parts):
            if i > 0:
                part = attach(self.transitions.emotional_transition(i, len(parts)), part)
            pieces.append(part)
        return self._finish(" ".join(pieces))

    def blend_emotional_tones(
        self,
        sad: str = "",
        supportive: str = "",
        hopeful: str = "",
        user_emotion: Optional[str] = None,
    ) -> str:
        """
        Order three registers by the user's dominant emotion.

        Each tuple is (register, content); transitions are looked up from the
        previous register to the next one.
        """
        e = (user_emotion or "").lower()
        if "sad" in e or "disappointed" in e:
            plan = [("supportive", supportive), ("hopeful", hopeful), ("empathetic", sad)]
        elif "anxious" in e or "worried" in e:
            plan = [("supportive", supportive), ("calm", sad)]
        elif "frustrated" in e or "annoyed" in e:
            plan = [("empathetic", sad), ("positive", hopeful)]
        else:
            plan = [("supportive", supportive), ("informative", sad), ("positive", hopeful)]

        pieces: List[str] = []
        prev: Optional[str] = None
        seen: Set[str] = set()
        for register, content in plan:
            content = fresh_sentences(content, seen)
            if not content:
                continue
            if prev is not None:
                content = attach(self.transitions.tone_transition(prev, register), content)
            pieces.append(content)
            prev = register
        return self._finish(" ".join(pieces))
