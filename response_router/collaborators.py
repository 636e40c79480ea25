"""Narrow interfaces to the parts of the assistant that live outside the router.

The router never depends on a concrete personality or context engine.  It
asks for a :class:`Persona` and, optionally, a :class:`ReferenceResolver`, and
skips whatever depends on them when they are absent.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


class Persona(Protocol):
    """Current personality/mood of the assistant."""

    @property
    def disposition(self) -> str: ...  # e.g. playful, supportive, curious, neutral

    def should_ask_question(self) -> bool: ...

    def should_add_humor(self) -> bool: ...

    def style(self, text: str) -> str: ...

    def catchphrase(self) -> str: ...


class ReferenceResolver(Protocol):
    def resolve(self, text: str) -> str: ...


@dataclass
class StaticPersona:
    """
    Persona with fixed answers.

    Useful as a stand-in when the real personality engine is not wired in,
    and in tests.  ``prefix``/``suffix`` are added by :meth:`style` when set.
    """

    disposition: str = "neutral"
    asks_questions: bool = False
    adds_humor: bool = False
    phrase: str = "What do you think?"
    prefix: str = ""
    suffix: str = ""

    def should_ask_question(self) -> bool:
        return self.asks_questions

    def should_add_humor(self) -> bool:
        return self.adds_humor

    def style(self, text: str) -> str:
        parts = [p for p in (self.prefix, text, self.suffix) if p]
        return " ".join(parts)

    def catchphrase(self) -> str:
        return self.phrase
