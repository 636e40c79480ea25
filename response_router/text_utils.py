# response_router/text_utils.py
from __future__ import annotations

import re
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern, Set

_WS_RE = re.compile(r"\s+")
_SENTENCE_RE = re.compile(r"[^.!?]+[.!?]*")
_TOKEN_RE = re.compile(r"[a-z0-9']+")

TERMINALS = (".", "!", "?")


def clean_text(text: Optional[str]) -> str:
    """
    Minimal, safe normaliser used before any composition step:
    - None -> ""
    - collapse whitespace/newlines
    - trim
    """
    text = "" if text is None else str(text)
    return _WS_RE.sub(" ", text).strip()


def count_words(text: Optional[str]) -> int:
    if not text:
        return 0
    return len(text.split())


def tokens(text: Optional[str]) -> List[str]:
    return _TOKEN_RE.findall((text or "").lower())


def split_sentences(text: Optional[str]) -> List[str]:
    """
    Split into sentences, each keeping its own terminator.

      'Hi there! How are you? Fine' -> ['Hi there!', 'How are you?', 'Fine']
    """
    cleaned = clean_text(text)
    out: List[str] = []
    for m in _SENTENCE_RE.finditer(cleaned):
        s = m.group(0).strip()
        if s.rstrip(".!?").strip():
            out.append(s)
    return out


def sentence_key(sentence: str) -> str:
    return clean_text(sentence.rstrip(".!? ")).lower()


def dedupe_sentences(sentences: Iterable[str]) -> List[str]:
    """Drop case-insensitive repeats, keeping the first occurrence in order."""
    seen = set()
    out: List[str] = []
    for s in sentences:
        key = sentence_key(s)
        if not key or key in seen:
            continue
        seen.add(key)
        out.append(s)
    return out


def ensure_terminal(text: str) -> str:
    text = text.rstrip()
    if not text:
        return ""
    if text.endswith(TERMINALS):
        return text
    return text.rstrip(",;:- ") + "."


def join_sentences(sentences: Iterable[str]) -> str:
    return " ".join(ensure_terminal(s) for s in sentences if s.strip())


@lru_cache(maxsize=512)
def _phrase_re(phrase: str) -> Pattern[str]:
    return re.compile(r"(?<![a-z0-9'])" + re.escape(phrase.lower()) + r"(?![a-z0-9'])")


def contains_phrase(text: Optional[str], phrase: str) -> bool:
    """Whole-word, case-insensitive phrase match ('right' does not hit 'bright')."""
    if not text or not phrase:
        return False
    return _phrase_re(phrase).search(text.lower()) is not None


def contains_any(text: Optional[str], phrases: Iterable[str]) -> bool:
    return any(contains_phrase(text, p) for p in phrases)


def count_hits(text: Optional[str], phrases: Iterable[str]) -> int:
    return sum(1 for p in phrases if contains_phrase(text, p))


def dedupe_text(text: Optional[str]) -> str:
    """Collapse whitespace and drop repeated sentences; each sentence keeps its terminator."""
    return join_sentences(dedupe_sentences(split_sentences(clean_text(text))))


def decapitalize(text: str) -> str:
    """
    Lower-case the first letter so the text can follow a comma.

    'I', 'I'm' and all-caps words like 'NASA' are left alone.
    """
    if not text or not text[0].isupper():
        return text
    first = text.split(" ", 1)[0].rstrip(",.;:!?")
    if first == "I" or first.startswith("I'") or (len(first) > 1 and first[1].isupper()):
        return text
    return text[0].lower() + text[1:]


def attach(lead: str, text: str) -> str:
    """``lead`` followed by ``text``, lower-casing ``text`` after a comma."""
    if lead.rstrip().endswith(","):
        text = decapitalize(text)
    return f"{lead} {text}"


def fresh_sentences(text: Optional[str], seen: Set[str]) -> str:
    """
    Sentences of ``text`` whose keys are not in ``seen``, joined back up.
    ``seen`` is updated in place so a caller can thread it through fragments.
    """
    fresh: List[str] = []
    for s in split_sentences(text):
        key = sentence_key(s)
        if key and key not in seen:
            seen.add(key)
            fresh.append(s)
    return join_sentences(fresh)
