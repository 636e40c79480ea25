import pytest

from response_router.collaborators import StaticPersona
from response_router.complexity import ComplexityAdapter, estimate_complexity, target_words
from response_router.phrase_bank import load_phrase_banks
from response_router.text_utils import count_words

REPLY = (
    "The train leaves at noon today. "
    "You should get there early though. "
    "The platform changes quite a lot. "
    "Bring a snack for the trip."
)


def test_estimate_complexity_indicators():
    assert estimate_complexity("") == 0.0
    assert estimate_complexity(None) == 0.0
    assert estimate_complexity("hi") == 0.0
    # two emotion words (capped) plus a connector
    assert estimate_complexity("I am sad and angry and worried") == pytest.approx(0.6)
    # a long question
    q = "Could you explain how the scheduler decides which job runs next?"
    assert len(q) > 50
    assert estimate_complexity(q) == pytest.approx(0.2)


def test_estimate_complexity_long_inputs():
    words_25 = " ".join(["word"] * 25)
    words_60 = " ".join(["word"] * 60)
    assert estimate_complexity(words_25) == pytest.approx(0.2)
    assert estimate_complexity(words_60) == pytest.approx(0.4)
    busy = "I am sad and angry, but why does it happen and what should I do? " + words_60
    assert estimate_complexity(busy) == 1.0


def test_target_words_clamps():
    assert target_words(20, 0.0) == 10
    assert target_words(20, 1.0) == 30
    assert target_words(20, 5.0) == 30
    assert target_words(20, -1.0) == 10


def test_simplify_keeps_leading_sentences():
    adapter = ComplexityAdapter(load_phrase_banks())
    assert count_words(REPLY) == 24
    out = adapter.adjust(REPLY, 0.0)
    assert out == "The train leaves at noon today. You should get there early though."


def test_simplify_always_keeps_first_sentence():
    adapter = ComplexityAdapter(load_phrase_banks())
    assert adapter.simplify(REPLY, 1) == "The train leaves at noon today."


def test_unchanged_at_middle_complexity():
    adapter = ComplexityAdapter(load_phrase_banks())
    assert adapter.adjust(REPLY, 0.5) == REPLY


def test_elaborate_picks_longest_fitting_phrase():
    adapter = ComplexityAdapter(load_phrase_banks())
    out = adapter.adjust(REPLY, 1.0)
    assert out.startswith(REPLY)
    # gap of 12 words
    assert out.endswith("This kind of thing happens a lot more than you'd think.")


def test_elaborate_falls_back_to_shortest_phrase():
    adapter = ComplexityAdapter(load_phrase_banks())
    out = adapter.adjust("I like that idea", 1.0)
    assert out == "I like that idea. That's worth exploring further."


def test_length_is_monotone_in_complexity():
    adapter = ComplexityAdapter(load_phrase_banks())
    lengths = [count_words(adapter.adjust(REPLY, c)) for c in (0.0, 0.2, 0.4, 0.5, 0.6, 0.8, 1.0)]
    assert lengths == sorted(lengths)


def test_persona_question_is_appended():
    persona = StaticPersona(asks_questions=True, phrase="What would you pick")
    adapter = ComplexityAdapter(load_phrase_banks(), persona=persona)
    out = adapter.adjust("I like that idea", 1.0)
    assert out.endswith("What would you pick.")


def test_blank_reply():
    assert ComplexityAdapter(load_phrase_banks()).adjust("  ", 1.0) == ""
