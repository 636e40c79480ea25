import pytest

from response_router.collaborators import StaticPersona
from response_router.phrase_bank import load_phrase_banks
from response_router.pipeline_types import ResponseType, TurnContext, TypedSegment
from response_router.sampling import FirstPicker
from response_router.text_utils import sentence_key, split_sentences
from response_router.transitions import TransitionGenerator
from response_router.type_combiner import TypeCombiner, multi_type_coherence, type_priority


@pytest.fixture
def combiner():
    return TypeCombiner(TransitionGenerator(load_phrase_banks(), FirstPicker()))


def test_priority_order_overrides_input_order(combiner):
    out = combiner.combine({
        ResponseType.HUMOROUS: "Maybe the cat ate it.",
        ResponseType.EMOTIONAL: "I'm sorry it went missing.",
    })
    assert out.types_used == [ResponseType.EMOTIONAL, ResponseType.HUMOROUS]
    assert out.text.index("I'm sorry") < out.text.index("the cat")
    assert len(out.transitions) == 1


def test_informational_and_inquiry(combiner):
    out = combiner.combine(
        {
            ResponseType.INFORMATIONAL: "Python is a programming language.",
            ResponseType.INQUIRY: "Do you code?",
        },
        TurnContext(topic="programming"),
    )
    assert out.types_used == [ResponseType.INQUIRY, ResponseType.INFORMATIONAL]
    assert len(out.transitions) == 1
    assert out.coherence_score >= 0.6
    # inquiry outranks informational; the fragment after the comma is lower-cased
    assert out.text == "Do you code? Shifting gears to informational, python is a programming language."
    assert out.metadata["topic"] == "programming"
    assert out.metadata["has_transition"] is True


def test_blank_segments_are_skipped(combiner):
    out = combiner.combine({
        ResponseType.EMOTIONAL: "   ",
        ResponseType.ADVISORY: "Take a short walk.",
    })
    assert out.types_used == [ResponseType.ADVISORY]
    assert out.transitions == []
    assert out.text == "Take a short walk."
    assert out.coherence_score == 0.5


def test_empty_input(combiner):
    out = combiner.combine({})
    assert out.text == ""
    assert out.types_used == []
    assert out.coherence_score == 0.0
    out = combiner.combine(None)
    assert out.text == ""


def test_typed_segments_first_text_per_type_wins(combiner):
    out = combiner.combine([
        TypedSegment(ResponseType.AFFIRMATIVE, "Yes, exactly."),
        TypedSegment(ResponseType.AFFIRMATIVE, "Totally."),
        TypedSegment(ResponseType.EMOTIONAL, "That sounds exciting"),
    ])
    assert out.types_used == [ResponseType.EMOTIONAL, ResponseType.AFFIRMATIVE]
    assert "Totally" not in out.text
    # emotional -> affirmative is a related pair
    assert out.transitions == ["That ties in with affirmative,"]


def test_persona_styling_applies_to_whole_reply():
    persona = StaticPersona(prefix="Hey!")
    combiner = TypeCombiner(TransitionGenerator(load_phrase_banks(), FirstPicker()), persona=persona)
    out = combiner.combine({ResponseType.NARRATIVE: "Once, I got lost in a maze"})
    assert out.text == "Hey! Once, I got lost in a maze."


def test_coherence_bonuses():
    assert multi_type_coherence([ResponseType.NARRATIVE], []) == 0.5
    pair = [ResponseType.EMOTIONAL, ResponseType.INFORMATIONAL]
    assert multi_type_coherence(pair, ["Also,"]) == pytest.approx(0.8)
    full = [ResponseType.EMOTIONAL, ResponseType.INFORMATIONAL, ResponseType.INQUIRY, ResponseType.ADVISORY]
    assert multi_type_coherence(full, ["a", "b", "c"]) == pytest.approx(0.9)


def test_type_priority_table():
    assert type_priority(ResponseType.EMOTIONAL) > type_priority(ResponseType.HUMOROUS)
    assert type_priority(ResponseType.DISSENTIVE) == min(type_priority(t) for t in ResponseType)


def test_string_keys_are_coerced(combiner):
    out = combiner.combine({"advisory": "Try again tomorrow.", " Emotional ": "Oh no."})
    assert out.types_used == [ResponseType.EMOTIONAL, ResponseType.ADVISORY]


def test_unknown_type_labels_are_skipped(combiner):
    out = combiner.combine({"sarcastic": "Sure, great idea.", ResponseType.ADVISORY: "Try again tomorrow."})
    assert out.types_used == [ResponseType.ADVISORY]
    assert out.text == "Try again tomorrow."
    assert combiner.combine({"sarcastic": "Sure."}).text == ""


class LastPicker:
    def pick(self, items):
        return items[-1]


def test_repeated_sentence_is_kept_once():
    combiner = TypeCombiner(TransitionGenerator(load_phrase_banks(), LastPicker()))
    out = combiner.combine({ResponseType.EMOTIONAL: "That is hard.", ResponseType.HUMOROUS: "That is hard."})
    assert out.text == "That is hard."
    assert out.types_used == [ResponseType.EMOTIONAL]
    assert out.transitions == []


def test_repeated_sentences_dropped_case_insensitively(combiner):
    out = combiner.combine({
        ResponseType.EMOTIONAL: "That is hard. I'm sorry.",
        ResponseType.INFORMATIONAL: "i'm sorry! Exams are tough.",
    })
    keys = [sentence_key(s) for s in split_sentences(out.text)]
    assert len(keys) == len(set(keys))
    assert out.text.lower().count("i'm sorry") == 1
    assert out.text.endswith("exams are tough.")
    assert out.types_used == [ResponseType.EMOTIONAL, ResponseType.INFORMATIONAL]


def test_persona_suffix_does_not_repeat_a_sentence():
    persona = StaticPersona(suffix="What do you think?")
    combiner = TypeCombiner(TransitionGenerator(load_phrase_banks(), FirstPicker()), persona=persona)
    out = combiner.combine({ResponseType.INQUIRY: "What do you think?"})
    assert out.text == "What do you think?"


def test_first_person_fragment_keeps_capital(combiner):
    out = combiner.combine({
        ResponseType.EMOTIONAL: "That sounds rough.",
        ResponseType.NARRATIVE: "I once missed a train too.",
    })
    assert out.text.endswith(", I once missed a train too.")
