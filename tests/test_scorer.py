import pytest

from response_router.collaborators import StaticPersona
from response_router.config import ScoreVector, ScoreWeights
from response_router.pipeline_types import Candidate, TurnContext
from response_router.scorer import Scorer, is_redundant, overall_score


class DummyResolver:
    """Replaces 'it' with the last noun it was told about."""

    def __init__(self, noun="the report"):
        self.noun = noun
        self.calls = 0

    def resolve(self, text):
        self.calls += 1
        return text.replace(" it ", f" {self.noun} ")


def test_score_is_deterministic_and_pure():
    scorer = Scorer()
    cand = Candidate(text="I see, that makes sense because work is hard.", source="a")
    ctx = TurnContext(user_input="Work is hard?", topic="work", emotion="sad", history=("I had a long day.",))

    first = scorer.score(cand, ctx)
    second = scorer.score(cand, ctx)
    assert first == second
    # the candidate itself is not written to
    assert cand.context_score == 0.5
    assert cand.overall_score == 0.5


def test_blank_candidate_gets_neutral_scores():
    scorer = Scorer()
    assert scorer.score(Candidate(text="   "), TurnContext()) == ScoreVector.neutral()
    assert scorer.score(None, TurnContext()) == ScoreVector.neutral()


def test_context_topic_tag_emotion_question_ack():
    scorer = Scorer()
    ctx = TurnContext(user_input="How is work?", topic="work", emotion="sad")
    cand = Candidate(
        text="I understand, work can be tiring. How is it going?",
        tags=frozenset({"topic-transition"}),
    )
    # 0.5 + topic 0.2 + tag 0.1 + supportive-for-sad 0.2 + question 0.1 + ack 0.1 -> clamped
    assert scorer.score_context(cand, ctx) == 1.0


def test_context_penalises_inappropriate_tone():
    scorer = Scorer()
    ctx = TurnContext(user_input="my dog died", emotion="sad")
    cand = Candidate(text="Awesome!")
    assert scorer.score_context(cand, ctx) == pytest.approx(0.4)


def test_context_without_emotion_has_no_emotion_term():
    scorer = Scorer()
    cand = Candidate(text="Awesome!")
    assert scorer.score_context(cand, TurnContext(user_input="hi")) == pytest.approx(0.5)


def test_persona_falls_back_to_neutral_without_persona():
    cand = Candidate(text="Haha what do you think?", tags=frozenset({"humorous"}))
    assert Scorer().score_persona(cand) == 0.5


def test_persona_bonuses():
    persona = StaticPersona(disposition="playful", asks_questions=True)
    scorer = Scorer(persona=persona)
    cand = Candidate(text="Honestly, what do you think?", tags=frozenset({"humorous"}))
    # 0.5 + tag 0.2 + ask 0.1 + catchphrase 0.05 + habitual 0.05
    assert scorer.score_persona(cand) == pytest.approx(0.9)


def test_persona_phrase_bonus_is_capped():
    scorer = Scorer(persona=StaticPersona(disposition="neutral"))
    text = "Honestly, you know, here's the thing, between us, makes you think."
    assert scorer.score_persona(Candidate(text=text)) == pytest.approx(0.6)


def test_persona_supportive_disposition_rewards_empathetic_tag():
    scorer = Scorer(persona=StaticPersona(disposition="supportive"))
    cand = Candidate(text="I'm here for you.", tags=frozenset({"empathetic"}))
    assert scorer.score_persona(cand) == pytest.approx(0.7)


def test_tone_exact_match_intent_and_length():
    scorer = Scorer()
    ctx = TurnContext(user_input="We won the game!", emotion="excited", intent="casual")
    cand = Candidate(text="That's awesome, congrats on the win!")
    # match 0.3 + intent 0.2 + ratio 6/4 in range 0.1 -> clamped
    assert scorer.score_tone(cand, ctx) == 1.0


def test_tone_conflict_penalty():
    scorer = Scorer()
    ctx = TurnContext(user_input="My cat is sick and I am worried about her", emotion="sad")
    cand = Candidate(text="Great")
    # serious vs enthusiastic conflict -0.2; ratio 1/10 out of range
    assert scorer.score_tone(cand, ctx) == pytest.approx(0.3)


def test_tone_compatible_bonus():
    scorer = Scorer()
    ctx = TurnContext(user_input="the bus is late today")
    cand = Candidate(text="You can take the train instead.")
    # neutral vs helpful -> compatible 0.15; ratio 6/5 in range 0.1
    assert scorer.score_tone(cand, ctx) == pytest.approx(0.75)


def test_tone_neither_table_is_neutral():
    scorer = Scorer()
    ctx = TurnContext(user_input="the bus is late today")
    cand = Candidate(text="Haha that is a funny bus joke really")
    # neutral vs humorous: no bonus, no penalty; ratio 8/5 in range
    assert scorer.score_tone(cand, ctx) == pytest.approx(0.6)


def test_coherence_continuity_logic_and_resolution():
    resolver = DummyResolver()
    scorer = Scorer(resolver=resolver)
    ctx = TurnContext(user_input="ok", history=("I finished the report.",))
    cand = Candidate(text="So did you send it to anyone yet")
    # connector 'it' 0.2 + resolved 0.1 + logical 'so' 0.2
    assert scorer.score_coherence(cand, ctx) == pytest.approx(1.0)
    assert resolver.calls == 1


def test_coherence_without_history_or_resolver():
    scorer = Scorer()
    cand = Candidate(text="Also consider this.")
    assert scorer.score_coherence(cand, TurnContext()) == pytest.approx(0.5)


def test_coherence_redundancy_penalty():
    scorer = Scorer()
    ctx = TurnContext(history=("The meeting moved to Friday afternoon.", "ok thanks"))
    cand = Candidate(text="The meeting moved to Friday.")
    # last turn 'ok thanks' has no connector; the first turn repeats the candidate
    assert scorer.score_coherence(cand, ctx) == pytest.approx(0.4)


def test_is_redundant_uses_word_overlap():
    assert is_redundant("The meeting moved to Friday.", ["the meeting moved to friday afternoon"])
    assert not is_redundant("Let's talk about lunch plans.", ["the meeting moved to friday afternoon"])
    assert not is_redundant("", ["anything"])


def test_all_scores_within_bounds():
    persona = StaticPersona(disposition="curious", asks_questions=True)
    scorer = Scorer(persona=persona, resolver=DummyResolver())
    ctx = TurnContext(user_input="Why?", topic="why", emotion="curious", intent="question", history=("this",))
    cand = Candidate(
        text="I see, why is that? Because it matters, therefore what do you think?",
        tags=frozenset({"topic-transition"}),
    )
    vec = scorer.score(cand, ctx)
    assert all(0.0 <= v <= 1.0 for v in vec.as_tuple())


def test_overall_score_is_weighted_sum():
    vec = ScoreVector(context=1.0, persona=0.0, tone=0.5, coherence=0.5)
    w = ScoreWeights(context=1, persona=1, tone=1, coherence=1)
    assert overall_score(vec, w) == pytest.approx(0.5)
    w2 = ScoreWeights(context=1, persona=0, tone=0, coherence=0)
    assert overall_score(vec, w2) == pytest.approx(1.0)
