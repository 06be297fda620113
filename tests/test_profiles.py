import dataclasses

import pytest

from callqa.core.errors import UnknownLocaleError, ValidationError
from callqa.core.models import ParameterKind
from callqa.core.profiles import ENGLISH, HINDI, PROFILES, FeedbackGate, get_profile
from callqa.core.registry import registry_for


def test_lookup():
    assert get_profile("en") is ENGLISH
    assert get_profile("HI") is HINDI
    assert sorted(PROFILES) == ["en", "hi"]


def test_unknown_locale():
    with pytest.raises(UnknownLocaleError):
        get_profile("fr")


def test_profiles_are_immutable():
    with pytest.raises(dataclasses.FrozenInstanceError):
        ENGLISH.urgency_increment = 5
    assert isinstance(ENGLISH.greeting_lexicon, frozenset)
    assert isinstance(HINDI.subtopic_lexicon()["penalty"], frozenset)


def test_empty_lexicon_rejected():
    with pytest.raises(ValidationError) as exc:
        dataclasses.replace(ENGLISH, urgency_lexicon=set())
    assert "urgency_lexicon is empty" in exc.value.errors


def test_cutoffs_must_be_monotonic():
    with pytest.raises(ValidationError):
        dataclasses.replace(ENGLISH, sentiment_cutoffs=((0.0, 4), (0.5, 2)))
    with pytest.raises(ValidationError):
        dataclasses.replace(HINDI, sentiment_cutoffs=((0.5, 1), (0.0, 3)))
    with pytest.raises(ValidationError):
        dataclasses.replace(ENGLISH, etiquette_floor_delta=6)


def test_gratitude_subset_of_closing():
    with pytest.raises(ValidationError):
        dataclasses.replace(ENGLISH, gratitude_lexicon={"cheers"})


def test_compound_urgency_needs_tokens():
    with pytest.raises(ValidationError):
        dataclasses.replace(ENGLISH, urgency_compound=True)


def test_clause_feedback_needs_gates():
    with pytest.raises(ValidationError):
        dataclasses.replace(ENGLISH, feedback_strategy="clauses")
    with pytest.raises(ValidationError):
        dataclasses.replace(HINDI, feedback_gates=(FeedbackGate("greeting", "!=", 0, "x"),))


def test_graded_parameters():
    assert ENGLISH.graded_parameters == frozenset()
    assert HINDI.graded_parameters == {"correctDisposition", "fatalToneLanguage"}


def test_registry_follows_profile():
    en = {p.key: p.kind for p in registry_for(ENGLISH)}
    hi = {p.key: p.kind for p in registry_for(HINDI)}
    assert en["correctDisposition"] == ParameterKind.PASS_FAIL
    assert en["fatalToneLanguage"] == ParameterKind.PASS_FAIL
    assert hi["correctDisposition"] == ParameterKind.SCORE
    assert hi["fatalToneLanguage"] == ParameterKind.SCORE
    assert hi["callClosing"] == ParameterKind.PASS_FAIL
