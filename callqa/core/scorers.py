"""
Per-parameter scorers.

Every scorer has the signature ``(call, profile, weight, sink) -> int`` and
depends only on the normalized call and the locale profile, never on another
scorer's result. Results are clamped to ``[0, weight]`` where the formula can
overshoot; PASS_FAIL scorers only ever return ``0`` or ``weight`` unless the
profile grades them.
"""
from typing import Callable, Dict, List, Optional

from .events import EventSink, emit
from .lexicon import find_terms, has_any, normalize_text
from .models import CallTranscript, Utterance
from .profiles import LocaleProfile

Scorer = Callable[[CallTranscript, LocaleProfile, int, Optional[EventSink]], int]


def _clamp(value: int, weight: int) -> int:
    return max(0, min(weight, int(value)))


def _within(u: Utterance, window: Optional[float]) -> bool:
    return window is None or u.start_seconds <= window


def _first_hit(utts, terms, window: Optional[float] = None) -> List[str]:
    for u in utts:
        if not _within(u, window):
            continue
        matched = find_terms(u.text, terms)
        if matched:
            return matched
    return []


def score_greeting(call: CallTranscript, profile: LocaleProfile, weight: int, sink: Optional[EventSink] = None) -> int:
    if not call.utterances:
        emit(sink, "greeting", 0, reason="no utterances")
        return 0
    first = call.utterances[0]
    on_time = _within(first, profile.greeting_seconds)
    matched = find_terms(first.text, profile.greeting_lexicon)
    ok = on_time and (bool(matched) or not profile.greeting_requires_lexicon)
    score = weight if ok else 0
    emit(sink, "greeting", score, matched, start=first.start_seconds, on_time=on_time,
         lexicon_required=profile.greeting_requires_lexicon)
    return score


def score_urgency(call: CallTranscript, profile: LocaleProfile, weight: int, sink: Optional[EventSink] = None) -> int:
    raw = 0
    matched: List[str] = []
    questions = deadlines = 0
    for u in call.utterances:
        hits = find_terms(u.text, profile.urgency_lexicon)
        if hits:
            raw += profile.urgency_increment
            matched += hits
        if not profile.urgency_compound:
            continue
        if has_any(u.text, profile.interrogative_markers) and has_any(u.text, profile.question_tokens):
            raw += profile.urgency_question_bonus
            questions += 1
        if has_any(u.text, profile.deadline_tokens):
            raw += profile.urgency_deadline_bonus
            deadlines += 1
    score = _clamp(raw - profile.urgency_penalty, weight)
    emit(sink, "collectionUrgency", score, matched, raw=raw, penalty=profile.urgency_penalty,
         question_hits=questions, deadline_hits=deadlines)
    return score


def score_rebuttal(call: CallTranscript, profile: LocaleProfile, weight: int, sink: Optional[EventSink] = None) -> int:
    last_objection = -1
    objections = rebuttals = 0
    matched: List[str] = []
    for i, u in enumerate(call.utterances):
        obj = find_terms(u.text, profile.objection_lexicon)
        if obj:
            objections += 1
            last_objection = i
            matched += obj
        # a rebuttal only counts once an earlier utterance raised an objection
        reb = find_terms(u.text, profile.rebuttal_lexicon)
        if reb and 0 <= last_objection < i:
            rebuttals += 1
            matched += reb

    if objections == 0:
        emit(sink, "rebuttalCustomerHandling", 0, reason="no objections")
        return 0
    raw = objections * profile.objection_weight + rebuttals * profile.rebuttal_weight
    raw -= max(0, objections - rebuttals) * profile.gap_weight
    score = _clamp(raw, weight)
    emit(sink, "rebuttalCustomerHandling", score, matched, objections=objections,
         rebuttals=rebuttals, raw=raw)
    return score


def score_etiquette(call: CallTranscript, profile: LocaleProfile, weight: int, sink: Optional[EventSink] = None) -> int:
    s = call.sentiment.score
    delta = profile.etiquette_floor_delta
    for threshold, d in profile.sentiment_cutoffs:
        if s > threshold:
            delta = d
            break
    score = _clamp(profile.etiquette_base + delta, weight)
    emit(sink, "callEtiquette", score, sentiment=s, base=profile.etiquette_base, delta=delta)
    return score


def _disclosure(key: str, call: CallTranscript, profile: LocaleProfile, weight: int,
                sink: Optional[EventSink]) -> int:
    matched = _first_hit(call.utterances, profile.disclosure_lexicon, profile.disclosure_seconds)
    score = weight if matched else 0
    emit(sink, key, score, matched, window=profile.disclosure_seconds)
    return score


def score_disclaimer(call: CallTranscript, profile: LocaleProfile, weight: int, sink: Optional[EventSink] = None) -> int:
    return _disclosure("callDisclaimer", call, profile, weight, sink)


def score_tape_disclosure(call: CallTranscript, profile: LocaleProfile, weight: int, sink: Optional[EventSink] = None) -> int:
    return _disclosure("fatalTapeDiscloser", call, profile, weight, sink)


def score_disposition(call: CallTranscript, profile: LocaleProfile, weight: int, sink: Optional[EventSink] = None) -> int:
    bare: List[str] = []
    for u in call.utterances:
        terms = find_terms(u.text, profile.disposition_lexicon)
        if not terms:
            continue
        causal = find_terms(u.text, profile.causal_lexicon)
        if causal:
            emit(sink, "correctDisposition", weight, terms + causal, tier="remarked")
            return weight
        bare += terms

    intents = [i.label for i in call.intents if normalize_text(i.label) in profile.disposition_intents]
    if profile.disposition_partial_credit:
        score = weight // 2 if (bare or intents) else 0
    else:
        score = weight if intents else 0
    emit(sink, "correctDisposition", score, bare, intents=intents, tier="partial" if score and score < weight else None)
    return score


def score_closing(call: CallTranscript, profile: LocaleProfile, weight: int, sink: Optional[EventSink] = None) -> int:
    if not call.utterances:
        emit(sink, "callClosing", 0, reason="no utterances")
        return 0
    matched = find_terms(call.utterances[-1].text, profile.gratitude_lexicon)
    score = weight if matched else 0
    emit(sink, "callClosing", score, matched)
    return score


def score_identification(call: CallTranscript, profile: LocaleProfile, weight: int, sink: Optional[EventSink] = None) -> int:
    matched = _first_hit(call.utterances, profile.identification_lexicon, profile.identification_seconds)
    score = weight if matched else 0
    emit(sink, "fatalIdentification", score, matched, window=profile.identification_seconds)
    return score


def score_tone(call: CallTranscript, profile: LocaleProfile, weight: int, sink: Optional[EventSink] = None) -> int:
    negative: List[str] = []
    for u in call.utterances:
        negative += find_terms(u.text, profile.negative_language_lexicon)
    s = call.sentiment.score
    severe = profile.severe_negative_cutoff is not None and s < profile.severe_negative_cutoff

    if negative or severe:
        score = 0
    else:
        score = weight
        for edge, band in profile.tone_bands:
            if s < edge:
                score = min(band, weight)
                break
    emit(sink, "fatalToneLanguage", score, negative, sentiment=s, severe=severe)
    return score


SCORERS: Dict[str, Scorer] = {
    "greeting": score_greeting,
    "collectionUrgency": score_urgency,
    "rebuttalCustomerHandling": score_rebuttal,
    "callEtiquette": score_etiquette,
    "callDisclaimer": score_disclaimer,
    "correctDisposition": score_disposition,
    "callClosing": score_closing,
    "fatalIdentification": score_identification,
    "fatalTapeDiscloser": score_tape_disclosure,
    "fatalToneLanguage": score_tone,
}
