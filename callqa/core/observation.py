from typing import List, Sequence

from .lexicon import has_any
from .models import CallSentiment, Polarity, Topic, Utterance, top_topics
from .profiles import LocaleProfile

FALLBACK = "No specific observations available."


def _join_names(names: List[str]) -> str:
    if len(names) <= 1:
        return "".join(names)
    return ", ".join(names[:-1]) + " and " + names[-1]


def _objection_clause(utts: Sequence[Utterance], profile: LocaleProfile) -> str:
    objections = [i for i, u in enumerate(utts) if has_any(u.text, profile.objection_lexicon)]
    if not objections:
        return ""
    subtopics = [
        name for name, terms in profile.objection_subtopics
        if any(has_any(utts[i].text, terms) for i in objections)
    ]
    rebutted = any(has_any(u.text, profile.rebuttal_lexicon) for u in utts[objections[0] + 1:])

    clause = "Customer raised objections"
    if subtopics:
        clause += f" about {_join_names(subtopics)}"
    clause += "; agent responded with a rebuttal" if rebutted else "; agent did not rebut them"
    return clause


def _in_window(utts: Sequence[Utterance], terms, window) -> bool:
    return any(has_any(u.text, terms) for u in utts if window is None or u.start_seconds <= window)


def _topic_clause(topics: Sequence[Topic], sentiment: CallSentiment) -> str:
    top = top_topics(list(topics), 2)
    polarity = sentiment.label
    if top:
        clause = "Main topics discussed: " + ", ".join(t.label for t in top)
        if polarity != Polarity.NEUTRAL:
            clause += f" with {polarity.value} sentiment"
        return clause
    if polarity != Polarity.NEUTRAL:
        return f"Overall sentiment was {polarity.value}"
    return ""


def synthesize_observation(utterances: Sequence[Utterance], topics: Sequence[Topic],
                           sentiment: CallSentiment, profile: LocaleProfile) -> str:
    clauses = [_objection_clause(utterances, profile)]
    # missing-element notes need something to be missing from
    if utterances:
        if not _in_window(utterances, profile.disclosure_lexicon, profile.disclosure_seconds):
            clauses.append("Call recording disclosure was not given")
        if not _in_window(utterances, profile.identification_lexicon, profile.identification_seconds):
            clauses.append("Agent or customer identification was missing")
    clauses.append(_topic_clause(topics, sentiment))
    if utterances and not has_any(utterances[-1].text, profile.closing_lexicon):
        clauses.append("Call ended without a proper closing")

    clauses = [c for c in clauses if c]
    return ". ".join(clauses) or FALLBACK
