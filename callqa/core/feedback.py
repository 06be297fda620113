from typing import Callable, Dict, Optional

from .models import CallSentiment
from .profiles import LocaleProfile

DEFAULT_SUMMARY = "The call was processed successfully."
NEGATIVE_NOTE = " There were some negative sentiments detected."


def _preamble(percentage: float) -> str:
    return f"Overall score: {percentage:.1f}%. "


def _template(scores: Dict[str, int], percentage: float, sentiment: CallSentiment,
              summary: Optional[str], profile: LocaleProfile) -> str:
    text = _preamble(percentage) + (summary or DEFAULT_SUMMARY)
    if sentiment.score < 0:
        text += NEGATIVE_NOTE
    return text


def _clauses(scores: Dict[str, int], percentage: float, sentiment: CallSentiment,
             summary: Optional[str], profile: LocaleProfile) -> str:
    clauses = [g.text for g in profile.feedback_gates if g.fires(scores)]
    if not clauses:
        clauses = [profile.fallback_clause]
    mood = dict(profile.sentiment_clauses).get(sentiment.label.value)
    if mood:
        clauses.append(mood)
    body = profile.feedback_connector.join(clauses)
    return _preamble(percentage) + body[:1].upper() + body[1:] + "."


STRATEGIES: Dict[str, Callable[..., str]] = {
    "template": _template,
    "clauses": _clauses,
}


def synthesize_feedback(scores: Dict[str, int], percentage: float, sentiment: CallSentiment,
                        summary: Optional[str], profile: LocaleProfile) -> str:
    return STRATEGIES[profile.feedback_strategy](scores, percentage, sentiment, summary, profile)
