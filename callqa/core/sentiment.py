from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from .models import CallSentiment, polarity_of

_analyzer = SentimentIntensityAnalyzer()

def compound_score(text: str) -> float:
    return float(_analyzer.polarity_scores(text)['compound'])

def estimate_call_sentiment(text: str) -> CallSentiment:
    # used only when the provider sent no call-level sentiment
    score = compound_score(text)
    return CallSentiment(label=polarity_of(score), score=score)
