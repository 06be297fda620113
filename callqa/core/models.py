from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional, Tuple


class Polarity(str, Enum):
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class ParameterKind(str, Enum):
    PASS_FAIL = "PASS_FAIL"
    SCORE = "SCORE"


@dataclass(frozen=True)
class Utterance:
    text: str
    start_seconds: float
    end_seconds: float
    sentiment_label: Optional[Polarity] = None
    sentiment_score: Optional[float] = None


@dataclass(frozen=True)
class CallSentiment:
    label: Polarity
    score: float  # [-1, 1]


@dataclass(frozen=True)
class Topic:
    label: str
    confidence: float


@dataclass(frozen=True)
class Intent:
    label: str
    confidence: float


@dataclass(frozen=True)
class CallTranscript:
    text: str
    utterances: Tuple[Utterance, ...]
    sentiment: CallSentiment
    topics: Tuple[Topic, ...] = ()
    intents: Tuple[Intent, ...] = ()
    summary: Optional[str] = None


@dataclass(frozen=True)
class Parameter:
    key: str
    display_name: str
    weight: int
    kind: ParameterKind
    description: str

    def to_dict(self) -> Dict:
        return {
            "key": self.key, "name": self.display_name, "weight": self.weight,
            "description": self.description, "type": self.kind.value,
        }


@dataclass
class ScoreCard:
    scores: Dict[str, int]
    percentage: float
    overall_feedback: str
    observation: str
    parameters: Tuple[Parameter, ...] = field(default_factory=tuple)

    def to_dict(self) -> Dict:
        return {
            "scores": dict(self.scores),
            "percentage": self.percentage,
            "overallFeedback": self.overall_feedback,
            "observation": self.observation,
            "parameters": [p.to_dict() for p in self.parameters],
        }


def polarity_of(score: float) -> Polarity:
    if score > 0:
        return Polarity.POSITIVE
    if score < 0:
        return Polarity.NEGATIVE
    return Polarity.NEUTRAL


def top_topics(topics: List[Topic], n: int = 2) -> List[Topic]:
    # stable on ties so output stays deterministic
    return sorted(topics, key=lambda t: -t.confidence)[:n]
