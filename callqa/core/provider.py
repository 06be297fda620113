"""
Inbound payload validation and normalization.

The transcription provider's output is validated with pydantic and turned
into the immutable ``CallTranscript`` the engine consumes. Raw Deepgram
``/v1/listen`` responses can be flattened into the same payload first with
``from_deepgram``.
"""
from typing import Any, Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, model_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import EmptyTranscriptError, ValidationError
from .models import CallSentiment, CallTranscript, Intent, Polarity, Topic, Utterance, polarity_of
from .sentiment import estimate_call_sentiment


class UtterancePayload(BaseModel):
    transcript: str
    start: float = Field(..., ge=0)
    end: float = Field(..., ge=0)
    sentiment: Optional[Polarity] = None
    sentiment_score: Optional[float] = None

    @model_validator(mode="after")
    def _ordered(self):
        if self.end < self.start:
            raise ValueError(f"utterance ends ({self.end}) before it starts ({self.start})")
        return self


# unknown keys are rejected: a bad label or misspelled key must not match
# an empty OverallSentiment
class LabelledSentiment(BaseModel):
    model_config = ConfigDict(extra="forbid")

    sentiment: Polarity
    sentiment_score: float


class OverallSentiment(BaseModel):
    model_config = ConfigDict(extra="forbid")

    overall: Optional[float] = None


class TopicPayload(BaseModel):
    topic: str
    confidence: float = Field(0.0, ge=0, le=1, validation_alias=AliasChoices("confidence", "confidence_score"))


class IntentPayload(BaseModel):
    intent: str
    confidence: float = Field(0.0, ge=0, le=1, validation_alias=AliasChoices("confidence", "confidence_score"))


class ProviderPayload(BaseModel):
    transcript: str
    utterances: List[UtterancePayload]
    sentiment: Optional[Union[LabelledSentiment, OverallSentiment]] = None
    topics: List[TopicPayload] = Field(default_factory=list)
    intents: List[IntentPayload] = Field(default_factory=list)
    summary: Optional[str] = None


def _clamp(score: float) -> float:
    return max(-1.0, min(1.0, float(score)))


def _call_sentiment(p: ProviderPayload) -> CallSentiment:
    s = p.sentiment
    if isinstance(s, LabelledSentiment):
        return CallSentiment(label=s.sentiment, score=_clamp(s.sentiment_score))
    if isinstance(s, OverallSentiment) and s.overall is not None:
        score = _clamp(s.overall)
        return CallSentiment(label=polarity_of(score), score=score)
    return estimate_call_sentiment(p.transcript)


def validate_payload(data: Any) -> ProviderPayload:
    if isinstance(data, ProviderPayload):
        return data
    if not isinstance(data, dict):
        raise ValidationError(f"payload must be a JSON object, got {type(data).__name__}")
    try:
        return ProviderPayload.model_validate(data)
    except PydanticValidationError as e:
        errors = [{"loc": list(err["loc"]), "msg": err["msg"], "type": err["type"]} for err in e.errors()]
        fields = ", ".join(".".join(str(x) for x in err["loc"]) for err in errors)
        raise ValidationError(f"malformed transcript payload ({fields})", errors) from e


def normalize(data: Union[Dict[str, Any], ProviderPayload]) -> CallTranscript:
    p = validate_payload(data)
    if not p.transcript.strip():
        raise EmptyTranscriptError("provider returned an empty transcript")

    utts = tuple(
        Utterance(
            text=u.transcript,
            start_seconds=u.start,
            end_seconds=u.end,
            sentiment_label=u.sentiment,
            sentiment_score=None if u.sentiment_score is None else _clamp(u.sentiment_score),
        )
        for u in p.utterances
    )
    return CallTranscript(
        text=p.transcript,
        utterances=utts,
        sentiment=_call_sentiment(p),
        topics=tuple(Topic(label=t.topic, confidence=t.confidence) for t in p.topics),
        intents=tuple(Intent(label=i.intent, confidence=i.confidence) for i in p.intents),
        summary=p.summary or None,
    )


def _field(obj: Dict, key: str, kind: type, where: str):
    value = obj.get(key)
    if value is None:
        return kind()
    if not isinstance(value, kind):
        shape = "an object" if kind is dict else "a list"
        raise ValidationError(f"deepgram field '{where}{key}' must be {shape}, got {type(value).__name__}")
    return value


def _objects(items: List, where: str) -> List[Dict]:
    for i, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValidationError(f"deepgram field '{where}[{i}]' must be an object, got {type(item).__name__}")
    return items


def _merge_labels(results: Dict, inner: str, label: str) -> List[Dict]:
    # same label across segments: keep the highest confidence, first-seen order
    section = _field(results, inner, dict, "results.")
    segments = _objects(_field(section, "segments", list, f"results.{inner}."), f"results.{inner}.segments")
    best: Dict[str, float] = {}
    for seg in segments:
        for item in _objects(_field(seg, inner, list, "segment."), f"segment.{inner}"):
            name = item.get(label)
            if not name:
                continue
            conf = item.get("confidence_score", item.get("confidence", 0.0)) or 0.0
            if isinstance(conf, bool) or not isinstance(conf, (int, float)):
                raise ValidationError(f"deepgram {label} '{name}' has non-numeric confidence {conf!r}")
            best[name] = max(float(conf), best.get(name, float(conf)))
    return [{label: name, "confidence": conf} for name, conf in best.items()]


def from_deepgram(response: Dict[str, Any]) -> Dict[str, Any]:
    """Flatten a raw Deepgram pre-recorded response into a provider payload.

    Structurally wrong sections raise ValidationError rather than being
    skipped.
    """
    results = response.get("results") if isinstance(response, dict) else None
    if not isinstance(results, dict):
        raise ValidationError("deepgram response has no 'results' object")
    try:
        alt = results["channels"][0]["alternatives"][0]
    except (KeyError, IndexError, TypeError):
        raise ValidationError("deepgram response has no channels[0].alternatives[0]") from None
    if not isinstance(alt, dict):
        raise ValidationError("deepgram channels[0].alternatives[0] must be an object")

    utterances = _field(results, "utterances", list, "results.") or _field(alt, "utterances", list, "alternative.")
    payload: Dict[str, Any] = {
        "transcript": alt.get("transcript") or "",
        "utterances": [
            {k: u[k] for k in ("transcript", "start", "end", "sentiment", "sentiment_score") if k in u}
            for u in _objects(utterances, "utterances")
        ],
        "topics": _merge_labels(results, "topics", "topic"),
        "intents": _merge_labels(results, "intents", "intent"),
    }

    average = _field(_field(results, "sentiments", dict, "results."), "average", dict, "results.sentiments.")
    if "sentiment" in average:
        payload["sentiment"] = {"sentiment": average["sentiment"],
                                "sentiment_score": average.get("sentiment_score", 0.0)}

    summary = _field(results, "summary", dict, "results.").get("short")
    if not summary:
        summaries = _objects(_field(alt, "summaries", list, "alternative."), "alternative.summaries")
        summary = " ".join(str(s.get("summary") or "") for s in summaries).strip()
    if summary:
        payload["summary"] = summary
    return payload
