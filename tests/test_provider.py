import pytest

from callqa.core.errors import EmptyTranscriptError, ValidationError
from callqa.core.models import Polarity
from callqa.core.provider import from_deepgram, normalize


def payload(**kw):
    base = {
        "transcript": "hello there",
        "utterances": [{"transcript": "hello there", "start": 0.5, "end": 1.5}],
    }
    base.update(kw)
    return base


class TestNormalize:
    def test_overall_sentiment_gets_a_label(self):
        call = normalize(payload(sentiment={"overall": -0.2}))
        assert call.sentiment.label == Polarity.NEGATIVE
        assert call.sentiment.score == -0.2

    def test_labelled_sentiment_kept(self):
        call = normalize(payload(sentiment={"sentiment": "neutral", "sentiment_score": -0.1}))
        assert call.sentiment.label == Polarity.NEUTRAL
        assert call.sentiment.score == -0.1

    def test_scores_are_clamped(self):
        call = normalize(payload(sentiment={"overall": 3.0}))
        assert call.sentiment.score == 1.0

    def test_missing_sentiment_falls_back_to_vader(self):
        call = normalize(payload(transcript="This is great, thank you so much!"))
        assert call.sentiment.label == Polarity.POSITIVE
        assert 0 < call.sentiment.score <= 1

    def test_topic_confidence_alias(self):
        call = normalize(payload(topics=[{"topic": "loan", "confidence_score": 0.7}],
                                 intents=[{"intent": "disposition", "confidence": 0.4}]))
        assert call.topics[0].label == "loan"
        assert call.topics[0].confidence == 0.7
        assert call.intents[0].label == "disposition"

    def test_utterances_keep_order_and_times(self):
        call = normalize(payload(utterances=[
            {"transcript": "a", "start": 0.0, "end": 1.0},
            {"transcript": "b", "start": 2.0, "end": 3.0, "sentiment": "negative", "sentiment_score": -0.5},
        ]))
        assert [u.text for u in call.utterances] == ["a", "b"]
        assert call.utterances[1].start_seconds == 2.0
        assert call.utterances[1].sentiment_label == Polarity.NEGATIVE

    def test_empty_summary_is_none(self):
        assert normalize(payload(summary="")).summary is None


class TestRejects:
    def test_missing_start(self):
        with pytest.raises(ValidationError) as exc:
            normalize(payload(utterances=[{"transcript": "hi", "end": 1.0}]))
        assert exc.value.errors[0]["loc"] == ["utterances", 0, "start"]

    def test_end_before_start(self):
        with pytest.raises(ValidationError):
            normalize(payload(utterances=[{"transcript": "hi", "start": 5.0, "end": 1.0}]))

    def test_negative_time(self):
        with pytest.raises(ValidationError):
            normalize(payload(utterances=[{"transcript": "hi", "start": -1.0, "end": 1.0}]))

    def test_missing_utterances(self):
        with pytest.raises(ValidationError):
            normalize({"transcript": "hi"})

    def test_not_an_object(self):
        with pytest.raises(ValidationError):
            normalize(["hi"])

    def test_unknown_sentiment_label(self):
        with pytest.raises(ValidationError):
            normalize(payload(sentiment={"sentiment": "mixed", "sentiment_score": -0.9}))

    def test_misspelled_sentiment_key(self):
        with pytest.raises(ValidationError):
            normalize(payload(sentiment={"overal": -0.9}))

    def test_empty_sentiment_object_uses_vader(self):
        call = normalize(payload(transcript="This is great, thank you so much!", sentiment={}))
        assert call.sentiment.label == Polarity.POSITIVE

    def test_blank_transcript(self):
        with pytest.raises(EmptyTranscriptError):
            normalize(payload(transcript="  \n"))


def deepgram_response():
    return {
        "results": {
            "channels": [{"alternatives": [{
                "transcript": "hello this call is recorded",
                "summaries": [{"summary": "Agent greeted the customer."}],
            }]}],
            "utterances": [
                {"transcript": "hello", "start": 0.2, "end": 0.8, "confidence": 0.99,
                 "sentiment": "positive", "sentiment_score": 0.4},
                {"transcript": "this call is recorded", "start": 1.0, "end": 2.5},
            ],
            "topics": {"segments": [
                {"topics": [{"topic": "greeting", "confidence_score": 0.3}]},
                {"topics": [{"topic": "greeting", "confidence_score": 0.8},
                            {"topic": "recording", "confidence_score": 0.5}]},
            ]},
            "intents": {"segments": [{"intents": [{"intent": "Disposition", "confidence_score": 0.6}]}]},
            "sentiments": {"average": {"sentiment": "positive", "sentiment_score": 0.3}},
        }
    }


class TestDeepgram:
    def test_flattens_response(self):
        data = from_deepgram(deepgram_response())
        assert data["transcript"] == "hello this call is recorded"
        assert data["utterances"][0] == {"transcript": "hello", "start": 0.2, "end": 0.8,
                                         "sentiment": "positive", "sentiment_score": 0.4}
        assert data["topics"] == [{"topic": "greeting", "confidence": 0.8},
                                  {"topic": "recording", "confidence": 0.5}]
        assert data["intents"] == [{"intent": "Disposition", "confidence": 0.6}]
        assert data["sentiment"] == {"sentiment": "positive", "sentiment_score": 0.3}
        assert data["summary"] == "Agent greeted the customer."

    def test_result_normalizes(self):
        call = normalize(from_deepgram(deepgram_response()))
        assert len(call.utterances) == 2
        assert call.sentiment.label == Polarity.POSITIVE

    def test_short_summary_preferred(self):
        raw = deepgram_response()
        raw["results"]["summary"] = {"short": "Short one."}
        assert from_deepgram(raw)["summary"] == "Short one."

    def test_missing_results(self):
        with pytest.raises(ValidationError):
            from_deepgram({"metadata": {}})
        with pytest.raises(ValidationError):
            from_deepgram({"results": {"channels": []}})
        with pytest.raises(ValidationError):
            from_deepgram("nope")

    def test_wrongly_shaped_sections(self):
        raw = deepgram_response()
        raw["results"]["topics"] = []
        with pytest.raises(ValidationError):
            from_deepgram(raw)

        raw = deepgram_response()
        raw["results"]["utterances"].append("not an utterance")
        with pytest.raises(ValidationError):
            from_deepgram(raw)

        raw = deepgram_response()
        raw["results"]["intents"]["segments"][0]["intents"][0]["confidence_score"] = "high"
        with pytest.raises(ValidationError):
            from_deepgram(raw)

        raw = deepgram_response()
        raw["results"]["channels"][0]["alternatives"][0] = "hello"
        with pytest.raises(ValidationError):
            from_deepgram(raw)
