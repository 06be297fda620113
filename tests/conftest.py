import pytest

from callqa.core.models import CallSentiment, CallTranscript, Intent, Topic, Utterance, polarity_of


def build_call(lines, sentiment=0.0, topics=(), intents=(), summary=None):
    """lines: [(start_seconds, text), ...]"""
    utts = tuple(Utterance(text=t, start_seconds=s, end_seconds=s + 2.0) for s, t in lines)
    return CallTranscript(
        text=" ".join(t for _, t in lines) or "...",
        utterances=utts,
        sentiment=CallSentiment(label=polarity_of(sentiment), score=sentiment),
        topics=tuple(Topic(label, conf) for label, conf in topics),
        intents=tuple(Intent(label, conf) for label, conf in intents),
        summary=summary,
    )


@pytest.fixture
def make_call():
    return build_call


@pytest.fixture
def english_payload():
    return {
        "transcript": "Hello, good morning ... Thank you for your time, have a good day.",
        "utterances": [
            {"transcript": "Hello, good morning, this is Priya from ABC Finance. This call is being recorded for quality purposes.",
             "start": 1.0, "end": 7.0},
            {"transcript": "Can I confirm your name and account number?", "start": 8.0, "end": 12.0},
            {"transcript": "Yes, this is Raj. But I can't pay the penalty this month.", "start": 15.0, "end": 20.0},
            {"transcript": "I understand. However, this payment is urgent and important, we can offer to waive "
                           "the late fee if you pay immediately.", "start": 22.0, "end": 33.0},
            {"transcript": "Okay, I will pay on Friday.", "start": 35.0, "end": 38.0},
            {"transcript": "I am marking the disposition as promise to pay because you agreed to Friday.",
             "start": 40.0, "end": 46.0},
            {"transcript": "Thank you for your time, have a good day.", "start": 48.0, "end": 51.0},
        ],
        "sentiment": {"overall": 0.35},
        "topics": [
            {"topic": "payment", "confidence": 0.9},
            {"topic": "penalty", "confidence": 0.7},
            {"topic": "loan", "confidence": 0.4},
        ],
        "intents": [],
        "summary": "Customer agreed to pay on Friday.",
    }


@pytest.fixture
def hindi_payload():
    return {
        "transcript": "नमस्ते ... धन्यवाद, आपका दिन शुभ हो।",
        "utterances": [
            {"transcript": "नमस्ते, मैं एबीसी फाइनेंस से बोल रही हूँ। यह कॉल रिकॉर्ड की जा रही है।", "start": 2.0, "end": 8.0},
            {"transcript": "क्या मैं आपका नाम और खाता संख्या जान सकती हूँ?", "start": 9.0, "end": 14.0},
            {"transcript": "मैं अभी पैसे नहीं दे सकता, जुर्माना बहुत है।", "start": 16.0, "end": 22.0},
            {"transcript": "मैं समझ सकती हूँ, लेकिन आज ही भुगतान करना जरूरी है। आप कब तक भर देंगे?", "start": 24.0, "end": 31.0},
            {"transcript": "ठीक है, कल तक कर दूँगा।", "start": 33.0, "end": 36.0},
            {"transcript": "मैंने टिप्पणी दर्ज कर दी है क्योंकि आपने कल का वादा किया है।", "start": 41.0, "end": 47.0},
            {"transcript": "धन्यवाद, आपका दिन शुभ हो।", "start": 50.0, "end": 53.0},
        ],
        "sentiment": {"sentiment": "neutral", "sentiment_score": -0.1},
        "topics": [],
        "intents": [],
    }
