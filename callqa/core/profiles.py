import operator
from dataclasses import dataclass, fields
from typing import Dict, FrozenSet, List, Optional, Tuple

from .errors import UnknownLocaleError, ValidationError

GATE_OPS = {">=": operator.ge, "<": operator.lt, "==": operator.eq}

FEEDBACK_STRATEGIES = ("template", "clauses")

# Lexicons every profile must populate
REQUIRED_LEXICONS = (
    "greeting_lexicon", "urgency_lexicon", "objection_lexicon", "rebuttal_lexicon",
    "disclosure_lexicon", "identification_lexicon", "closing_lexicon", "gratitude_lexicon",
    "negative_language_lexicon", "disposition_lexicon", "causal_lexicon",
)


@dataclass(frozen=True)
class FeedbackGate:
    key: str
    op: str
    threshold: int
    text: str

    def fires(self, scores: Dict[str, int]) -> bool:
        return self.key in scores and GATE_OPS[self.op](scores[self.key], self.threshold)


@dataclass(frozen=True)
class LocaleProfile:
    """Lexicons, time windows and formula parameters for one language/market.

    Each profile is a standalone instance; nothing is inherited between
    locales. Lexicon fields accept any iterable of strings and are frozen on
    construction, after which the profile is validated and never changes.
    A time window of ``None`` means unbounded.
    """
    code: str
    name: str

    greeting_lexicon: FrozenSet[str]
    urgency_lexicon: FrozenSet[str]
    objection_lexicon: FrozenSet[str]
    rebuttal_lexicon: FrozenSet[str]
    disclosure_lexicon: FrozenSet[str]
    identification_lexicon: FrozenSet[str]
    closing_lexicon: FrozenSet[str]
    gratitude_lexicon: FrozenSet[str]
    negative_language_lexicon: FrozenSet[str]
    disposition_lexicon: FrozenSet[str]
    causal_lexicon: FrozenSet[str]
    disposition_intents: FrozenSet[str] = frozenset()
    objection_subtopics: Tuple[Tuple[str, FrozenSet[str]], ...] = ()

    greeting_seconds: Optional[float] = 5.0
    disclosure_seconds: Optional[float] = None
    identification_seconds: Optional[float] = None

    greeting_requires_lexicon: bool = True

    urgency_increment: int = 3
    urgency_compound: bool = False
    interrogative_markers: FrozenSet[str] = frozenset()
    question_tokens: FrozenSet[str] = frozenset()
    deadline_tokens: FrozenSet[str] = frozenset()
    urgency_question_bonus: int = 0
    urgency_deadline_bonus: int = 0
    urgency_penalty: int = 0

    objection_weight: int = 3
    rebuttal_weight: int = 0
    gap_weight: int = 0

    etiquette_base: int = 10
    sentiment_cutoffs: Tuple[Tuple[float, int], ...] = ((0.0, 4),)
    etiquette_floor_delta: int = 0

    disposition_partial_credit: bool = False

    severe_negative_cutoff: Optional[float] = None
    tone_bands: Tuple[Tuple[float, int], ...] = ()

    feedback_strategy: str = "template"
    feedback_gates: Tuple[FeedbackGate, ...] = ()
    feedback_connector: str = "; "
    sentiment_clauses: Tuple[Tuple[str, str], ...] = ()
    fallback_clause: str = "the agent showed adequate performance overall"

    def __post_init__(self):
        for f in fields(self):
            if f.type == FrozenSet[str]:
                object.__setattr__(self, f.name, frozenset(getattr(self, f.name)))
        subtopics = tuple((name, frozenset(terms)) for name, terms in self.objection_subtopics)
        object.__setattr__(self, "objection_subtopics", subtopics)
        object.__setattr__(self, "sentiment_cutoffs", tuple(tuple(c) for c in self.sentiment_cutoffs))
        object.__setattr__(self, "tone_bands", tuple(tuple(b) for b in self.tone_bands))
        object.__setattr__(self, "feedback_gates", tuple(self.feedback_gates))
        object.__setattr__(self, "sentiment_clauses", tuple(tuple(c) for c in self.sentiment_clauses))
        problems = self._problems()
        if problems:
            raise ValidationError(f"invalid locale profile '{self.code}': " + "; ".join(problems), problems)

    def _problems(self) -> List[str]:
        out = []
        for name in REQUIRED_LEXICONS:
            if not getattr(self, name):
                out.append(f"{name} is empty")
        if not self.gratitude_lexicon <= self.closing_lexicon:
            out.append("gratitude_lexicon must be a subset of closing_lexicon")
        for name in ("greeting_seconds", "disclosure_seconds", "identification_seconds"):
            v = getattr(self, name)
            if v is not None and v < 0:
                out.append(f"{name} must be >= 0")
        if self.urgency_compound and not (self.interrogative_markers and self.question_tokens and self.deadline_tokens):
            out.append("compound urgency needs interrogative_markers, question_tokens and deadline_tokens")
        if min(self.urgency_increment, self.urgency_question_bonus, self.urgency_deadline_bonus, self.urgency_penalty) < 0:
            out.append("urgency increments and penalty must be >= 0")
        if min(self.objection_weight, self.rebuttal_weight, self.gap_weight) < 0:
            out.append("rebuttal formula weights must be >= 0")

        # cutoffs: thresholds strictly descending, deltas non-increasing
        if not self.sentiment_cutoffs:
            out.append("sentiment_cutoffs is empty")
        thresholds = [t for t, _ in self.sentiment_cutoffs]
        deltas = [d for _, d in self.sentiment_cutoffs] + [self.etiquette_floor_delta]
        if any(a <= b for a, b in zip(thresholds, thresholds[1:])):
            out.append("sentiment_cutoffs thresholds must be strictly descending")
        if any(a < b for a, b in zip(deltas, deltas[1:])):
            out.append("sentiment_cutoffs deltas must not increase as thresholds fall")

        edges = [e for e, _ in self.tone_bands]
        band_scores = [s for _, s in self.tone_bands]
        if any(a >= b for a, b in zip(edges, edges[1:])) or any(a > b for a, b in zip(band_scores, band_scores[1:])):
            out.append("tone_bands must ascend in both edge and score")
        if edges and self.severe_negative_cutoff is not None and edges[0] < self.severe_negative_cutoff:
            out.append("first tone band edge lies below the severe-negative cutoff")

        if self.feedback_strategy not in FEEDBACK_STRATEGIES:
            out.append(f"feedback_strategy must be one of {FEEDBACK_STRATEGIES}")
        if self.feedback_strategy == "clauses" and not self.feedback_gates:
            out.append("clause-assembly feedback needs feedback_gates")
        for g in self.feedback_gates:
            if g.op not in GATE_OPS:
                out.append(f"unknown gate operator '{g.op}'")
        return out

    @property
    def graded_parameters(self) -> FrozenSet[str]:
        """PASS_FAIL parameters this profile can award intermediate values for."""
        out = set()
        if self.disposition_partial_credit:
            out.add("correctDisposition")
        if any(0 < s for _, s in self.tone_bands):
            out.add("fatalToneLanguage")
        return frozenset(out)

    def subtopic_lexicon(self) -> Dict[str, FrozenSet[str]]:
        return dict(self.objection_subtopics)


ENGLISH = LocaleProfile(
    code="en",
    name="English",
    greeting_lexicon={"hello", "hi", "good morning", "good afternoon", "good evening", "welcome",
                      "thank you for calling"},
    urgency_lexicon={"urgent", "urgently", "immediately", "asap", "critical", "important"},
    objection_lexicon={"can't", "cannot", "won't", "don't", "not possible", "too expensive"},
    rebuttal_lexicon={"i understand", "however", "let me explain", "we can offer", "the benefit",
                      "option", "waive", "instead"},
    disclosure_lexicon={"recording", "recorded", "tape", "monitoring", "monitored"},
    identification_lexicon={"name", "id", "account", "customer"},
    closing_lexicon={"thank", "thanks", "thank you", "appreciate", "goodbye", "bye"},
    gratitude_lexicon={"thank", "thanks", "thank you", "appreciate"},
    negative_language_lexicon={"abuse", "abused", "abusing", "abusive", "threat", "threats", "threaten",
                               "threatened", "threatening", "angry", "angrily", "rude", "rudely", "rudeness"},
    disposition_lexicon={"disposition", "category", "remark", "marking", "promise to pay", "callback"},
    causal_lexicon={"because", "reason", "due to", "since"},
    disposition_intents={"disposition", "category"},
    objection_subtopics=(
        ("penalty", {"penalty", "late fee", "fine", "charges"}),
        ("payment", {"payment", "pay", "emi", "amount", "money"}),
        ("time", {"time", "later", "tomorrow", "next week", "busy"}),
    ),
    greeting_seconds=5.0,
    greeting_requires_lexicon=True,
    urgency_increment=3,
    objection_weight=3,
    etiquette_base=10,
    sentiment_cutoffs=((0.0, 4),),
    feedback_strategy="template",
)


HINDI = LocaleProfile(
    code="hi",
    name="Hindi",
    greeting_lexicon={"namaste", "namaskar", "नमस्ते", "नमस्कार", "hello", "सुप्रभात"},
    urgency_lexicon={"turant", "jaldi", "abhi", "zaroori", "jaruri", "तुरंत", "जल्दी", "अभी", "ज़रूरी",
                     "जरूरी", "आवश्यक"},
    objection_lexicon={"nahi de sakta", "nahi de sakti", "nahi kar sakta", "nahi kar sakti", "sambhav nahi",
                       "bahut mehenga", "paise nahi", "नहीं दे सकता", "नहीं दे सकती", "नहीं कर सकता",
                       "नहीं कर सकती", "संभव नहीं", "बहुत महंगा", "पैसे नहीं"},
    rebuttal_lexicon={"samajh sakta", "samajh sakti", "lekin", "magar", "vikalp", "suvidha", "समझ सकता",
                      "समझ सकती", "लेकिन", "मगर", "विकल्प", "सुविधा"},
    disclosure_lexicon={"recording", "recorded", "record", "रिकॉर्ड", "रिकॉर्डिंग"},
    identification_lexicon={"naam", "khata", "account", "grahak", "नाम", "खाता", "ग्राहक", "आईडी"},
    closing_lexicon={"dhanyavaad", "dhanyawad", "shukriya", "thank you", "alvida", "धन्यवाद", "शुक्रिया",
                     "अलविदा"},
    gratitude_lexicon={"dhanyavaad", "dhanyawad", "shukriya", "thank you", "धन्यवाद", "शुक्रिया"},
    negative_language_lexicon={"gaali", "dhamki", "badtameez", "bewakoof", "गाली", "धमकी", "बदतमीज़",
                               "बेवकूफ"},
    disposition_lexicon={"disposition", "shreni", "darj", "tippani", "श्रेणी", "दर्ज", "टिप्पणी"},
    causal_lexicon={"kyunki", "kyonki", "wajah se", "karan", "क्योंकि", "वजह से", "कारण"},
    disposition_intents={"disposition", "category"},
    objection_subtopics=(
        ("penalty", {"penalty", "jurmana", "जुर्माना", "late fee"}),
        ("payment", {"payment", "bhugtan", "paise", "भुगतान", "पैसे"}),
        ("time", {"samay", "baad mein", "kal", "समय", "बाद में", "कल"}),
    ),
    greeting_seconds=5.0,
    disclosure_seconds=30.0,
    identification_seconds=60.0,
    greeting_requires_lexicon=False,
    urgency_increment=2,
    urgency_compound=True,
    interrogative_markers={"?", "kya", "क्या"},
    question_tokens={"kyun", "kyon", "kab", "kaise", "क्यों", "कब", "कैसे"},
    deadline_tokens={"aaj", "aaj hi", "is hafte", "kal tak", "आज", "आज ही", "इस हफ्ते", "कल तक"},
    urgency_question_bonus=2,
    urgency_deadline_bonus=1,
    urgency_penalty=2,
    objection_weight=3,
    rebuttal_weight=4,
    gap_weight=2,
    etiquette_base=10,
    sentiment_cutoffs=((0.5, 5), (0.0, 3), (-0.3, 0)),
    etiquette_floor_delta=-4,
    disposition_partial_credit=True,
    severe_negative_cutoff=-0.6,
    tone_bands=((-0.3, 5), (0.0, 10)),
    feedback_strategy="clauses",
    feedback_gates=(
        FeedbackGate("collectionUrgency", ">=", 10, "the agent created strong payment urgency"),
        FeedbackGate("collectionUrgency", "<", 5, "the agent did not create enough urgency"),
        FeedbackGate("rebuttalCustomerHandling", ">=", 10, "objections were handled effectively"),
        FeedbackGate("rebuttalCustomerHandling", "<", 5, "objection handling needs improvement"),
        FeedbackGate("callEtiquette", ">=", 12, "call etiquette was good"),
        FeedbackGate("callDisclaimer", "==", 0, "the call disclaimer was missed"),
        FeedbackGate("fatalTapeDiscloser", "==", 0, "the customer was not informed about the recording"),
        FeedbackGate("fatalIdentification", "==", 0, "identification was not completed"),
    ),
    feedback_connector="; ",
    sentiment_clauses=(
        ("positive", "customer sentiment stayed positive"),
        ("negative", "customer sentiment was negative"),
    ),
)


PROFILES: Dict[str, LocaleProfile] = {p.code: p for p in (ENGLISH, HINDI)}


def get_profile(code: str) -> LocaleProfile:
    try:
        return PROFILES[code.lower()]
    except KeyError:
        raise UnknownLocaleError(f"unknown locale '{code}' (known: {', '.join(sorted(PROFILES))})") from None
