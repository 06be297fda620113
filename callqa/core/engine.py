import logging
from typing import Any, Dict, Optional, Sequence, Union

from .aggregator import aggregate
from .errors import InternalInvariantError
from .events import EventSink
from .feedback import synthesize_feedback
from .models import CallTranscript, Parameter, ScoreCard
from .observation import synthesize_observation
from .profiles import LocaleProfile, get_profile
from .provider import normalize
from .registry import registry_for
from .scorers import SCORERS

logger = logging.getLogger(__name__)


def score(transcript: CallTranscript, profile: LocaleProfile, registry: Sequence[Parameter],
          sink: Optional[EventSink] = None) -> Dict[str, int]:
    """Run the scorer registered for every parameter in ``registry``."""
    out: Dict[str, int] = {}
    for p in registry:
        scorer = SCORERS.get(p.key)
        if scorer is None:
            logger.error("no scorer registered for parameter '%s'", p.key)
            raise InternalInvariantError(f"no scorer registered for parameter '{p.key}'")
        out[p.key] = scorer(transcript, profile, p.weight, sink)
    return out


def evaluate(data: Union[CallTranscript, Dict[str, Any]],
             profile: Union[LocaleProfile, str],
             registry: Optional[Sequence[Parameter]] = None,
             sink: Optional[EventSink] = None) -> ScoreCard:
    """Normalize (if needed), score, aggregate and describe one call.

    Raises ValidationError / EmptyTranscriptError for bad input and
    InternalInvariantError when a score breaks its parameter's bounds; a
    ScoreCard is only returned when all ten parameters were scored.
    """
    if isinstance(profile, str):
        profile = get_profile(profile)
    transcript = data if isinstance(data, CallTranscript) else normalize(data)
    registry = tuple(registry) if registry is not None else registry_for(profile)

    scores = score(transcript, profile, registry, sink)
    agg = aggregate(scores, registry)
    feedback = synthesize_feedback(agg.scores, agg.percentage, transcript.sentiment, transcript.summary, profile)
    observation = synthesize_observation(transcript.utterances, transcript.topics, transcript.sentiment, profile)
    logger.debug("scored call with %d utterances on profile %s: %.1f%%",
                 len(transcript.utterances), profile.code, agg.percentage)
    return ScoreCard(
        scores=agg.scores,
        percentage=agg.percentage,
        overall_feedback=feedback,
        observation=observation,
        parameters=registry,
    )
