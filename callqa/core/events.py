"""
Structured scoring events.

Scorers report what they matched and the intermediate values they used
through an optional sink instead of printing. A sink is any callable taking
a ``ScoringEvent``.
"""
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScoringEvent:
    parameter: str
    score: int
    matched_terms: Tuple[str, ...] = ()
    details: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


EventSink = Callable[[ScoringEvent], None]


class CollectingSink:
    """Keeps every event in memory; used by the CLI --explain flag and tests."""

    def __init__(self):
        self.events: List[ScoringEvent] = []

    def __call__(self, event: ScoringEvent):
        self.events.append(event)

    def for_parameter(self, key: str) -> Optional[ScoringEvent]:
        for ev in self.events:
            if ev.parameter == key:
                return ev
        return None


class LoggingSink:
    def __init__(self, log: logging.Logger = logger, level: int = logging.DEBUG):
        self.log = log
        self.level = level

    def __call__(self, event: ScoringEvent):
        self.log.log(self.level, "scored %s=%d matched=%s details=%s",
                     event.parameter, event.score, list(event.matched_terms), event.details)


def emit(sink: Optional[EventSink], parameter: str, score: int, matched=(), **details):
    if sink is None:
        return
    sink(ScoringEvent(parameter=parameter, score=score, matched_terms=tuple(matched), details=details))
