import logging
from dataclasses import dataclass
from typing import Dict, Sequence

from .errors import InternalInvariantError
from .models import Parameter, ParameterKind

logger = logging.getLogger(__name__)

PERCENT_BASIS = 100


@dataclass(frozen=True)
class Aggregate:
    scores: Dict[str, int]
    percentage: float


def _fail(msg: str):
    logger.error("score invariant violated: %s", msg)
    raise InternalInvariantError(msg)


def check_registry(registry: Sequence[Parameter]):
    keys = [p.key for p in registry]
    if len(set(keys)) != len(keys):
        _fail("duplicate parameter keys in registry")
    for p in registry:
        if p.weight <= 0:
            _fail(f"parameter '{p.key}' has non-positive weight {p.weight}")
    total = sum(p.weight for p in registry)
    if total != PERCENT_BASIS:
        _fail(f"registry weights sum to {total}, expected {PERCENT_BASIS}")


def aggregate(scores: Dict[str, int], registry: Sequence[Parameter]) -> Aggregate:
    """Check every score against its parameter and compute the percentage.

    Out-of-range values are reported, never clamped: they mean a scorer is
    broken.
    """
    check_registry(registry)
    expected = {p.key for p in registry}
    missing = expected - set(scores)
    extra = set(scores) - expected
    if missing:
        _fail(f"no score for {sorted(missing)}")
    if extra:
        _fail(f"scores for unknown parameters {sorted(extra)}")

    for p in registry:
        v = scores[p.key]
        if isinstance(v, bool) or not isinstance(v, int):
            _fail(f"{p.key} scored non-integer {v!r}")
        if not 0 <= v <= p.weight:
            _fail(f"{p.key} scored {v}, outside [0, {p.weight}]")
        if p.kind == ParameterKind.PASS_FAIL and v not in (0, p.weight):
            _fail(f"{p.key} is PASS_FAIL but scored {v}")

    total = sum(scores[p.key] for p in registry)
    ordered = {p.key: scores[p.key] for p in registry}
    return Aggregate(scores=ordered, percentage=total * 100.0 / PERCENT_BASIS)
