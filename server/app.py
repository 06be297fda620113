
import logging
from pathlib import Path
from typing import Any, Dict

from fastapi import FastAPI, Body
from fastapi.responses import JSONResponse

# Make local package importable
import sys
BASE_DIR = Path(__file__).resolve().parent.parent
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from callqa.core import config
from callqa.core.engine import evaluate
from callqa.core.errors import EmptyTranscriptError, InternalInvariantError, ValidationError
from callqa.core.events import LoggingSink
from callqa.core.profiles import PROFILES, get_profile
from callqa.core.provider import from_deepgram
from callqa.core.registry import registry_for

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s - %(message)s")
logger = logging.getLogger("callqa.server")

app = FastAPI(title="Call Quality Scorer API")

_sink = LoggingSink() if config.LOG_EVENTS else None


def _error(status: int, message: str, **extra) -> JSONResponse:
    return JSONResponse({"error": message, **extra}, status_code=status)


@app.post("/api/analyze-call")
def analyze_call(payload: Any = Body(...), locale: str = config.DEFAULT_LOCALE):
    # Accepts the normalized provider payload, or {"deepgram": <raw response>}
    try:
        if isinstance(payload, dict) and "deepgram" in payload:
            payload = from_deepgram(payload["deepgram"])
        card = evaluate(payload, get_profile(locale), sink=_sink)
    except ValidationError as e:
        return _error(400, str(e), details=e.errors)
    except EmptyTranscriptError:
        return _error(500, "Transcription failed")
    except InternalInvariantError:
        logger.exception("scoring invariant violated")
        return _error(500, "Processing failed")
    return card.to_dict()


@app.get("/api/parameters")
def parameters(locale: str = config.DEFAULT_LOCALE):
    try:
        profile = get_profile(locale)
    except ValidationError as e:
        return _error(400, str(e))
    return [p.to_dict() for p in registry_for(profile)]


@app.get("/api/profiles")
def profiles():
    return [{"code": code, "name": p.name, "feedback": p.feedback_strategy} for code, p in sorted(PROFILES.items())]
