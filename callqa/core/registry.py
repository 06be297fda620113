from dataclasses import replace
from typing import Tuple

from .models import Parameter, ParameterKind
from .profiles import LocaleProfile

PF = ParameterKind.PASS_FAIL
SC = ParameterKind.SCORE

PARAMETERS: Tuple[Parameter, ...] = (
    Parameter("greeting", "Greeting", 5, PF, "Call opening within 5 seconds"),
    Parameter("collectionUrgency", "Collection Urgency", 15, SC, "Create urgency, cross-questioning"),
    Parameter("rebuttalCustomerHandling", "Rebuttal Handling", 15, SC, "Address penalties, objections"),
    Parameter("callEtiquette", "Call Etiquette", 15, SC, "Tone, empathy, clear speech"),
    Parameter("callDisclaimer", "Call Disclaimer", 5, PF, "Take permission before ending"),
    Parameter("correctDisposition", "Correct Disposition", 10, PF, "Use correct category with remark"),
    Parameter("callClosing", "Call Closing", 5, PF, "Thank the customer properly"),
    Parameter("fatalIdentification", "Identification", 5, PF, "Missing agent/customer info"),
    Parameter("fatalTapeDiscloser", "Tape Disclosure", 10, PF, "Inform customer about recording"),
    Parameter("fatalToneLanguage", "Tone & Language", 15, PF, "No abusive or threatening speech"),
)


def registry_for(profile: LocaleProfile) -> Tuple[Parameter, ...]:
    """Registry with the parameters this profile grades switched to SCORE."""
    graded = profile.graded_parameters
    return tuple(replace(p, kind=SC) if p.key in graded else p for p in PARAMETERS)


def total_weight(registry: Tuple[Parameter, ...]) -> int:
    return sum(p.weight for p in registry)
