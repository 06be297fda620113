import re
from functools import lru_cache
from typing import Iterable, List

_APOSTROPHES = str.maketrans({"’": "'", "‘": "'", "ʼ": "'"})


def normalize_text(text: str) -> str:
    return " ".join(text.translate(_APOSTROPHES).casefold().split())


# Devanagari vowel signs and viramas are not \w; the danda (U+0964/5) is punctuation
_WORD = r"[\w\u0900-\u0963\u0966-\u097F]"


@lru_cache(maxsize=4096)
def _term_pattern(term: str):
    # whole words only: "id" must not hit "did", "नाम" must not hit "नामुमकिन"
    head = rf"(?<!{_WORD})" if re.match(_WORD, term[:1]) else ""
    tail = rf"(?!{_WORD})" if re.match(_WORD, term[-1:]) else ""
    return re.compile(head + re.escape(term) + tail)


def term_in(text: str, term: str) -> bool:
    """text must already be normalized"""
    return _term_pattern(normalize_text(term)).search(text) is not None


def find_terms(text: str, terms: Iterable[str]) -> List[str]:
    t = normalize_text(text)
    return [k for k in sorted(terms) if term_in(t, k)]


def has_any(text: str, terms: Iterable[str]) -> bool:
    t = normalize_text(text)
    return any(term_in(t, k) for k in sorted(terms))
