"""
Coarse language identification of recipe documents, backed by
:py:mod:`langdetect`.
"""

from typing import Callable, List, Tuple

from langdetect import DetectorFactory, detect_langs  # type: ignore
from langdetect.lang_detect_exception import LangDetectException  # type: ignore


__all__ = ["LanguageIdentifier", "detect_languages"]


LanguageIdentifier = Callable[[str, int], List[Tuple[str, float]]]
"""
A function ``(text, top_n) -> [(language, confidence), ...]`` returning (at
most) the ``top_n`` most likely languages, most likely first.
"""

# Makes detection results deterministic.
DetectorFactory.seed = 0


def detect_languages(text: str, top_n: int = 1) -> List[Tuple[str, float]]:
    """
    Identify the language of a text, returning up to ``top_n`` ISO 639-1
    language codes (e.g. ``"en"``) with their probabilities.

    Text in which no language features can be found (e.g. an empty string or
    only numbers and punctuation) produces an empty list.
    """
    try:
        languages = detect_langs(text)
    except LangDetectException:
        return []
    return [(language.lang, language.prob) for language in languages[:top_n]]
