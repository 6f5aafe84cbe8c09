"""Languages that resources can be generated for."""

from __future__ import annotations

from typing import Iterable, List

from .models import Language

SUPPORTED_LANGUAGES: List[Language] = [
    Language("en", "English"),
    Language("es", "Spanish"),
    Language("fr", "French"),
    Language("zh-Hans", "Chinese (Simplified)"),
    Language("zh-Hant", "Chinese (Traditional)"),
]


class UnknownLanguage(LookupError):
    """Raised when a language code is not configured."""


def find_language(code: str, languages: Iterable[Language] = SUPPORTED_LANGUAGES) -> Language:
    """Look up a language by code, ignoring case."""

    wanted = code.strip().lower()
    available = list(languages)
    for language in available:
        if language.code.lower() == wanted:
            return language
    codes = ", ".join(language.code for language in available)
    raise UnknownLanguage(f"Unknown language '{code}'. Available: {codes}")


__all__ = ["SUPPORTED_LANGUAGES", "UnknownLanguage", "find_language"]
