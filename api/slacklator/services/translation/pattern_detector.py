"""Stop-word based language guessing that never leaves the process."""

import re
from typing import ClassVar, Dict, Mapping, Optional, Pattern, Tuple


def _stop_words(*words: str) -> Pattern[str]:
    return re.compile(r"\b(?:" + "|".join(re.escape(w) for w in words) + r")\b")


class PatternDetector:
    """Guess a text's language by counting per-language stop words.

    The language with the most matches wins. Equal counts go to the language
    registered first in LANGUAGE_PATTERNS, which is deterministic but otherwise
    arbitrary. Romance languages share many short function words, so short
    mixed texts frequently end in such a tie.
    """

    # Registration order is the tie-break order.
    LANGUAGE_PATTERNS: ClassVar[Tuple[Tuple[str, Pattern[str]], ...]] = (
        (
            "en",
            _stop_words(
                "the", "and", "is", "are", "was", "were", "have", "has", "will",
                "would", "could", "should", "that", "this", "with", "from", "they",
                "there", "where", "what", "when", "how",
            ),
        ),
        (
            "es",
            _stop_words(
                "el", "la", "los", "las", "es", "son", "y", "que", "de", "en",
                "un", "una", "para", "por", "con", "se", "te", "me", "le", "lo",
                "su", "sus",
            ),
        ),
        (
            "de",
            _stop_words(
                "der", "die", "das", "und", "ist", "sind", "war", "waren", "haben",
                "hat", "wird", "wurde", "dass", "mit", "von", "zu", "im", "am",
                "ein", "eine",
            ),
        ),
        (
            "fr",
            _stop_words(
                "le", "la", "les", "et", "est", "sont", "était", "étaient",
                "avoir", "a", "va", "que", "de", "dans", "un", "une", "pour",
                "par", "avec", "se", "te", "me",
            ),
        ),
        (
            "it",
            _stop_words(
                "il", "la", "i", "le", "è", "sono", "era", "erano", "avere", "ha",
                "sarà", "che", "di", "in", "un", "una", "per", "da", "con", "si",
                "te", "me",
            ),
        ),
        (
            "pt",
            _stop_words(
                "o", "a", "os", "as", "é", "são", "era", "eram", "ter", "tem",
                "vai", "que", "de", "em", "um", "uma", "para", "por", "com", "se",
                "te", "me",
            ),
        ),
    )

    @property
    def supported_languages(self) -> Tuple[str, ...]:
        return tuple(lang for lang, _ in self.LANGUAGE_PATTERNS)

    def score(self, text: str) -> Dict[str, int]:
        """Count stop-word matches per language, in registration order."""
        text_lower = (text or "").lower()
        return {
            lang: len(pattern.findall(text_lower))
            for lang, pattern in self.LANGUAGE_PATTERNS
        }

    def detect(self, text: str) -> Optional[str]:
        """Return the best-scoring language code, or None if nothing matched."""
        best_lang: Optional[str] = None
        best_score = 0
        scores: Mapping[str, int] = self.score(text)
        for lang, count in scores.items():
            # Strictly greater keeps the earliest registered language on ties
            if count > best_score:
                best_lang = lang
                best_score = count
        return best_lang
