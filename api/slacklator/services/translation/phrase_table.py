"""Static translations for common short phrases.

Greetings, thanks and yes/no answers make up a large share of chat traffic.
Answering them from this table costs nothing and never reaches the provider.
"""

from types import MappingProxyType
from typing import Mapping, Optional

PHRASE_LANGUAGES = ("en", "es", "de", "fr", "it", "pt")


def _row(en: str, es: str, de: str, fr: str, it: str, pt: str) -> Mapping[str, str]:
    return MappingProxyType(dict(zip(PHRASE_LANGUAGES, (en, es, de, fr, it, pt))))


_HELLO = _row("hello", "hola", "hallo", "bonjour", "ciao", "olá")
_HI = _row("hi", "hola", "hallo", "salut", "ciao", "oi")
_BYE = _row("bye", "adiós", "tschüss", "au revoir", "ciao", "tchau")
_THANKS = _row("thanks", "gracias", "danke", "merci", "grazie", "obrigado")
_YES = _row("yes", "sí", "ja", "oui", "sì", "sim")
_NO = _row("no", "no", "nein", "non", "no", "não")
_GOOD_MORNING = _row(
    "good morning", "buenos días", "guten morgen", "bonjour", "buongiorno", "bom dia"
)

COMMON_PHRASES: Mapping[str, Mapping[str, str]] = MappingProxyType(
    {
        # English
        "hello": _HELLO,
        "hi": _HI,
        "bye": _BYE,
        "thanks": _THANKS,
        "thank you": _row("thank you", "gracias", "danke", "merci", "grazie", "obrigado"),
        "yes": _YES,
        "no": _NO,
        "ok": _row("ok", "ok", "ok", "ok", "ok", "ok"),
        "okay": _row("okay", "vale", "okay", "d'accord", "va bene", "tudo bem"),
        "good morning": _GOOD_MORNING,
        "good night": _row(
            "good night",
            "buenas noches",
            "gute nacht",
            "bonne nuit",
            "buonanotte",
            "boa noite",
        ),
        "please": _row(
            "please", "por favor", "bitte", "s'il vous plaît", "per favore", "por favor"
        ),
        "sorry": _row(
            "sorry", "lo siento", "entschuldigung", "désolé", "scusa", "desculpe"
        ),
        "excuse me": _row(
            "excuse me",
            "disculpe",
            "entschuldigung",
            "excusez-moi",
            "scusi",
            "com licença",
        ),
        # Spanish
        "hola": _HELLO,
        "gracias": _THANKS,
        "sí": _YES,
        "adiós": _BYE,
        # German
        "hallo": _HELLO,
        "danke": _THANKS,
        "ja": _YES,
        "nein": _NO,
        "tschüss": _BYE,
        # French
        "bonjour": _HELLO,
        "merci": _THANKS,
        "oui": _YES,
        "non": _NO,
        "au revoir": _BYE,
        # Italian
        "ciao": _HI,
        "grazie": _THANKS,
        "sì": _YES,
        "buongiorno": _GOOD_MORNING,
    }
)


def normalize_phrase(text: str) -> str:
    """Lowercase and trim text for phrase and usage lookups."""
    return (text or "").strip().lower()


class PhraseTable:
    """Lookup over a fixed phrase -> {language: translation} mapping."""

    def __init__(self, phrases: Optional[Mapping[str, Mapping[str, str]]] = None):
        self.phrases = COMMON_PHRASES if phrases is None else phrases

    def lookup(self, text: str, target_lang: str) -> Optional[str]:
        """Return the stored translation, or None when the phrase or column is unmapped.

        Args:
            text: Raw or normalized input text.
            target_lang: Target language code.

        Returns:
            Translation string, or None.
        """
        row = self.phrases.get(normalize_phrase(text))
        if row is None:
            return None
        return row.get((target_lang or "").lower()) or None

    def __contains__(self, text: str) -> bool:
        return normalize_phrase(text) in self.phrases

    def __len__(self) -> int:
        return len(self.phrases)
