"""Language code table and start-of-transcript prefix.

The table pairs each Whisper language code with its vocabulary id. Codes
that are not in the table fall back to Chinese ("zh", table index 51)
without raising; a warning is logged so the fallback is visible.
"""

from __future__ import annotations

import logging
from types import MappingProxyType
from typing import Tuple

from whisper_recognition.decoder.tokens import NO_TIMESTAMPS, SOT, TRANSCRIBE

logger = logging.getLogger(__name__)

LANGUAGE_TOKENS: Tuple[int, ...] = (
    50273, 50303, 50288, 50261, 50342, 50299, 50330, 50302, 50336, 50267, 50287, 50292, 50294, 50323, 50348, 50291, 50317,
    50326, 50289, 50356, 50290, 50282, 50347, 50331, 50354, 50264, 50333, 50296, 50339, 50318, 50305, 50293, 50280, 50322,
    50312, 50306, 50353, 50285, 50275, 50340, 50278, 50268, 50337, 50316, 50266, 50307, 50310, 50338, 50334, 50313, 50351,
    50260, 50344, 50283, 50327, 50272, 50324, 50276, 50281, 50301, 50332, 50300, 50309, 50343, 50349, 50335, 50320, 50259,
    50284, 50304, 50277, 50311, 50319, 50314, 50352, 50328, 50286, 50274, 50329, 50270, 50269, 50350, 50263, 50345, 50298,
    50279, 50297, 50262, 50315, 50321, 50308, 50355, 50265, 50346, 50295, 50271, 50357, 50341, 50325,
)

LANGUAGE_CODES: Tuple[str, ...] = (
    "sv", "sr", "no", "de", "nn", "te", "be", "bn", "lo", "pt", "ta", "bg", "la", "km", "tl", "hr", "sq", "so", "th", "jw",
    "ur", "ms", "bo", "tg", "ha", "ko", "gu", "ml", "ht", "sw", "sl", "lt", "uk", "si", "hy", "kn", "ln", "da", "id", "ps",
    "vi", "tr", "uz", "kk", "ja", "et", "eu", "fo", "am", "ne", "tt", "zh", "sa", "cs", "af", "ar", "sn", "hi", "el", "lv",
    "sd", "fa", "br", "mt", "mg", "yi", "mr", "en", "ro", "az", "fi", "is", "gl", "mn", "haw", "oc", "hu", "it", "ka", "ca",
    "pl", "as", "ru", "lb", "sk", "he", "cy", "es", "bs", "pa", "mk", "ba", "fr", "my", "mi", "nl", "su", "tk", "yo",
)

LANGUAGES = MappingProxyType(dict(zip(LANGUAGE_CODES, LANGUAGE_TOKENS)))

DEFAULT_LANGUAGE_INDEX = 51
DEFAULT_LANGUAGE = LANGUAGE_CODES[DEFAULT_LANGUAGE_INDEX]
DEFAULT_LANGUAGE_TOKEN = LANGUAGE_TOKENS[DEFAULT_LANGUAGE_INDEX]


def detect_language(language: str) -> int:
    """Map a language code to its vocabulary id.

    Exact, case-sensitive match. Unknown codes return the "zh" id.
    """
    token = LANGUAGES.get(language)
    if token is None:
        # TODO: decide whether unknown codes should raise ConfigError instead
        logger.warning(
            "Unknown language code %r, falling back to %r", language, DEFAULT_LANGUAGE
        )
        return DEFAULT_LANGUAGE_TOKEN
    return token


def sot_sequence(language_token: int) -> Tuple[int, int, int, int]:
    """Build the 4-token decode prefix: SOT, language, transcribe, no-timestamps."""
    return (SOT, int(language_token), TRANSCRIBE, NO_TIMESTAMPS)
