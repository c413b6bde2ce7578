# scriptura/services/references/translations.py
"""
Translation codes and their backend identifiers.

ESV is served by the ESV API; every other code maps to an api.bible
Bible ID. Keep API_BIBLE_BIBLES and TRANSLATION_CHOICES in sync.
"""

from enum import Enum
from typing import Optional


class Backend(str, Enum):
    """Scripture content provider."""
    ESV = "esv"
    API_BIBLE = "api.bible"


# Default Bible translation when none is specified or stored
DEFAULT_TRANSLATION = "ESV"

# Translation code -> api.bible Bible ID
API_BIBLE_BIBLES = {
    "KJV": "de4e12af7f28f599-01",
    "NKJV": "63097d2a0a2f7db3-01",
    "NASB": "a761ca71e0b3ddcf-01",
    "AMP": "a81b73293d3080c9-01",
    "NIV": "78a9f6124f344018-01",
    "NLT": "d6e14a625393b4da-01",
    "CSB": "a556c5305ee15c3f-01",
    "ASV": "06125adad2d5898a-01",
    "GNV": "c315fa9f71d4af3a-01",
    "MSG": "6f11a7de016f942e-01",
    "GRCTR": "3aefb10641485092-01",
    "RVR": "592420522e16049f-01",
    "NVT": "41a6caa722a21d88-01",
    "NTV": "826f63861180e056-01",
    "DEUL": "926aa5efbc5e04e2-01",
    "WLC": "2c500771ea16da93-01",
    "FEB": "04fb2bec0d582d1f-01",
    "TSI": "2dd568eeff29fb3c-02",
    "VIE": "1b878de073afef07-01",
    "CES": "c61908161b077c4c-01",
    "TKJV": "2eb94132ad61ae75-01",
    "IRV": "b35e70bce95d4261-01",
}

# (label, code) pairs offered by the slash commands
TRANSLATION_CHOICES = [
    ("ESV (English Standard Version) 🇬🇧", "ESV"),
    ("NKJV (New King James Version) 🇬🇧", "NKJV"),
    ("KJV (King James (Authorized) Version) 🇬🇧", "KJV"),
    ("NASB (New American Standard Bible) 🇬🇧", "NASB"),
    ("NIV (New International Version) 🇬🇧", "NIV"),
    ("NLT (New Living Translation) 🇬🇧", "NLT"),
    ("AMP (Amplified Bible) 🇬🇧", "AMP"),
    ("CSB (Christian Standard Bible) 🇬🇧", "CSB"),
    ("ASV (American Standard Version) 🇬🇧", "ASV"),
    ("GNV (Geneva Bible) 🇬🇧", "GNV"),
    ("MSG (The Message) 🇬🇧", "MSG"),
    ("RVR (Reina Valera 1960) 🇪🇸", "RVR"),
    ("NTV (Nueva Traducción Viviente) 🇪🇸", "NTV"),
    ("NVT (Nova Versão Transformadora) 🇵🇹", "NVT"),
    ("DEUL (Lutherbibel 1912) 🇩🇪", "DEUL"),
    ("FEB (免费的易读圣经) 🇨🇳", "FEB"),
    ("GRCTR (Greek Textus Receptus) 🇬🇷", "GRCTR"),
    ("WLC (Westminster Leningrad Codex) 🇮🇱", "WLC"),
    ("TSI (Plain Indonesian Translation) 🇮🇩", "TSI"),
    ("VIE (Vietnamese Bible) 🇻🇳", "VIE"),
    ("CES (Czech Kralická Bible) 🇨🇿", "CES"),
    ("TKJV (Thai King James Version) 🇹🇭", "TKJV"),
    ("IRV (Indian Revised Version) 🇮🇳", "IRV"),
]


def is_valid_translation(translation: Optional[str]) -> bool:
    """Return True if the code is a supported translation."""
    if not translation:
        return False
    if translation == DEFAULT_TRANSLATION:
        return True
    return translation in API_BIBLE_BIBLES


def bible_id_for(translation: Optional[str]) -> Optional[str]:
    """Return the api.bible Bible ID for a code, or None."""
    if not translation:
        return None
    return API_BIBLE_BIBLES.get(translation)


def backend_for(translation: str) -> Optional[Backend]:
    """
    Return the backend serving a translation.

    Returns:
        Backend.ESV, Backend.API_BIBLE, or None for unknown codes
    """
    if translation == DEFAULT_TRANSLATION:
        return Backend.ESV
    if translation in API_BIBLE_BIBLES:
        return Backend.API_BIBLE
    return None


def resolve_translation(requested: Optional[str], preferred: Optional[str] = None) -> str:
    """
    Pick the translation for a request.

    A valid explicit request wins, then a valid stored preference,
    then the default.
    """
    if is_valid_translation(requested):
        return requested
    if is_valid_translation(preferred):
        return preferred
    return DEFAULT_TRANSLATION
