"""
Text cleanup for taglines and topic names.

Product Hunt occasionally serves UTF-8 text that was decoded as Windows-1252
somewhere upstream ("â€™" instead of "’"). These helpers undo that damage.
"""
import html
import re
from typing import Dict, Optional

_MOJIBAKE_MARKERS = ("Ã", "â€", "Â")

_REPAIRABLE_CHARS = "’‘“”–—…•™éèêëáàâäíìîïóòôöúùûüçñÉÈÁÀÓÖÜß°·€"


def _build_mojibake_table() -> Dict[str, str]:
    table = {}
    for char in _REPAIRABLE_CHARS:
        try:
            broken = char.encode("utf-8").decode("cp1252")
        except UnicodeDecodeError:
            continue
        table[broken] = char
    # Undecodable trailing bytes usually arrive stripped
    table["â€\x9d"] = "”"
    table["â€"] = "”"
    table["Â "] = " "
    table["Â"] = ""
    return table


_MOJIBAKE_TABLE = _build_mojibake_table()
# Longest sequences first so "â€™" wins over the bare "â€" fallback
_MOJIBAKE_KEYS = sorted(_MOJIBAKE_TABLE, key=len, reverse=True)


def _fix_mojibake(text: str) -> str:
    if not any(marker in text for marker in _MOJIBAKE_MARKERS):
        return text

    try:
        return text.encode("cp1252").decode("utf-8")
    except (UnicodeEncodeError, UnicodeDecodeError):
        pass

    for broken in _MOJIBAKE_KEYS:
        if broken in text:
            text = text.replace(broken, _MOJIBAKE_TABLE[broken])
    return text


def clean_text(value: Optional[str]) -> str:
    """Return display-ready text: entities decoded, mojibake repaired, whitespace collapsed."""
    if not value:
        return ""

    text = html.unescape(value)
    text = _fix_mojibake(text)
    text = re.sub(r"\s+", " ", text)
    return text.strip()
