import re
import unicodedata

_NON_DIGITS = re.compile(r"\D")
_WHITESPACE = re.compile(r"\s+")


def strip_text(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    return v or None


def only_digits(v: str | None) -> str:
    return _NON_DIGITS.sub("", v or "")


def fold_text(text: str | None) -> str:
    """Lowercase and drop diacritics, so "São Paulo" matches "sao paulo"."""
    decomposed = unicodedata.normalize("NFD", (text or "").lower())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def split_terms(query: str | None) -> list[str]:
    return [t for t in _WHITESPACE.split(fold_text(query).strip()) if t]
