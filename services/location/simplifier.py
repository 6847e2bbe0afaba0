"""
Address simplification for the fallback forward-geocode attempt.

Geocoders often choke on house numbers, flat numbers and punctuation that
the user typed or that a search result carried. Stripping them leaves the
street / area / city skeleton, which usually still resolves.
"""

import re

# "No. 42", "no 42A", "NO.42/3"
_NUMBER_PREFIX = re.compile(r"\bno\.?\s*\d[\w/-]*", re.IGNORECASE)
# House-number shapes: "3B", "12/4", "#7", "2nd"; a word joined by "-" survives
_NUMERIC_TOKEN = re.compile(r"#?\b\d[\w/]*")
_DIGITS = re.compile(r"\d+")
_PUNCTUATION = re.compile(r"[^\w\s,]|_")
_WHITESPACE = re.compile(r"\s+")


def simplify(text: str) -> str:
    """Degrade an address to letters, commas and spaces only"""
    text = _NUMBER_PREFIX.sub(" ", text)
    text = _NUMERIC_TOKEN.sub(" ", text)
    text = _DIGITS.sub(" ", text)
    text = _PUNCTUATION.sub(" ", text)

    # Drop segments the stripping emptied out
    segments = (_WHITESPACE.sub(" ", part).strip() for part in text.split(","))
    return ", ".join(part for part in segments if part)
