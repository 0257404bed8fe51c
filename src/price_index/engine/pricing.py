"""Text helpers that pull display values out of a grounded answer.

The answer is free-form Markdown. Mapping the Nth store reference to the
Nth dollar amount assumes the model lists prices in the same order as its
references; nothing checks that, so these values are best-effort display
hints only.
"""

import re

# "$" + digits, optional thousands separators, optional decimal part.
PRICE_PATTERN = re.compile(r"\$\d{1,3}(?:,\d{3})+(?:\.\d+)?|\$\d+(?:\.\d+)?")

_SENTENCE_END = re.compile(r"(?<=[.!?])\s+")


def extract_prices(text: str) -> list[str]:
    """Return every dollar amount in `text`, in order of appearance."""
    if not text:
        return []
    return PRICE_PATTERN.findall(text)


def extract_price(text: str, index: int) -> str | None:
    """Return the dollar amount at position `index`, or None if there is none.

    >>> extract_price("Cheap at $4.00, pricier at $9.99", 1)
    '$9.99'
    >>> extract_price("No prices here", 0) is None
    True
    """
    if index < 0:
        return None
    prices = extract_prices(text)
    if index >= len(prices):
        return None
    return prices[index]


def summary_sentence(text: str) -> str:
    """First sentence of the answer, used as the headline summary."""
    stripped = (text or "").strip()
    if not stripped:
        return ""
    first = _SENTENCE_END.split(stripped, maxsplit=1)[0].strip()
    if first[-1] not in ".!?":
        first += "."
    return first


def store_insight(text: str, title: str) -> str | None:
    """Return the blurb after " - " on the first line naming the store.

    A leading Markdown bullet is ignored, so "- **CVS** - Open now" gives
    "Open now".
    """
    if not text or not title:
        return None

    for line in text.splitlines():
        if title not in line:
            continue
        body = line.strip().lstrip("-*").strip()
        _, sep, rest = body.partition(" - ")
        rest = rest.strip(" *")
        if not sep or not rest:
            return None
        return rest
    return None
