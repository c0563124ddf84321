import re
from collections import Counter
from typing import Iterable, List, Tuple

_NON_WORD = re.compile(r"[^\w\s]|_")
_SPACES = re.compile(r"\s+")
_QUERY_JUNK = re.compile(r"[%,()]")

STOPWORDS = frozenset([
    "그리고", "그런데", "하지만", "그래서", "입니다", "있습니다", "합니다",
    "저", "나", "너", "그", "이", "저기",
    "the", "a", "an", "and", "or", "to", "of", "in", "on", "for", "with",
])


def tokenize(text: str) -> List[str]:
    """Split on anything that is not a letter, digit or whitespace; lowercase; drop noise."""
    if not text:
        return []
    out = []
    for word in _NON_WORD.sub(" ", text).split():
        low = word.lower()
        if len(low) < 2 or low in STOPWORDS:
            continue
        out.append(low)
    return out


def token_counts(texts: Iterable[str]) -> Counter:
    counts: Counter = Counter()
    for text in texts:
        counts.update(tokenize(text or ""))
    return counts


def keyword_frequency(texts: Iterable[str], top_n: int = 20, exclude: Iterable[str] = ()) -> List[Tuple[str, int]]:
    """
    (token, count) pairs ordered by count desc; ties keep first-seen order
    because Counter preserves insertion order and the sort is stable.
    """
    counts = token_counts(texts)
    for word in exclude:
        counts.pop((word or "").lower(), None)
    return counts.most_common(top_n)


def count_mentions(text: str, q: str) -> int:
    if not text or not q:
        return 0
    return text.lower().count(q.lower())


def cut(text: str, n: int = 110) -> str:
    t = _SPACES.sub(" ", text or "").strip()
    return t[:n] + "…" if len(t) > n else t


def sanitize_query(q: str) -> str:
    # % , ( ) would break the LIKE/or-filter expression
    return _SPACES.sub(" ", _QUERY_JUNK.sub(" ", q or "")).strip()
