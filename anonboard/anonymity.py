"""
Disclosure policy for aggregate views.

Nothing here touches storage: rows are stored as written and these helpers
only decide what a view may show about them.
"""
import re

from .config import MIN_EVIDENCE_SAMPLE

HIDDEN_KEYWORD_LABEL = "비공개 키워드"

# game vocabulary that should never be mistaken for a nickname
GAME_VOCABULARY = ("테일즈런너", "차사잡아라", "차사", "징벌", "주행", "서폿", "메타")

_LATIN = re.compile(r"[A-Za-z]")
_DIGIT = re.compile(r"[0-9]")
_HANGUL = re.compile(r"[가-힣]")
_NICK_PUNCT = re.compile(r"[_\-.]")
_WS_SPLIT = re.compile(r"(\s+)")
_TOKEN = re.compile(r"^([(\"'\[{<]*)(.*?)([)\"'\]}>.,!?;:]*)$", re.S)


def should_hide_evidence(count, min_sample=MIN_EVIDENCE_SAMPLE) -> bool:
    return int(count or 0) < int(min_sample if min_sample is not None else MIN_EVIDENCE_SAMPLE)


def should_hide_keyword(count, min_sample=MIN_EVIDENCE_SAMPLE) -> bool:
    return should_hide_evidence(count, min_sample)


def bucket_count(count, min_sample=MIN_EVIDENCE_SAMPLE) -> str:
    """Exact count at/above the threshold, a coarse range below it."""
    c = max(0, int(count or 0))
    m = max(1, int(min_sample if min_sample is not None else MIN_EVIDENCE_SAMPLE))
    if c == 0:
        return "0"
    if c < m:
        if c <= 2:
            return "1~2"
        if c <= 5:
            return "3~5"
        return f"1~{m - 1}"
    return str(c)


def mask_keyword(keyword: str) -> str:
    k = (keyword or "").strip()
    if len(k) <= 2:
        return HIDDEN_KEYWORD_LABEL
    if len(k) <= 4:
        masked = k[0] + "**"
    else:
        masked = k[0] + "**" + k[-1]
    if masked == (keyword or ""):
        return HIDDEN_KEYWORD_LABEL
    return masked


def looks_like_nickname(token: str) -> bool:
    t = (token or "").strip()
    if len(t) < 3 or len(t) > 16:
        return False
    if any(word in t for word in GAME_VOCABULARY):
        return False
    has_latin = bool(_LATIN.search(t))
    has_digit = bool(_DIGIT.search(t))
    has_hangul = bool(_HANGUL.search(t))
    if has_hangul and not has_latin and not has_digit and len(t) <= 8:
        return True
    if (has_latin and has_digit) or (has_latin and len(t) <= 12):
        return True
    if _NICK_PUNCT.search(t) and (has_latin or has_hangul):
        return True
    return False


def mask_token(token: str) -> str:
    if len(token) <= 4:
        return "***"
    if len(token) <= 8:
        return token[0] + "***"
    return token[:2] + "***"


def anonymize_text(text: str) -> str:
    """Mask nickname-looking tokens, keeping whitespace and surrounding punctuation."""
    if not text:
        return text
    out = []
    for part in _WS_SPLIT.split(text):
        if not part or part.isspace():
            out.append(part)
            continue
        m = _TOKEN.match(part)
        if m is None:
            out.append(part)
            continue
        lead, core, tail = m.groups()
        out.append(f"{lead}{mask_token(core)}{tail}" if looks_like_nickname(core) else part)
    return "".join(out)
