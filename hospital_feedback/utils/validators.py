import re

import bleach

# Trailing, cut-off character reference such as "&am" or "&#3"
_PARTIAL_ENTITY_RE = re.compile(r"&[#A-Za-z0-9]*$")


def clean_str(val, max_len: int | None = None) -> str:
    """
    Trim surrounding whitespace; non-strings and None become "". Inner whitespace
    (including newlines in descriptions) is kept as submitted.
    """
    if not isinstance(val, str):
        return ""
    s = val.strip()
    if max_len is not None:
        s = s[:max_len]
    return s


def sanitize_text(val, max_len: int | None = None) -> str:
    """
    Neutralize markup so the value cannot execute when rendered: no tags are
    allowed, so every tag is escaped ("<script>" -> "&lt;script&gt;").
    Truncation happens after escaping so the stored value fits its column.
    """
    s = bleach.clean(clean_str(val), tags=set(), attributes={}, strip=False)
    if max_len is not None and len(s) > max_len:
        s = _PARTIAL_ENTITY_RE.sub("", s[:max_len])
    return s


def has_text(val) -> bool:
    return bool(clean_str(val))
