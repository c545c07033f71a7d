from __future__ import annotations

import re

__all__ = ["normalize_header"]

_QUOTES = re.compile(r"['\"]")
_SEPARATORS = re.compile(r"[_\-.]")
_WHITESPACE = re.compile(r"\s+")


def normalize_header(header: str | None) -> str:
    """Reduce a raw header to a comparable form.

    ``'  "Engine_Serial#" '`` -> ``'engine serial'``
    """
    text = (header or "").lower().strip()
    text = _QUOTES.sub("", text)
    text = _SEPARATORS.sub(" ", text)
    text = text.replace("#", "")
    return _WHITESPACE.sub(" ", text).strip()
