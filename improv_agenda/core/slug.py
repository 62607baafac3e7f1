"""Human readable identifiers derived from contributor short names."""

from __future__ import annotations

import re
from collections.abc import Container

import unidecode

MAX_LENGTH = 100
_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def slugify(text: str, max_length: int = MAX_LENGTH) -> str:
    """Lowercase ASCII form of ``text`` with words joined by ``-``.

    Letters are transliterated rather than dropped (``"Straße"`` becomes
    ``"strasse"``, ``"Москва"`` becomes ``"moskva"``); text with nothing left
    to keep yields ``"n-a"``.
    """
    ascii_text = unidecode.unidecode(text)
    slug = _NON_ALNUM.sub("-", ascii_text.lower()).strip("-")
    slug = slug[:max_length].rstrip("-")
    return slug or "n-a"


def unique_slug(text: str, taken: Container[str]) -> str:
    """Slug of ``text`` that is not in ``taken``.

    Collisions are resolved by appending ``-1``, ``-2`` and so on.
    """
    base = slugify(text)
    if base not in taken:
        return base

    counter = 1
    while True:
        suffix = f"-{counter}"
        candidate = base[: MAX_LENGTH - len(suffix)].rstrip("-") + suffix
        if candidate not in taken:
            return candidate
        counter += 1
