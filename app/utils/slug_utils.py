"""Slug helpers: generation, normalization and comparison.

All functions are pure. The separator is ``-`` and Hangul syllables are
treated as slug characters alongside ASCII letters and digits.
"""

from __future__ import annotations

import random
import re
import string
import time
from urllib.parse import unquote

SEPARATOR = "-"

_BASE36_ALPHABET = string.digits + string.ascii_lowercase

_NON_SLUG_KOREAN = re.compile(r"[^\w\s가-힣]", re.ASCII)
_NON_SLUG_ASCII = re.compile(r"[^\w\s]", re.ASCII)
_WHITESPACE = re.compile(r"\s+")
_REPEATED_SEPARATOR = re.compile(r"-{2,}")
_VALID_SLUG = re.compile(r"^[a-z0-9가-힣-]+$")

# Trailing segments that look like a generated id: "123abc" or "lj3fh2"
_ID_SUFFIX_PATTERNS = (
    re.compile(r"\d+[a-z0-9]{2,4}"),
    re.compile(r"[a-z0-9]{6,10}"),
)


def to_base36(number: int) -> str:
    """Encode a non-negative integer in base 36 (``0-9a-z``)."""
    if number < 0:
        raise ValueError("number must be >= 0")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def unique_suffix() -> str:
    """Millisecond timestamp in base 36 followed by three random base-36 chars."""
    timestamp = to_base36(int(time.time() * 1000))
    noise = "".join(random.choices(_BASE36_ALPHABET, k=3))
    return f"{timestamp}{noise}"


def generate_slug(
    text: str,
    *,
    add_unique_id: bool = True,
    preserve_korean: bool = True,
    max_length: int = 100,
) -> str:
    """Turn free text (usually a title) into a URL-friendly slug.

    Args:
        text: Source text.
        add_unique_id: Append ``-<timestamp><random>`` to reduce collisions.
        preserve_korean: Keep Hangul syllables instead of replacing them.
        max_length: Maximum length of the body, excluding the suffix.

    Returns:
        Slug with no repeated, leading or trailing separators.
    """
    if not text or not isinstance(text, str):
        return ""

    slug = text.lower().strip()
    pattern = _NON_SLUG_KOREAN if preserve_korean else _NON_SLUG_ASCII
    slug = pattern.sub(SEPARATOR, slug)
    slug = _WHITESPACE.sub(SEPARATOR, slug)
    slug = _REPEATED_SEPARATOR.sub(SEPARATOR, slug)
    slug = slug.strip(SEPARATOR)

    if max_length > 0 and len(slug) > max_length:
        slug = slug[:max_length].rstrip(SEPARATOR)

    if add_unique_id:
        suffix = unique_suffix()
        slug = f"{slug}{SEPARATOR}{suffix}" if slug else suffix

    return slug


def normalize_slug(slug: str) -> str:
    """Collapse repeated separators and trim them from both ends.

    Idempotent: ``normalize_slug(normalize_slug(s)) == normalize_slug(s)``.
    """
    if not slug or not isinstance(slug, str):
        return ""
    return _REPEATED_SEPARATOR.sub(SEPARATOR, slug).strip(SEPARATOR)


def get_base_slug(slug: str) -> str:
    """Strip a trailing id-like segment, if there is one.

    This is a heuristic: ordinary words of six or more characters also look
    like ids (``growth-strategy`` -> ``growth``).

    >>> get_base_slug("my-post-title-lj3fh2")
    'my-post-title'
    >>> get_base_slug("my-post-title")
    'my-post-title'
    """
    if not slug or not isinstance(slug, str):
        return ""

    normalized = normalize_slug(slug)
    head, sep, last_part = normalized.rpartition(SEPARATOR)
    if sep and head and any(p.fullmatch(last_part) for p in _ID_SUFFIX_PATTERNS):
        return head
    return normalized


def are_slugs_related(slug1: str, slug2: str) -> bool:
    """True when the slugs normalize equal or one base slug contains the other."""
    if not slug1 or not slug2:
        return False

    if normalize_slug(slug1) == normalize_slug(slug2):
        return True

    base1 = get_base_slug(slug1)
    base2 = get_base_slug(slug2)
    return bool(base1) and bool(base2) and (base1 in base2 or base2 in base1)


def is_valid_slug(slug: str) -> bool:
    """Lowercase ASCII/Hangul/digits with single inner separators only."""
    if not slug or not isinstance(slug, str):
        return False

    return (
        _VALID_SLUG.match(slug) is not None
        and not slug.startswith(SEPARATOR)
        and not slug.endswith(SEPARATOR)
        and SEPARATOR * 2 not in slug
    )


def cleanup_slug(raw_slug: str) -> str:
    """Recover a slug from a raw URL fragment.

    URL-decodes (keeping the raw input if it is not valid UTF-8 once decoded),
    drops query string and fragment, keeps the last path segment and
    normalizes the result.
    """
    if not raw_slug:
        return ""

    try:
        decoded = unquote(raw_slug, errors="strict")
    except UnicodeDecodeError:
        decoded = raw_slug

    cleaned = decoded.split("?")[0].split("#")[0].split("/")[-1]
    return normalize_slug(cleaned)
