"""
Name normalization, slugs and comparison.

Data sources spell the same player, tournament or paddle differently:
- PPA: "Ben Johns"
- Fan trackers: "JOHNS, Ben"
- With accents: "Anna Bright" vs "Anna Brìght"

normalize_name() gives a stable comparison form, slugify() a URL-safe
key, and compare_names() a 0..1 similarity score for fuzzy matching.
"""

import re
import unicodedata

from rapidfuzz import fuzz

_NON_SLUG_CHARS = re.compile(r"[^a-z0-9]+")


def strip_accents(value: str) -> str:
    """Remove combining marks (é -> e, ñ -> n)."""
    decomposed = unicodedata.normalize("NFD", value)
    return "".join(
        char for char in decomposed
        if unicodedata.category(char) != "Mn"  # Mn = Mark, Nonspacing
    )


def normalize_name(name: str) -> str:
    """
    Normalize a name for storage and comparison.

    Steps:
    1. Lowercase and strip accents
    2. Turn "LASTNAME, Firstname" into "firstname lastname"
    3. Collapse whitespace

    Examples:
        >>> normalize_name("Ben JOHNS")
        'ben johns'
        >>> normalize_name("WATERS, Anna Leigh")
        'anna leigh waters'
    """
    if not name:
        return ""

    normalized = strip_accents(name.lower().strip())

    if "," in normalized:
        last, first = normalized.split(",", 1)
        normalized = f"{first.strip()} {last.strip()}"

    return " ".join(normalized.split())


def slugify(value: str) -> str:
    """
    URL-safe slug.

    Examples:
        >>> slugify("JOOLA Ben Johns Hyperion CFS 16")
        'joola-ben-johns-hyperion-cfs-16'
        >>> slugify("PPA Tour: Masters (2024)")
        'ppa-tour-masters-2024'
    """
    value = strip_accents(value.lower())
    return _NON_SLUG_CHARS.sub("-", value).strip("-")


def compare_names(name1: str, name2: str) -> float:
    """
    Similarity between two names, 0.0 to 1.0.

    token_sort_ratio makes word order irrelevant, so "Johns Ben" and
    "Ben Johns" compare as identical.
    """
    n1 = normalize_name(name1)
    n2 = normalize_name(name2)
    if not n1 or not n2:
        return 0.0
    if n1 == n2:
        return 1.0
    return fuzz.token_sort_ratio(n1, n2) / 100.0
