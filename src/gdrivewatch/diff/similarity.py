"""Name similarity used for rename correlation."""

from __future__ import annotations

import re

# Same shape as the `.ext` suffix Drive shows: last dot and what follows it.
_EXTENSION_RE = re.compile(r"\.[^/.]+$")

# Drive names duplicate uploads "name (1).ext", "name (2).ext", ...
_COPY_MARKER_RE = re.compile(r"\s\(\d+\)$")


def normalize_name(name: str) -> str:
    """Strip the extension and a trailing copy marker, then lower-case."""
    base = _EXTENSION_RE.sub("", name)
    base = _COPY_MARKER_RE.sub("", base)
    return base.lower()


def name_similarity(name_a: str, name_b: str) -> float:
    """
    Score how likely name_b is a rename of name_a, in [0, 1].

    Characters kept by a minimal character-level edit of one normalized name
    into the other (their longest common subsequence), divided by the longer
    normalized length. Two names that are both empty after normalization
    score 0.
    """
    base_a = normalize_name(name_a)
    base_b = normalize_name(name_b)

    longest = max(len(base_a), len(base_b))
    if longest == 0:
        return 0.0

    return _common_subsequence_length(base_a, base_b) / longest


def _common_subsequence_length(a: str, b: str) -> int:
    # Single-row dynamic programming over b.
    row = [0] * (len(b) + 1)
    for ch_a in a:
        diagonal = 0
        for j, ch_b in enumerate(b, start=1):
            above = row[j]
            if ch_a == ch_b:
                row[j] = diagonal + 1
            elif row[j - 1] > above:
                row[j] = row[j - 1]
            diagonal = above
    return row[-1]
