# ABOUTME: Sequence alignment helpers used for partial-credit sequencing scores.
# ABOUTME: Computes token-level Levenshtein distance and normalizes it into credit.

from __future__ import annotations

from typing import Hashable, Sequence

import numpy as np


def levenshtein_distance(a: Sequence[Hashable], b: Sequence[Hashable]) -> int:
    """
    Edit distance between two token sequences.

    Tokens are compared by equality only; insertion, deletion and substitution
    each cost 1. Only one DP row is kept, and each row is computed with array
    operations: deletions and substitutions come from the previous row, and
    insertions are folded in with a running minimum over `row[k] - k`.
    """

    m, n = len(a), len(b)
    if m == 0 or n == 0:
        return max(m, n)

    offsets = np.arange(n + 1, dtype=np.int64)
    prev = offsets.copy()
    row = np.empty(n + 1, dtype=np.int64)
    for i in range(1, m + 1):
        token = a[i - 1]
        mismatch = np.fromiter((other != token for other in b), dtype=np.int64, count=n)
        row[0] = i
        np.minimum(prev[1:] + 1, prev[:-1] + mismatch, out=row[1:])
        prev = np.minimum.accumulate(row - offsets) + offsets

    return int(prev[n])


def partial_credit(distance: int, max_length: int) -> float:
    """Map an edit distance onto [0, 1]; two empty sequences earn full credit."""
    if max_length == 0:
        return 1.0
    return max(0.0, 1.0 - distance / max_length)
