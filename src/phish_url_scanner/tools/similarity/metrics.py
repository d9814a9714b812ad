"""String similarity primitives."""

from __future__ import annotations

from dataclasses import dataclass
import re

from phish_url_scanner.config.scoring import SimilarityWeights

_TOKEN_SPLIT_RE = re.compile(r"[\W_]+")


@dataclass(frozen=True)
class SimilarityScores:
    levenshtein: float
    jaro_winkler: float
    token: float
    lcs: float
    weighted: float


def levenshtein_distance(a: str, b: str) -> int:
    if a == b:
        return 0
    if not a:
        return len(b)
    if not b:
        return len(a)
    prev = list(range(len(b) + 1))
    for i, ca in enumerate(a, start=1):
        curr = [i]
        for j, cb in enumerate(b, start=1):
            cost = 0 if ca == cb else 1
            curr.append(min(curr[j - 1] + 1, prev[j] + 1, prev[j - 1] + cost))
        prev = curr
    return prev[-1]


def levenshtein_similarity(a: str, b: str) -> float:
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    return 1.0 - levenshtein_distance(a, b) / max(len(a), len(b))


def jaro_similarity(a: str, b: str) -> float:
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0

    window = max(0, max(len(a), len(b)) // 2 - 1)
    a_flags = [False] * len(a)
    b_flags = [False] * len(b)
    matches = 0
    for i, ca in enumerate(a):
        start = max(0, i - window)
        end = min(i + window + 1, len(b))
        for j in range(start, end):
            if b_flags[j] or b[j] != ca:
                continue
            a_flags[i] = True
            b_flags[j] = True
            matches += 1
            break
    if matches == 0:
        return 0.0

    transpositions = 0
    k = 0
    for i, ca in enumerate(a):
        if not a_flags[i]:
            continue
        while not b_flags[k]:
            k += 1
        if ca != b[k]:
            transpositions += 1
        k += 1
    half = transpositions / 2
    return (matches / len(a) + matches / len(b) + (matches - half) / matches) / 3


def jaro_winkler_similarity(a: str, b: str, scaling: float = 0.1) -> float:
    """Jaro similarity boosted by a shared prefix of up to four characters."""

    jaro = jaro_similarity(a, b)
    prefix = 0
    for ca, cb in zip(a[:4], b[:4]):
        if ca != cb:
            break
        prefix += 1
    return jaro + prefix * scaling * (1.0 - jaro)


def tokenize(value: str) -> set[str]:
    return {token for token in _TOKEN_SPLIT_RE.split((value or "").lower()) if token}


def token_similarity(a: str, b: str) -> float:
    """Jaccard overlap of alphanumeric token sets."""

    left = tokenize(a)
    right = tokenize(b)
    if not left and not right:
        return 1.0 if a == b else 0.0
    return len(left & right) / len(left | right)


def lcs_length(a: str, b: str) -> int:
    """Length of the longest common subsequence."""

    if not a or not b:
        return 0
    prev = [0] * (len(b) + 1)
    for ca in a:
        curr = [0]
        for j, cb in enumerate(b, start=1):
            if ca == cb:
                curr.append(prev[j - 1] + 1)
            else:
                curr.append(max(prev[j], curr[j - 1]))
        prev = curr
    return prev[-1]


def lcs_similarity(a: str, b: str) -> float:
    if a == b:
        return 1.0
    if not a or not b:
        return 0.0
    return lcs_length(a, b) / max(len(a), len(b))


def combined_similarity(a: str, b: str, weights: SimilarityWeights | None = None) -> SimilarityScores:
    norm = (weights or SimilarityWeights()).normalize()
    levenshtein = levenshtein_similarity(a, b)
    jaro_winkler = jaro_winkler_similarity(a, b)
    token = token_similarity(a, b)
    lcs = lcs_similarity(a, b)
    weighted = (
        levenshtein * norm.levenshtein
        + jaro_winkler * norm.jaro_winkler
        + token * norm.token
        + lcs * norm.lcs
    )
    return SimilarityScores(
        levenshtein=round(levenshtein, 4),
        jaro_winkler=round(jaro_winkler, 4),
        token=round(token, 4),
        lcs=round(lcs, 4),
        weighted=round(min(1.0, max(0.0, weighted)), 4),
    )
