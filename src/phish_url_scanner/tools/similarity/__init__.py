"""String similarity, homoglyph folding and typosquat detection."""

from phish_url_scanner.tools.similarity.homoglyphs import (
    HomoglyphReport,
    detect_homoglyphs,
    normalize_homoglyphs,
)
from phish_url_scanner.tools.similarity.metrics import (
    SimilarityScores,
    combined_similarity,
    jaro_similarity,
    jaro_winkler_similarity,
    lcs_length,
    lcs_similarity,
    levenshtein_distance,
    levenshtein_similarity,
    token_similarity,
)
from phish_url_scanner.tools.similarity.typosquat import (
    TyposquatMatch,
    best_legitimate_match,
    brand_name,
    detect_typosquat,
)

__all__ = [
    "HomoglyphReport",
    "SimilarityScores",
    "TyposquatMatch",
    "best_legitimate_match",
    "brand_name",
    "combined_similarity",
    "detect_homoglyphs",
    "detect_typosquat",
    "jaro_similarity",
    "jaro_winkler_similarity",
    "lcs_length",
    "lcs_similarity",
    "levenshtein_distance",
    "levenshtein_similarity",
    "normalize_homoglyphs",
    "token_similarity",
]
