"""Confusable-character folding for brand comparison."""

from __future__ import annotations

from dataclasses import dataclass, field

# Multi-character sequences are tried before single characters.
SEQUENCE_HOMOGLYPHS = {
    "rn": "m",
    "vv": "w",
}

DIGIT_HOMOGLYPHS = {
    "0": "o",
    "1": "l",
    "3": "e",
    "4": "a",
    "5": "s",
    "7": "t",
    "8": "b",
}

_LATIN_LOOKALIKES = {
    "a": "аàáâãäåαɑ",
    "b": "вьβß",
    "c": "сçϲ",
    "d": "ԁđðδ",
    "e": "еèéêëε",
    "f": "ƒ",
    "g": "ɡğ",
    "h": "һн",
    "i": "іìíîïιı",
    "j": "ј",
    "k": "кκ",
    "l": "ł",
    "m": "м",
    "n": "пñη",
    "o": "оòóôõöøο",
    "p": "рρ",
    "r": "гř",
    "s": "ѕș",
    "t": "тτ",
    "u": "цùúûüυμ",
    "v": "ν",
    "w": "шω",
    "x": "х×χ",
    "y": "уýÿγ",
    "z": "žż",
}

HOMOGLYPHS: dict[str, str] = {
    char: latin for latin, chars in _LATIN_LOOKALIKES.items() for char in chars
}
HOMOGLYPHS.update(DIGIT_HOMOGLYPHS)


@dataclass(frozen=True)
class HomoglyphReport:
    detected: bool
    normalized: str
    substitutions: list[tuple[int, str, str]] = field(default_factory=list)
    score: float = 0.0

    @property
    def non_ascii_substitutions(self) -> list[tuple[int, str, str]]:
        return [item for item in self.substitutions if not item[1].isascii()]


def _fold(value: str) -> tuple[str, list[tuple[int, str, str]]]:
    text = (value or "").lower()
    out: list[str] = []
    substitutions: list[tuple[int, str, str]] = []
    i = 0
    while i < len(text):
        pair = text[i : i + 2]
        if pair in SEQUENCE_HOMOGLYPHS:
            out.append(SEQUENCE_HOMOGLYPHS[pair])
            substitutions.append((i, pair, SEQUENCE_HOMOGLYPHS[pair]))
            i += 2
            continue
        char = text[i]
        replacement = HOMOGLYPHS.get(char)
        if replacement is None:
            out.append(char)
        else:
            out.append(replacement)
            substitutions.append((i, char, replacement))
        i += 1
    return "".join(out), substitutions


def normalize_homoglyphs(value: str) -> str:
    return _fold(value)[0]


def detect_homoglyphs(value: str) -> HomoglyphReport:
    """Fold confusables to Latin and report what was replaced.

    Non-ASCII lookalikes weigh far more than digit or ``rn``-style swaps,
    which also show up in ordinary hostnames.
    """

    normalized, substitutions = _fold(value)
    if not substitutions:
        return HomoglyphReport(detected=False, normalized=normalized)
    non_ascii = sum(1 for _, char, _ in substitutions if not char.isascii())
    if non_ascii:
        score = min(0.9, 0.5 + 0.1 * non_ascii)
    else:
        score = min(0.4, 0.1 * len(substitutions))
    return HomoglyphReport(
        detected=True,
        normalized=normalized,
        substitutions=substitutions,
        score=round(score, 4),
    )
