"""Grade-band classifier - raw grade string to a coarse band."""

import re

from planassist.models.common import GradeBand

_NON_GRADE_CHARS = re.compile(r"[^0-9k]")

GRADE_BAND_TOKENS: dict[GradeBand, frozenset[str]] = {
    GradeBand.K_2: frozenset({"k", "0", "1", "2"}),
    GradeBand.G3_5: frozenset({"3", "4", "5"}),
    GradeBand.G6_8: frozenset({"6", "7", "8"}),
    GradeBand.G9_12: frozenset({"9", "10", "11", "12"}),
}


def normalize_grade(grade: str | None) -> str:
    """Lower-case and keep only digits and the letter k."""
    if not isinstance(grade, str):
        return ""
    return _NON_GRADE_CHARS.sub("", grade.lower())


def classify_grade_band(grade: str | None) -> GradeBand | None:
    """Map a raw grade ("K", "3rd", "Grade 9") to its band.

    Pure and total. Empty, out-of-range and mixed tokens such as "K1" or
    "Pre-K3" return None rather than a guessed band.
    """
    token = normalize_grade(grade)
    if not token:
        return None

    for band, tokens in GRADE_BAND_TOKENS.items():
        if token in tokens:
            return band

    return None
