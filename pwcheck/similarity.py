"""Similarity detection against the common-password dictionary.

Strategies run in a fixed priority order and the first hit wins, so an earlier
(more confident) strategy always beats a later one.
"""

import itertools
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from pwcheck.dictionary import MIN_ENTRY_LENGTH

COMMON_AFFIXES = ("1", "123", "!", "2024")

LEET_TABLE = {
    "0": "o",
    "1": "i",
    "3": "e",
    "4": "a",
    "5": "s",
    "7": "t",
    "8": "b",
    "@": "a",
    "$": "s",
}
_LEET_TRANSLATION = str.maketrans(LEET_TABLE)

# two-character removal is O(L^2); only tried up to this length
MAX_PAIR_REMOVAL_LENGTH = 15
DEFAULT_SAMPLE_LIMIT = 10000
MIN_CONTAINED_LENGTH = 4


class RiskLevel(Enum):
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"


class MatchKind(Enum):
    NO_MATCH = ("NO_MATCH", 0, RiskLevel.LOW)
    EXACT_MATCH = ("EXACT_MATCH", 3, RiskLevel.CRITICAL)
    SIMPLE_VARIATION = ("SIMPLE_VARIATION", 2, RiskLevel.HIGH)
    CHARACTER_REMOVAL = ("CHARACTER_REMOVAL", 2, RiskLevel.HIGH)
    LEET_SUBSTITUTION = ("LEET_SPEAK_SUBSTITUTION", 2, RiskLevel.HIGH)
    CONTAINS_COMMON = ("CONTAINS_COMMON", 1, RiskLevel.MEDIUM)
    IS_SUBSTRING_OF = ("SUBSTRING_MATCH", 1, RiskLevel.MEDIUM)

    def __init__(self, code, penalty, risk):
        self.code = code
        self.penalty = penalty
        self.risk = risk


@dataclass(frozen=True)
class SimilarityFinding:
    kind: MatchKind
    confidence: float
    matched_password: Optional[str] = None
    # detail_template is fixed text; detail_values are derived from the
    # password and get checked before they reach any output
    detail_template: str = "No similarity to any known common password found"
    detail_values: Tuple[Tuple[str, object], ...] = ()
    removed_positions: Tuple[int, ...] = ()
    substitutions: int = 0
    dataset_used: int = field(default=0, compare=False)

    @property
    def is_similar(self):
        return self.kind is not MatchKind.NO_MATCH

    @property
    def risk_level(self):
        return self.kind.risk

    @property
    def detail(self):
        return self.detail_template.format(**dict(self.detail_values))


NO_MATCH = SimilarityFinding(MatchKind.NO_MATCH, 0.0)


def normalize_password(password):
    return password.lower()


def find_exact_match(candidate, store, sample_limit=None):
    if store.contains(candidate):
        return SimilarityFinding(
            MatchKind.EXACT_MATCH,
            1.0,
            matched_password=candidate,
            detail_template="Exact match with a known common password",
        )
    return None


def _simple_variations(candidate):
    for affix in COMMON_AFFIXES:
        values = (("affix", affix),)
        yield candidate + affix, "Appending '{affix}' to the password gives a known common password", values
        yield affix + candidate, "Prepending '{affix}' to the password gives a known common password", values
    yield candidate[1:], "Dropping the first character gives a known common password", ()
    yield candidate[:-1], "Dropping the last character gives a known common password", ()


def find_simple_variation(candidate, store, sample_limit=None):
    for variant, template, values in _simple_variations(candidate):
        if len(variant) >= MIN_ENTRY_LENGTH and store.contains(variant):
            return SimilarityFinding(
                MatchKind.SIMPLE_VARIATION,
                0.9,
                matched_password=variant,
                detail_template=template,
                detail_values=values,
            )
    return None


def _describe_removed(candidate, positions):
    return " and ".join(f"'{candidate[p]}' at position {p + 1}" for p in positions)


def _removal_finding(candidate, positions, confidence, variant):
    label = "character" if len(positions) == 1 else "characters"
    return SimilarityFinding(
        MatchKind.CHARACTER_REMOVAL,
        confidence,
        matched_password=variant,
        detail_template="Removing the " + label + " {removed} gives a known common password",
        detail_values=(("removed", _describe_removed(candidate, positions)),),
        removed_positions=positions,
    )


def find_character_removal(candidate, store, sample_limit=None):
    length = len(candidate)
    if length - 1 < MIN_ENTRY_LENGTH:
        return None
    for i in range(length):
        variant = candidate[:i] + candidate[i + 1:]
        if store.contains(variant):
            return _removal_finding(candidate, (i,), 0.85, variant)
    if length > MAX_PAIR_REMOVAL_LENGTH or length - 2 < MIN_ENTRY_LENGTH:
        return None
    for i, j in itertools.combinations(range(length), 2):
        variant = candidate[:i] + candidate[i + 1:j] + candidate[j + 1:]
        if store.contains(variant):
            return _removal_finding(candidate, (i, j), 0.75, variant)
    return None


def find_leet_substitution(candidate, store, sample_limit=None):
    # only the fully substituted form is tested, not every subset
    substitutions = sum(1 for ch in candidate if ch in LEET_TABLE)
    if not substitutions:
        return None
    variant = candidate.translate(_LEET_TRANSLATION)
    if store.contains(variant):
        return SimilarityFinding(
            MatchKind.LEET_SUBSTITUTION,
            0.8,
            matched_password=variant,
            detail_template="Undoing {count} leet-speak substitution(s) gives a known common password",
            detail_values=(("count", substitutions),),
            substitutions=substitutions,
        )
    return None


def find_substring(candidate, store, sample_limit=DEFAULT_SAMPLE_LIMIT):
    sample = store.sample(sample_limit or None)
    for entry in sample:
        if len(entry) >= MIN_CONTAINED_LENGTH and entry in candidate:
            return SimilarityFinding(
                MatchKind.CONTAINS_COMMON,
                0.75,
                matched_password=entry,
                detail_template="Contains a known common password of {size} characters",
                detail_values=(("size", len(entry)),),
                dataset_used=len(sample),
            )
        if candidate in entry and entry != candidate:
            return SimilarityFinding(
                MatchKind.IS_SUBSTRING_OF,
                0.7,
                matched_password=entry,
                detail_template="Is part of a longer known common password",
                dataset_used=len(sample),
            )
    return None


STRATEGIES = (
    find_exact_match,
    find_simple_variation,
    find_character_removal,
    find_leet_substitution,
    find_substring,
)


def detect_similarity(password, store, sample_limit=DEFAULT_SAMPLE_LIMIT):
    """Return the first finding of the strategy chain, or ``NO_MATCH``."""
    candidate = normalize_password(password)
    for strategy in STRATEGIES:
        finding = strategy(candidate, store, sample_limit)
        if finding is not None:
            return finding
    return NO_MATCH
