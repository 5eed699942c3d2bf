import math
import re
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from enum import IntEnum

from pwcheck.errors import InvalidType

LOWERCASE_SIZE = 26
UPPERCASE_SIZE = 26
DIGIT_SIZE = 10
# Anything outside [a-zA-Z0-9] counts toward the 32-character symbol class.
SYMBOL_SIZE = 32

_LOWER = re.compile(r"[a-z]")
_UPPER = re.compile(r"[A-Z]")
_DIGIT = re.compile(r"[0-9]")
_SYMBOL = re.compile(r"[^a-zA-Z0-9]")


class StrengthCategory(IntEnum):
    VERY_WEAK = 1
    WEAK = 2
    STRONG = 3
    VERY_STRONG = 4
    EXTREMELY_STRONG = 5

    @property
    def label(self):
        return _LABELS[self]

    @property
    def description(self):
        return _DESCRIPTIONS[self]


_LABELS = {
    StrengthCategory.VERY_WEAK: "Very Weak",
    StrengthCategory.WEAK: "Weak",
    StrengthCategory.STRONG: "Strong",
    StrengthCategory.VERY_STRONG: "Very Strong",
    StrengthCategory.EXTREMELY_STRONG: "Extremely Strong",
}

_DESCRIPTIONS = {
    StrengthCategory.VERY_WEAK: "Extremely vulnerable to attack",
    StrengthCategory.WEAK: "Vulnerable, needs improvement right away",
    StrengthCategory.STRONG: "Safe for general use",
    StrengthCategory.VERY_STRONG: "Excellent level of security",
    StrengthCategory.EXTREMELY_STRONG: "Maximum security",
}

# (lower bound in bits, category), checked from the top down
ENTROPY_THRESHOLDS = (
    (100, StrengthCategory.EXTREMELY_STRONG),
    (80, StrengthCategory.VERY_STRONG),
    (60, StrengthCategory.STRONG),
    (30, StrengthCategory.WEAK),
)


@dataclass(frozen=True)
class CharacterClassProfile:
    has_lower: bool
    has_upper: bool
    has_digit: bool
    has_symbol: bool

    @property
    def keyspace(self):
        size = 0
        if self.has_lower:
            size += LOWERCASE_SIZE
        if self.has_upper:
            size += UPPERCASE_SIZE
        if self.has_digit:
            size += DIGIT_SIZE
        if self.has_symbol:
            size += SYMBOL_SIZE
        return size


@dataclass(frozen=True)
class EntropyResult:
    length: int
    keyspace: int
    entropy: float
    profile: CharacterClassProfile

    @property
    def formula(self):
        return f"E = L × log₂(N) = {self.length} × log₂({self.keyspace}) = {self.entropy} bits"


def _require_text(password):
    if not isinstance(password, str):
        raise InvalidType()


def calculate_length(password):
    _require_text(password)
    return len(password)


def character_profile(password):
    _require_text(password)
    return CharacterClassProfile(
        has_lower=bool(_LOWER.search(password)),
        has_upper=bool(_UPPER.search(password)),
        has_digit=bool(_DIGIT.search(password)),
        has_symbol=bool(_SYMBOL.search(password)),
    )


def calculate_keyspace(password):
    return character_profile(password).keyspace


def round_half_up(value, places=2):
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(repr(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _entropy_bits(length, keyspace):
    if length == 0 or keyspace == 0:
        return 0.0
    return round_half_up(length * math.log2(keyspace))


def calculate_entropy(password):
    """Bits of entropy, E = L × log2(N), rounded half-up to two places."""
    return _entropy_bits(calculate_length(password), calculate_keyspace(password))


def analyze_entropy(password):
    length = calculate_length(password)
    profile = character_profile(password)
    return EntropyResult(
        length=length,
        keyspace=profile.keyspace,
        entropy=_entropy_bits(length, profile.keyspace),
        profile=profile,
    )


def categorize_entropy(entropy):
    for lower_bound, category in ENTROPY_THRESHOLDS:
        if entropy >= lower_bound:
            return category
    return StrengthCategory.VERY_WEAK
