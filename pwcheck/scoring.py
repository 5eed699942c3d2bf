from dataclasses import dataclass

from pwcheck.entropy import StrengthCategory
from pwcheck.similarity import MatchKind

MIN_LEVEL = 1


@dataclass(frozen=True)
class FinalStrength:
    """Strength after the similarity penalty.

    ``category`` is the reported label; ``level`` is the numeric level, which
    can sit below the label's own level when the label is left unchanged.
    """

    category: StrengthCategory
    level: int
    penalized: bool

    @property
    def label(self):
        return self.category.label

    @property
    def description(self):
        return self.category.description


def score_strength(base, kind):
    base = StrengthCategory(base)
    penalty = kind.penalty
    if not penalty:
        return FinalStrength(category=base, level=int(base), penalized=False)
    level = max(MIN_LEVEL, base - penalty)
    if base <= penalty:
        category = StrengthCategory.VERY_WEAK
    elif base <= penalty + 1:
        category = StrengthCategory.WEAK
    else:
        category = base
    return FinalStrength(category=category, level=level, penalized=True)


_FINDING_ADVICE = {
    MatchKind.EXACT_MATCH: "CRITICAL: change this password now, it appears in breach dictionaries",
    MatchKind.SIMPLE_VARIATION: "Adding or removing a few characters around a common password does not protect it",
    MatchKind.CHARACTER_REMOVAL: "This password is one or two characters away from a common password",
    MatchKind.LEET_SUBSTITUTION: "Swapping letters for look-alike digits or symbols is one of the first rules attackers try",
    MatchKind.CONTAINS_COMMON: "Avoid building a password around a common password or word",
    MatchKind.IS_SUBSTRING_OF: "This password is part of a known common password; make it longer and less predictable",
}


def build_recommendations(final, kind, profile):
    recommendations = []
    advice = _FINDING_ADVICE.get(kind)
    if advice:
        recommendations.append(advice)
    if final.level <= StrengthCategory.WEAK:
        recommendations.append("Increase the length to at least 12 characters")
        missing = [
            name
            for name, present in (
                ("lowercase letters", profile.has_lower),
                ("uppercase letters", profile.has_upper),
                ("numbers", profile.has_digit),
                ("symbols", profile.has_symbol),
            )
            if not present
        ]
        if missing:
            recommendations.append("Add " + ", ".join(missing))
    recommendations.append("Use a password manager to generate and store a unique password for every account")
    return recommendations
