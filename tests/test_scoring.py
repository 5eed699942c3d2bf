import pytest

from pwcheck.entropy import StrengthCategory, character_profile
from pwcheck.scoring import build_recommendations, score_strength
from pwcheck.similarity import MatchKind


def test_exact_match_on_strong_password_drops_to_very_weak():
    final = score_strength(StrengthCategory.STRONG, MatchKind.EXACT_MATCH)
    assert final.category is StrengthCategory.VERY_WEAK
    assert final.level == 1
    assert final.penalized


def test_penalty_one_above_base_becomes_weak():
    final = score_strength(StrengthCategory.STRONG, MatchKind.LEET_SUBSTITUTION)
    assert final.category is StrengthCategory.WEAK
    assert final.level == 1


def test_large_margin_keeps_label_but_lowers_level():
    final = score_strength(StrengthCategory.VERY_STRONG, MatchKind.SIMPLE_VARIATION)
    assert final.category is StrengthCategory.VERY_STRONG
    assert final.label == "Very Strong"
    assert final.level == 2

    final = score_strength(StrengthCategory.EXTREMELY_STRONG, MatchKind.CONTAINS_COMMON)
    assert final.label == "Extremely Strong"
    assert final.level == 4


def test_no_match_is_not_penalized():
    final = score_strength(StrengthCategory.WEAK, MatchKind.NO_MATCH)
    assert final.category is StrengthCategory.WEAK
    assert final.level == 2
    assert not final.penalized


def test_no_match_never_raises_the_label():
    final = score_strength(StrengthCategory.VERY_WEAK, MatchKind.NO_MATCH)
    assert final.category is StrengthCategory.VERY_WEAK
    assert final.label == "Very Weak"
    assert final.level == 1
    assert not final.penalized


@pytest.mark.parametrize("base", list(StrengthCategory))
def test_penalties_are_monotonic(base):
    levels = [
        score_strength(base, kind).level
        for kind in (
            MatchKind.EXACT_MATCH,
            MatchKind.SIMPLE_VARIATION,
            MatchKind.CONTAINS_COMMON,
            MatchKind.NO_MATCH,
        )
    ]
    assert levels == sorted(levels)
    assert min(levels) >= 1


def test_recommendations_for_common_weak_password():
    final = score_strength(StrengthCategory.WEAK, MatchKind.EXACT_MATCH)
    recs = build_recommendations(final, MatchKind.EXACT_MATCH, character_profile("dragon"))
    assert recs[0].startswith("CRITICAL")
    assert "Increase the length to at least 12 characters" in recs
    assert "Add uppercase letters, numbers, symbols" in recs
    assert recs[-1].startswith("Use a password manager")


def test_recommendations_for_strong_unmatched_password():
    final = score_strength(StrengthCategory.VERY_STRONG, MatchKind.NO_MATCH)
    recs = build_recommendations(final, MatchKind.NO_MATCH, character_profile("aA1!"))
    assert len(recs) == 1
