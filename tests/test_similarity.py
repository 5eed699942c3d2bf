import pytest

from pwcheck.dictionary import DictionaryStore
from pwcheck.similarity import (
    MatchKind,
    RiskLevel,
    detect_similarity,
    find_character_removal,
    find_leet_substitution,
    find_substring,
)

from conftest import COMMON_PASSWORDS


@pytest.mark.parametrize("entry", COMMON_PASSWORDS)
def test_every_dictionary_entry_is_an_exact_match(store, entry):
    finding = detect_similarity(entry, store)
    assert finding.kind is MatchKind.EXACT_MATCH
    assert finding.matched_password == entry
    assert finding.confidence == 1.0


def test_exact_match_ignores_case(store):
    finding = detect_similarity("PassWord", store)
    assert finding.kind is MatchKind.EXACT_MATCH
    assert finding.matched_password == "password"


def test_exact_match_wins_over_weaker_strategies(store):
    finding = detect_similarity("password123", store)
    assert finding.kind is MatchKind.EXACT_MATCH
    assert finding.risk_level is RiskLevel.CRITICAL


def test_simple_variation_with_common_suffix(store):
    finding = detect_similarity("iloveyou", store)
    assert finding.kind is MatchKind.SIMPLE_VARIATION
    assert finding.matched_password == "iloveyou123"
    assert finding.confidence == 0.9
    assert finding.detail_values == (("affix", "123"),)
    assert finding.detail == "Appending '123' to the password gives a known common password"


def test_simple_variation_with_common_prefix():
    store = DictionaryStore.from_entries(["2024summer"])
    finding = detect_similarity("Summer", store)
    assert finding.kind is MatchKind.SIMPLE_VARIATION
    assert finding.matched_password == "2024summer"


def test_dropping_last_character_is_a_simple_variation(store):
    finding = detect_similarity("passwords", store)
    assert finding.kind is MatchKind.SIMPLE_VARIATION
    assert finding.matched_password == "password"


def test_removal_deletes_from_the_candidate(store):
    finding = find_character_removal("passwords", store)
    assert finding.kind is MatchKind.CHARACTER_REMOVAL
    assert finding.matched_password == "password"
    assert finding.removed_positions == (8,)
    assert finding.confidence == 0.85
    assert "'s' at position 9" in finding.detail


def test_removal_never_inserts(store):
    # "password123" is one insertion away, but removal only deletes
    finding = find_character_removal("password12", store)
    assert finding.matched_password == "password"
    assert finding.removed_positions == (8, 9)


def test_single_removal_in_the_middle(store):
    finding = detect_similarity("mon_key", store)
    assert finding.kind is MatchKind.CHARACTER_REMOVAL
    assert finding.matched_password == "monkey"
    assert finding.removed_positions == (3,)
    assert finding.risk_level is RiskLevel.HIGH


def test_two_character_removal(store):
    finding = detect_similarity("monkeyx9", store)
    assert finding.kind is MatchKind.CHARACTER_REMOVAL
    assert finding.removed_positions == (6, 7)
    assert finding.confidence == 0.75


def test_two_character_removal_is_limited_to_short_candidates():
    fifteen = DictionaryStore.from_entries(["abcdefghijklm"])
    finding = find_character_removal("abxcdefghijklmy", fifteen)
    assert finding is not None
    assert finding.removed_positions == (2, 14)

    sixteen = DictionaryStore.from_entries(["abcdefghijklmn"])
    assert find_character_removal("abxcdefghijklmny", sixteen) is None


def test_leet_substitution(store):
    finding = detect_similarity("p4ssw0rd", store)
    assert finding.kind is MatchKind.LEET_SUBSTITUTION
    assert finding.matched_password == "password"
    assert finding.substitutions == 2
    assert finding.confidence == 0.8


def test_leet_substitution_with_symbols(store):
    finding = detect_similarity("P@$$w0rd", store)
    assert finding.kind is MatchKind.LEET_SUBSTITUTION
    assert finding.substitutions == 4


def test_leet_requires_a_substitution(store):
    assert find_leet_substitution("password", store) is None


def test_contains_common_password(store):
    finding = detect_similarity("mydragonzz", store)
    assert finding.kind is MatchKind.CONTAINS_COMMON
    assert finding.matched_password == "dragon"
    assert finding.confidence == 0.75
    assert finding.risk_level is RiskLevel.MEDIUM
    assert finding.dataset_used == len(COMMON_PASSWORDS)


def test_is_substring_of_common_password(store):
    finding = detect_similarity("sunshi", store)
    assert finding.kind is MatchKind.IS_SUBSTRING_OF
    assert finding.matched_password == "sunshine"
    assert finding.confidence == 0.7


def test_substring_scan_is_limited_to_the_sample():
    store = DictionaryStore.from_entries(["alpha1", "bravo2", "zebra99"])
    assert find_substring("xzebra99x", store, sample_limit=2) is None
    assert find_substring("xzebra99x", store, sample_limit=3).matched_password == "zebra99"
    # 0 scans the whole corpus
    assert find_substring("xzebra99x", store, sample_limit=0).matched_password == "zebra99"


def test_substring_first_entry_in_iteration_order_wins():
    store = DictionaryStore.from_entries(["blue", "bluesky"])
    assert find_substring("bluesky7", store).matched_password == "blue"


def test_no_match(store):
    finding = detect_similarity("Xk9#mP2$vL", store)
    assert finding.kind is MatchKind.NO_MATCH
    assert not finding.is_similar
    assert finding.confidence == 0.0
    assert finding.matched_password is None
    assert finding.risk_level is RiskLevel.LOW


@pytest.mark.parametrize(
    "kind, penalty, risk",
    [
        (MatchKind.EXACT_MATCH, 3, RiskLevel.CRITICAL),
        (MatchKind.SIMPLE_VARIATION, 2, RiskLevel.HIGH),
        (MatchKind.CHARACTER_REMOVAL, 2, RiskLevel.HIGH),
        (MatchKind.LEET_SUBSTITUTION, 2, RiskLevel.HIGH),
        (MatchKind.CONTAINS_COMMON, 1, RiskLevel.MEDIUM),
        (MatchKind.IS_SUBSTRING_OF, 1, RiskLevel.MEDIUM),
        (MatchKind.NO_MATCH, 0, RiskLevel.LOW),
    ],
)
def test_match_kind_penalty_and_risk(kind, penalty, risk):
    assert kind.penalty == penalty
    assert kind.risk is risk
