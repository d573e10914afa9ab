from __future__ import annotations

from assess_core.textutil import levenshtein, similarity, tokenize, round_half_up


def test_levenshtein_classic_cases():
    assert levenshtein("kitten", "sitting") == 3
    assert levenshtein("", "abc") == 3
    assert levenshtein("abc", "") == 3
    assert levenshtein("same", "same") == 0
    assert levenshtein("flaw", "lawn") == 2


def test_levenshtein_counts_code_points_not_bytes():
    # each Devanagari character is several UTF-8 bytes but one edit here
    assert levenshtein("कमल", "कमर") == 1
    assert levenshtein("naïve", "naive") == 1


def test_similarity_partial_credit():
    assert similarity("butter", "buter") == 1 - 1 / 6
    assert similarity("cat", "dog") == 0.0
    assert similarity("", "") == 1.0


def test_tokenize_lowercases_and_drops_blanks():
    assert tokenize("  The  Cat\tsat\n") == ["the", "cat", "sat"]
    assert tokenize("") == []
    assert tokenize(None) == []


def test_round_half_up_differs_from_bankers_rounding():
    assert round_half_up(2.5) == 3
    assert round_half_up(0.5) == 1
    assert round_half_up(88.4) == 88
