"""
Unit tests for the normalizer and the two similarity scores.

Usage:
    pytest tests/test_text_utils.py -v
"""

import pytest

from techsteps.utils.text_utils import keyword_score, normalize, tokens, word_overlap


class TestNormalize:
    def test_lowercases_and_strips_punctuation(self):
        assert normalize("Wi-Fi  Not Working!") == "wifi not working"

    def test_punctuation_and_case_insensitive(self):
        assert normalize("Wi-Fi!") == normalize("wifi")

    def test_collapses_whitespace_and_trims(self):
        assert normalize("  a\t\tb \n c  ") == "a b c"

    def test_drops_underscores(self):
        assert normalize("snake_case") == "snakecase"

    def test_keeps_digits(self):
        assert normalize("Windows 11 (22H2)") == "windows 11 22h2"

    @pytest.mark.parametrize("text", ["", None, "   ", "!!!"])
    def test_empty_inputs(self, text):
        assert normalize(text) == ""

    @pytest.mark.parametrize(
        "text",
        ["Wi-Fi!", "  Hello,   World ", "iPhone 15 Pro: battery?", "café résumé", "a_b-c.d"],
    )
    def test_idempotent(self, text):
        once = normalize(text)
        assert normalize(once) == once


class TestWordOverlap:
    def test_full_overlap(self):
        assert word_overlap("printer offline", "Printer is offline") == 1.0

    def test_partial_overlap(self):
        # Q = {wifi, not, connecting}; only wifi is in the title
        assert word_overlap("wifi not connecting", "Fix Wi-Fi No Internet") == pytest.approx(1 / 3)

    def test_short_query_words_are_ignored(self):
        # "is" and "it" are too short to count, so Q = {broken}
        assert word_overlap("is it broken", "broken screen") == 1.0

    def test_query_of_only_short_words_scores_zero(self):
        assert word_overlap("a to it", "a to it") == 0.0

    def test_empty_text(self):
        assert word_overlap("printer offline", "") == 0.0

    def test_whole_words_only(self):
        assert word_overlap("connect", "connection problems") == 0.0

    def test_directional(self):
        """
        Scores are relative to the first argument's words, not Jaccard.
        Swapping arguments is expected to change the result.
        """
        a = "bluetooth"
        b = "bluetooth headphones disconnecting"
        assert word_overlap(a, b) == 1.0
        assert word_overlap(b, a) == pytest.approx(1 / 3)
        assert word_overlap(a, b) != word_overlap(b, a)

    @pytest.mark.parametrize(
        "q,t",
        [
            ("fix my wifi", "wifi"),
            ("", "anything"),
            ("printer printer printer", "printer"),
            ("zoom audio echo", "teams video"),
        ],
    )
    def test_bounded(self, q, t):
        assert 0.0 <= word_overlap(q, t) <= 1.0


class TestKeywordScore:
    def test_all_keywords_present(self):
        assert keyword_score("my wifi has no internet connection", ["wifi", "internet", "connection"]) == 1.0

    def test_substring_containment(self):
        # "connect" is contained in "connecting"
        assert keyword_score("wifi not connecting", ["connect"]) == 1.0

    def test_keywords_are_normalized(self):
        assert keyword_score("wifi not connecting", ["Wi-Fi"]) == 1.0

    def test_partial(self):
        assert keyword_score("wifi not connecting", ["wifi", "internet", "connection"]) == pytest.approx(1 / 3)

    def test_no_keywords(self):
        assert keyword_score("wifi", []) == 0.0

    def test_blank_keyword_never_matches(self):
        assert keyword_score("wifi", ["!!!", "wifi"]) == 0.5

    @pytest.mark.parametrize("kws", [["a"], ["wifi", "wifi"], ["x", "y", "z"]])
    def test_bounded(self, kws):
        assert 0.0 <= keyword_score("wifi troubles", kws) <= 1.0


def test_tokens_of_empty_text_is_empty_set():
    assert tokens("") == set()
    assert tokens("Hello, hello") == {"hello"}
