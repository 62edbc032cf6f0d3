"""
Tests for draft deduplication (title overlap and shared keywords).

Usage:
    pytest tests/test_dedup.py -v
"""

import pytest

from techsteps.services.dedup import (
    REASON_KEYWORDS,
    REASON_TITLE,
    common_keywords,
    find_duplicate,
    is_duplicate,
)

from conftest import make_guide


@pytest.fixture
def corpus():
    return [
        make_guide(
            guide_id="wifi-fix",
            title="Fix Wifi Connection Issues",
            keywords=["wifi", "router"],
        ),
        make_guide(
            guide_id="iphone-battery",
            title="iPhone Battery Drains Overnight",
            keywords=["battery", "iphone", "power", "drain"],
            category="ios",
        ),
    ]


class TestTitleRule:
    def test_title_superset_is_duplicate(self, corpus):
        # 4 of the 5 significant words ("how" included) hit: 0.8 > 0.7
        dup = find_duplicate("How to Fix Wifi Connection Issues", [], corpus)
        assert dup is not None
        assert dup.existing_id == "wifi-fix"
        assert dup.reason == REASON_TITLE
        assert dup.title_similarity == pytest.approx(0.8)

    def test_reworded_title_is_not_duplicate(self, corpus):
        # wifi/connection hit, fixing/problems miss: 0.5
        assert not is_duplicate("Fixing Wifi Connection Problems", [], corpus)

    def test_threshold_is_strict(self):
        # exactly 0.7 must not trigger
        existing = [make_guide(title="alpha bravo charlie delta echo foxtrot golf", keywords=[])]
        title = "alpha bravo charlie delta echo foxtrot golf hotel india juliet"
        assert not is_duplicate(title, [], existing)

    def test_punctuation_and_case_ignored(self, corpus):
        assert is_duplicate("fix WIFI connection issues!!", [], corpus)


class TestKeywordRule:
    def test_three_shared_keywords(self, corpus):
        dup = find_duplicate("Phone dies fast", ["battery", "iphone", "drain"], corpus)
        assert dup is not None
        assert dup.existing_id == "iphone-battery"
        assert dup.reason == REASON_KEYWORDS
        assert dup.common_keywords == ["battery", "iphone", "drain"]

    def test_two_shared_keywords_not_enough(self, corpus):
        assert not is_duplicate("Phone dies fast", ["battery", "iphone", "screen"], corpus)

    def test_keywords_compared_normalized(self, corpus):
        assert is_duplicate("Phone dies fast", ["Battery", "iPhone!", "DRAIN"], corpus)

    def test_common_keywords_exact_not_substring(self):
        assert common_keywords(["wifi", "net"], ["wifi", "internet"]) == ["wifi"]


class TestCorpusEdges:
    def test_empty_corpus(self):
        assert find_duplicate("Anything at all", ["a", "b", "c"], []) is None

    def test_first_match_wins(self):
        a = make_guide(guide_id="a", title="Reset Network Settings", keywords=[])
        b = make_guide(guide_id="b", title="Reset Network Settings", keywords=[])
        assert find_duplicate("Reset Network Settings", [], [a, b]).existing_id == "a"
