"""
Tests for the denylist content filter.

Usage:
    pytest tests/test_safety.py -v
"""

import pytest

from techsteps.services.safety import DENYLIST, check_candidate, check_draft, check_text, is_safe

from conftest import make_candidate, make_draft


class TestIsSafe:
    @pytest.mark.parametrize("term", DENYLIST)
    def test_every_term_rejected(self, term):
        assert not is_safe(f"how to {term.upper()} things")

    def test_clean_text(self):
        assert is_safe("Fix printer offline in Windows 11")

    def test_substring_match_has_false_positives(self):
        # accepted cost of a plain substring filter
        assert not is_safe("Chrome memory leak after update")
        assert not is_safe("Screen cracked after drop")

    @pytest.mark.parametrize("text", ["", None])
    def test_empty_is_safe(self, text):
        assert is_safe(text)

    def test_custom_denylist(self):
        assert not is_safe("Bluetooth pairing", denylist=["pair"])
        assert is_safe("Bluetooth pairing", denylist=[])


class TestChecks:
    def test_candidate_body_flagged(self):
        v = check_candidate(make_candidate(body="Download this KMS activator for free. " * 10))
        assert not v.safe
        assert v.field == "body"

    def test_candidate_title_checked_first(self):
        v = check_candidate(make_candidate(title="Free torrent client", body="warez " * 50))
        assert v.field == "title"

    def test_clean_candidate(self):
        v = check_candidate(make_candidate())
        assert v.safe and v.field is None

    def test_draft_description_flagged(self):
        v = check_draft(make_draft(description="Bypass the activation screen"))
        assert not v.safe
        assert v.field == "problemDescription"

    def test_check_text_defaults(self):
        assert check_text().safe
        assert check_text(title="ok", body="casino bonus").field == "body"
