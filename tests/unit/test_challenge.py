"""Tests for bot-challenge detection."""

import pytest

from stockbrief.scrapers.zerodha.challenge import CHALLENGE_MARKERS, is_challenge


class TestIsChallenge:
    """Tests for is_challenge."""

    def test_just_a_moment(self):
        """Test the interstitial title marker."""
        assert is_challenge("<title>Just a moment...</title>") is True

    @pytest.mark.parametrize("marker", CHALLENGE_MARKERS)
    def test_every_marker(self, marker):
        """Test that each marker alone is enough."""
        assert is_challenge(f"<html><body>{marker}</body></html>") is True

    def test_json_text_is_not_challenge(self):
        """Test that an ordinary JSON body is not a challenge."""
        assert is_challenge('{"ok":true}') is False

    def test_regular_page(self):
        """Test that a normal stock page is not a challenge."""
        assert is_challenge("<html><body>Reliance Industries</body></html>") is False

    @pytest.mark.parametrize("body", [None, {"title": "Just a moment..."}, ["x"], 42, b"Just a moment..."])
    def test_non_string_bodies(self, body):
        """Test that non-text bodies are never challenges and never raise."""
        assert is_challenge(body) is False

    def test_markers_are_case_sensitive(self):
        """Test that a lowercase marker does not match."""
        assert is_challenge("just a moment...") is False
