"""Tests for stop-word based language detection."""

from slacklator.services.translation.pattern_detector import PatternDetector


class TestPatternDetector:
    def test_english_stop_words(self):
        assert PatternDetector().detect("the and is are") == "en"

    def test_empty_string_is_absent(self):
        assert PatternDetector().detect("") is None

    def test_no_stop_words_is_absent(self):
        assert PatternDetector().detect("Bitcoin kaufen schnell") is None

    def test_english_sentence(self):
        assert PatternDetector().detect("The weather is nice today") == "en"

    def test_german_sentence(self):
        detector = PatternDetector()
        assert detector.detect("Der Hund und die Katze sind im Garten") == "de"

    def test_spanish_sentence(self):
        detector = PatternDetector()
        assert detector.detect("Los niños juegan con las pelotas en el parque") == "es"

    def test_case_insensitive(self):
        assert PatternDetector().detect("THE CAT IS HERE") == "en"

    def test_counts_every_occurrence(self):
        """Repeated stop words add up, so they outweigh a single foreign one."""
        scores = PatternDetector().score("the the the und")
        assert scores["en"] == 3
        assert scores["de"] == 1

    def test_word_boundaries(self):
        """Stop words inside longer words do not count."""
        scores = PatternDetector().score("theory island")
        assert scores["en"] == 0

    def test_tie_goes_to_first_registered_language(self):
        """'que' is a stop word in es, fr and pt; es is registered first."""
        detector = PatternDetector()
        scores = detector.score("que")
        assert scores["es"] == scores["fr"] == scores["pt"] == 1
        assert detector.detect("que") == "es"

    def test_tie_break_follows_registration_order(self):
        """'la' scores for es, fr and it; 'con' only for es and it."""
        assert PatternDetector().detect("con la") == "es"

    def test_supported_languages_order(self):
        assert PatternDetector().supported_languages == (
            "en",
            "es",
            "de",
            "fr",
            "it",
            "pt",
        )
