"""Tests for error signal classification."""

import json

import pytest

from trackproxy.application.cache.context import CacheContext
from trackproxy.application.error_classifier import ErrorClassifier, get_error_type
from trackproxy.constants import ERROR_MESSAGES
from trackproxy.enums import ErrorCategory, MessageLocale


@pytest.fixture
def classifier() -> ErrorClassifier:
    return ErrorClassifier(default_ttl_seconds=600)


class TestGetErrorType:
    def test_token_before_separator(self):
        assert get_error_type("BUSY - timeout") == "BUSY"

    def test_only_first_separator_counts(self):
        assert get_error_type("PARSER - bad - html") == "PARSER"

    def test_missing_separator_gives_empty_token(self):
        assert get_error_type("BUSY") == ""
        assert get_error_type("") == ""


class TestClassify:
    def test_busy_is_not_cached(self, classifier):
        result = classifier.classify("BUSY - timeout")

        assert result.category == ErrorCategory.Busy
        assert result.status_code == 400
        assert result.message == "Server overloaded, retry shortly."
        assert result.cache_ttl == 0

    @pytest.mark.parametrize(
        "signal, category",
        [
            ("UNAVAILABLE - 503", ErrorCategory.Unavailable),
            ("DOWN - connection refused", ErrorCategory.Down),
            ("EMPTY - no body", ErrorCategory.Empty),
            ("PARSER - unexpected html", ErrorCategory.Parser),
            ("NO_DATA - nothing yet", ErrorCategory.NoData),
        ],
    )
    def test_known_tokens_use_default_ttl(self, classifier, signal, category):
        result = classifier.classify(signal)

        assert result.category == category
        assert result.status_code == 400
        assert result.cache_ttl == 600

    def test_down_and_empty_share_message(self, classifier):
        assert (
            classifier.classify("DOWN - x").message
            == classifier.classify("EMPTY - x").message
        )

    @pytest.mark.parametrize(
        "signal", ["UNKNOWNTOKEN", "SOMETHING - else", "busy - lowercase", ""]
    )
    def test_unknown_falls_back_to_no_data(self, classifier, signal):
        result = classifier.classify(signal)

        assert result.category == ErrorCategory.NoData
        assert result.message == "No data available yet for this ID."
        assert result.status_code == 400
        assert result.cache_ttl == 600

    def test_signal_without_separator_is_no_data(self, classifier):
        assert classifier.classify("BUSY").category == ErrorCategory.NoData

    def test_default_ttl_follows_configuration(self):
        classifier = ErrorClassifier(default_ttl_seconds=42)
        assert classifier.classify("DOWN - x").cache_ttl == 42
        assert classifier.classify("BUSY - x").cache_ttl == 0

    def test_portuguese_messages(self):
        classifier = ErrorClassifier(locale=MessageLocale.Portuguese)
        result = classifier.classify("NO_DATA - x")
        assert result.message == "Ainda não existe informação disponível para este ID."

    def test_every_locale_covers_every_category(self):
        for messages in ERROR_MESSAGES.values():
            assert set(messages) == set(ErrorCategory)


class TestRespond:
    def test_writes_ttl_into_context(self, classifier):
        context = CacheContext()
        classifier.respond("BUSY - timeout", "Sky56", context)
        assert context.ttl_override == 0

    def test_cacheable_error_sets_default_ttl(self, classifier):
        context = CacheContext()
        classifier.respond("UNAVAILABLE - 503", "Sky56", context)
        assert context.ttl_override == 600

    def test_response_payload(self, classifier):
        response = classifier.respond("PARSER - bad html", "CTT", CacheContext())

        assert response.status_code == 400
        assert json.loads(response.body) == {
            "error": "Difficulty accessing upstream data, try later.",
            "provider": "CTT",
        }

    def test_unknown_signal_never_raises(self, classifier):
        context = CacheContext()
        response = classifier.respond("garbage", "Yanwen", context)

        assert response.status_code == 400
        assert json.loads(response.body)["error"] == "No data available yet for this ID."
        assert context.ttl_override == 600
