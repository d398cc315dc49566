"""Unit tests for search models and the conversation state cell."""

import pytest
from pydantic import ValidationError

from homefinder.models.search import (
    ErrorKind,
    NLPRequest,
    NLPResponse,
    QueryDescriptor,
    SearchError,
    SearchResult,
)
from homefinder.services.conversation import ConversationState


class TestNLPRequest:
    def test_payload_without_conversation_id(self):
        assert NLPRequest(prompt="condo").to_payload() == {"prompt": "condo"}

    def test_payload_with_conversation_id(self):
        payload = NLPRequest(prompt="cheaper", conversation_id="abc").to_payload()
        assert payload == {"prompt": "cheaper", "conversationId": "abc"}

    def test_payload_with_custom_conversation_key(self):
        payload = NLPRequest(prompt="cheaper", conversation_id="abc").to_payload("nlpId")
        assert payload == {"prompt": "cheaper", "nlpId": "abc"}


class TestNLPResponse:
    def test_parses_conversation_id(self):
        data = NLPResponse.model_validate(
            {"conversationId": "abc", "summary": "s", "request": {"url": "https://x"}}
        )
        assert data.conversation_id == "abc"
        assert data.resolved_summary() == "s"

    def test_top_level_summary_wins(self):
        data = NLPResponse.model_validate(
            {"nlpId": "n", "summary": "top", "request": {"url": "https://x", "summary": "inner"}}
        )
        assert data.resolved_summary() == "top"

    def test_missing_summary_is_empty(self):
        data = NLPResponse.model_validate({"conversationId": "abc", "request": {"url": "https://x"}})
        assert data.resolved_summary() == ""

    def test_requires_conversation_id(self):
        with pytest.raises(ValidationError):
            NLPResponse.model_validate({"summary": "s", "request": {"url": "https://x"}})

    def test_descriptor(self):
        data = NLPResponse.model_validate(
            {"conversationId": "abc", "request": {"url": "https://x", "body": {"a": 1}}}
        )
        assert data.to_descriptor() == QueryDescriptor(url="https://x", body={"a": 1})

    def test_non_object_body_is_kept(self):
        data = NLPResponse.model_validate(
            {"conversationId": "abc", "request": {"url": "https://x", "body": []}}
        )
        assert data.to_descriptor() == QueryDescriptor(url="https://x", body=[])


class TestQueryDescriptor:
    def test_is_frozen(self):
        descriptor = QueryDescriptor(url="https://x")
        with pytest.raises(ValidationError):
            descriptor.url = "https://y"


class TestSearchResult:
    def test_count_matches_listings(self):
        result = SearchResult.from_listings([{"id": 1}, {"id": 2}], "two homes", "abc")
        assert result.count == 2

    def test_listings_forwarded_unchanged(self):
        listings = [{"mlsNumber": "C1", "nested": {"k": [1, 2]}}, {"anything": None}]
        result = SearchResult.from_listings(listings, "s", "abc")
        assert result.listings == listings

    def test_serializes_camel_case_conversation_id(self):
        result = SearchResult.from_listings([], "s", "abc")
        dumped = result.model_dump(by_alias=True)
        assert dumped == {"listings": [], "summary": "s", "conversationId": "abc", "count": 0}


class TestSearchError:
    def test_defaults(self):
        error = SearchError(kind=ErrorKind.VALIDATION_FAILED, message="Query is required")
        assert error.status_code is None

    def test_kind_values(self):
        assert {kind.value for kind in ErrorKind} == {
            "validation_failed",
            "domain_irrelevant",
            "translation_failed",
            "execution_failed",
            "network_failure",
        }


class TestConversationState:
    def test_absent_initially(self):
        assert ConversationState().current() is None

    def test_set_replaces(self):
        state = ConversationState()
        state.set("a")
        state.set("b")
        assert state.current() == "b"

    def test_clear(self):
        state = ConversationState()
        state.set("a")
        state.clear()
        assert state.current() is None
