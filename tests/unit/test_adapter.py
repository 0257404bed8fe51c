"""Tests for the query adapter.

These tests verify that:
1. Exactly one grounded call is made per search, with the query embedded
2. The location bias is passed only when present
3. Chunks without a map entry are dropped and text is kept verbatim
4. Failures are classified before leaving the adapter
"""

from unittest.mock import MagicMock

import pytest

from src.price_index.engine.adapter import NO_RESULTS_TEXT, QueryAdapter, normalize_response
from src.price_index.engine.mock_service import RANKED_TEXT, MockGroundingService
from src.price_index.errors import (
    EmptyQueryError,
    GenericServiceError,
    NoResultError,
    NotFoundOrBillingError,
)
from src.price_index.llm.prompts import SYSTEM_INSTRUCTION
from src.price_index.types.search import (
    Coordinate,
    GroundingChunk,
    GroundingReference,
    GroundingResponse,
    SearchResult,
)

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def location() -> Coordinate:
    return Coordinate(latitude=40.7128, longitude=-74.0060)


# =============================================================================
# Outbound call
# =============================================================================


class TestOutboundCall:
    def test_single_call_with_query(self, adapter: QueryAdapter, mock_service: MockGroundingService):
        adapter.search("NMF Lip balm")

        assert len(mock_service.calls) == 1
        call = mock_service.calls[0]
        assert '"NMF Lip balm"' in call.prompt
        assert call.system_instruction == SYSTEM_INSTRUCTION

    def test_query_is_trimmed(self, adapter: QueryAdapter, mock_service: MockGroundingService):
        adapter.search("  Organic Coffee  ")
        assert '"Organic Coffee"' in mock_service.calls[0].prompt

    def test_location_passed_when_present(
        self, adapter: QueryAdapter, mock_service: MockGroundingService, location: Coordinate
    ):
        adapter.search("CeraVe Lotion", location)
        assert mock_service.calls[0].location == location

    def test_location_omitted_when_absent(
        self, adapter: QueryAdapter, mock_service: MockGroundingService
    ):
        adapter.search("CeraVe Lotion")
        assert mock_service.calls[0].location is None

    @pytest.mark.parametrize("query", ["", "   ", "\t\n"])
    def test_blank_query_makes_no_call(
        self, adapter: QueryAdapter, mock_service: MockGroundingService, query: str
    ):
        with pytest.raises(EmptyQueryError):
            adapter.search(query)
        assert mock_service.calls == []


# =============================================================================
# Normalization
# =============================================================================


class TestNormalization:
    def test_result_shape(self, adapter: QueryAdapter):
        result = adapter.search("NMF Lip balm")

        assert isinstance(result, SearchResult)
        assert isinstance(result.raw_text, str)
        assert all(ref.uri and isinstance(ref.title, str) for ref in result.references)

    def test_web_only_chunks_dropped_order_kept(self, adapter: QueryAdapter):
        result = adapter.search("NMF Lip balm")

        assert [ref.title for ref in result.references] == ["Walgreens", "CVS Pharmacy", "Target"]
        assert result.raw_text == RANKED_TEXT

    def test_no_map_references(self, adapter: QueryAdapter):
        result = adapter.search("mock:nomap")

        assert result.references == []
        assert result.raw_text

    def test_empty_answer_is_no_result(self, adapter: QueryAdapter):
        with pytest.raises(NoResultError):
            adapter.search("mock:empty")

    def test_blank_text_with_references_gets_placeholder(self):
        response = GroundingResponse(
            text="",
            chunks=[GroundingChunk(maps=GroundingReference(uri="https://maps.google.com/?cid=1", title="CVS"))],
        )
        result = normalize_response(response)

        assert result.raw_text == NO_RESULTS_TEXT
        assert len(result.references) == 1

    def test_none_response_is_no_result(self):
        with pytest.raises(NoResultError):
            normalize_response(None)

    def test_text_kept_verbatim(self):
        text = "  I indexed 1 store.\n- **CVS** - $4.00  "
        result = normalize_response(GroundingResponse(text=text))
        assert result.raw_text == text


# =============================================================================
# Errors
# =============================================================================


class TestErrors:
    def test_billing_failure(self, adapter: QueryAdapter):
        with pytest.raises(NotFoundOrBillingError) as exc_info:
            adapter.search("mock:billing")
        assert exc_info.value.needs_credential is True

    def test_generic_failure(self, adapter: QueryAdapter):
        with pytest.raises(GenericServiceError) as exc_info:
            adapter.search("mock:error")
        assert exc_info.value.needs_credential is False

    def test_original_exception_chained(self, adapter: QueryAdapter):
        with pytest.raises(GenericServiceError) as exc_info:
            adapter.search("mock:error")
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_no_retry_on_failure(self):
        service = MagicMock()
        service.generate.side_effect = RuntimeError("Requested entity was not found.")
        adapter = QueryAdapter(service)

        with pytest.raises(NotFoundOrBillingError):
            adapter.search("NMF Lip balm")
        assert service.generate.call_count == 1


class TestCredential:
    def test_set_api_key_forwards_to_service(self, adapter: QueryAdapter, mock_service: MockGroundingService):
        adapter.set_api_key("new-key")
        assert mock_service.api_key == "new-key"

    def test_set_api_key_without_setter(self):
        service = MagicMock(spec=["generate"])
        QueryAdapter(service).set_api_key("new-key")
