"""Tests for the grounding service factory and Gemini service.

These tests verify that:
1. The request config enables Maps and Search grounding
2. The location bias is set only when a coordinate is given
3. SDK responses convert into GroundingResponse
4. A missing API key raises a typed error instead of calling out

The Gemini client is patched; no request leaves the process.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from src.price_index.config import Settings
from src.price_index.engine.mock_service import MockGroundingService
from src.price_index.errors import MissingCredentialError
from src.price_index.llm.prompts import SYSTEM_INSTRUCTION
from src.price_index.llm.providers import (
    GeminiGroundingService,
    check_provider_health,
    get_grounding_service,
    to_grounding_response,
)
from src.price_index.types.search import Coordinate, GroundingResponse

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def mock_genai_client():
    with patch("src.price_index.llm.providers.genai.Client") as client_cls:
        yield client_cls


@pytest.fixture
def service(mock_genai_client) -> GeminiGroundingService:
    return GeminiGroundingService(api_key="test-key", model="gemini-2.5-flash", timeout_seconds=30)


def _sdk_response(text, chunks):
    metadata = SimpleNamespace(grounding_chunks=chunks)
    return SimpleNamespace(text=text, candidates=[SimpleNamespace(grounding_metadata=metadata)])


def _maps(uri, title):
    return SimpleNamespace(maps=SimpleNamespace(uri=uri, title=title), web=None)


def _web(uri, title):
    return SimpleNamespace(maps=None, web=SimpleNamespace(uri=uri, title=title))


# =============================================================================
# Request config
# =============================================================================


class TestBuildConfig:
    def test_tools_enabled(self, service: GeminiGroundingService):
        config = service.build_config(SYSTEM_INSTRUCTION, None)

        assert config.system_instruction == SYSTEM_INSTRUCTION
        assert len(config.tools) == 2
        assert config.tools[0].google_maps is not None
        assert config.tools[1].google_search is not None

    def test_location_bias(self, service: GeminiGroundingService):
        config = service.build_config(SYSTEM_INSTRUCTION, Coordinate(latitude=40.7, longitude=-74.0))

        lat_lng = config.tool_config.retrieval_config.lat_lng
        assert lat_lng.latitude == 40.7
        assert lat_lng.longitude == -74.0

    def test_no_location_no_bias(self, service: GeminiGroundingService):
        config = service.build_config(SYSTEM_INSTRUCTION, None)
        assert config.tool_config is None


# =============================================================================
# generate()
# =============================================================================


class TestGenerate:
    def test_client_built_with_key_and_timeout(self, service, mock_genai_client):
        kwargs = mock_genai_client.call_args.kwargs
        assert kwargs["api_key"] == "test-key"
        assert kwargs["http_options"].timeout == 30_000

    def test_single_call(self, service, mock_genai_client):
        models = mock_genai_client.return_value.models
        models.generate_content.return_value = _sdk_response(
            "I indexed 1 store. $4.00 at CVS.",
            [_maps("https://maps.google.com/?cid=1", "CVS")],
        )

        response = service.generate("prompt", SYSTEM_INSTRUCTION)

        models.generate_content.assert_called_once()
        call = models.generate_content.call_args.kwargs
        assert call["model"] == "gemini-2.5-flash"
        assert call["contents"] == "prompt"
        assert isinstance(response, GroundingResponse)
        assert response.chunks[0].maps.title == "CVS"

    def test_sdk_errors_propagate(self, service, mock_genai_client):
        mock_genai_client.return_value.models.generate_content.side_effect = RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            service.generate("prompt", SYSTEM_INSTRUCTION)

    def test_missing_key_raises(self, mock_genai_client):
        service = GeminiGroundingService(api_key="  ", model="gemini-2.5-flash")

        assert service.has_credential is False
        with pytest.raises(MissingCredentialError):
            service.generate("prompt", SYSTEM_INSTRUCTION)
        mock_genai_client.assert_not_called()

    def test_set_api_key_rebuilds_client(self, mock_genai_client):
        service = GeminiGroundingService(api_key="", model="gemini-2.5-flash")
        service.set_api_key("new-key")

        assert service.has_credential is True
        assert mock_genai_client.call_args.kwargs["api_key"] == "new-key"


# =============================================================================
# Response conversion
# =============================================================================


class TestToGroundingResponse:
    def test_maps_and_web_chunks(self):
        response = to_grounding_response(
            _sdk_response(
                "text",
                [_maps("https://maps.google.com/?cid=1", "CVS"), _web("https://cvs.com", "cvs.com")],
            )
        )

        assert response.text == "text"
        assert response.chunks[0].maps.uri == "https://maps.google.com/?cid=1"
        assert response.chunks[0].web is None
        assert response.chunks[1].maps is None
        assert response.chunks[1].web.title == "cvs.com"

    def test_maps_without_uri_dropped(self):
        response = to_grounding_response(_sdk_response("text", [_maps(None, "CVS")]))
        assert response.chunks[0].maps is None

    def test_missing_title_defaults_empty(self):
        response = to_grounding_response(_sdk_response("text", [_maps("https://maps.google.com/?cid=1", None)]))
        assert response.chunks[0].maps.title == ""

    def test_no_candidates(self):
        response = to_grounding_response(SimpleNamespace(text=None, candidates=None))
        assert response.text is None
        assert response.chunks == []

    def test_no_grounding_metadata(self):
        sdk = SimpleNamespace(text="text", candidates=[SimpleNamespace(grounding_metadata=None)])
        assert to_grounding_response(sdk).chunks == []


# =============================================================================
# Factory and health
# =============================================================================


def test_factory_mock_mode():
    settings = Settings(_env_file=None, use_mock=True)
    assert isinstance(get_grounding_service(settings), MockGroundingService)


def test_factory_gemini(mock_genai_client):
    settings = Settings(_env_file=None, gemini_api_key="cfg-key", gemini_model="gemini-2.5-pro")
    service = get_grounding_service(settings)

    assert isinstance(service, GeminiGroundingService)
    assert service.model == "gemini-2.5-pro"
    assert mock_genai_client.call_args.kwargs["api_key"] == "cfg-key"


def test_factory_key_override(mock_genai_client):
    settings = Settings(_env_file=None, gemini_api_key="cfg-key")
    get_grounding_service(settings, api_key="override")

    assert mock_genai_client.call_args.kwargs["api_key"] == "override"


def test_health_without_key():
    health = check_provider_health(Settings(_env_file=None, gemini_api_key="", use_mock=False))
    assert health["healthy"] is False
    assert "error" in health


def test_health_with_key():
    health = check_provider_health(Settings(_env_file=None, gemini_api_key="k", use_mock=False))
    assert health == {"healthy": True, "provider": "google", "model": "gemini-2.5-flash"}


def test_health_mock():
    assert check_provider_health(Settings(_env_file=None, use_mock=True))["provider"] == "mock"


def test_adapter_end_to_end_with_patched_client(mock_genai_client):
    from src.price_index.engine.adapter import QueryAdapter

    mock_genai_client.return_value.models.generate_content.return_value = _sdk_response(
        "I indexed 1 store. Best deal $2.99 at Rite Aid.",
        [_maps("https://maps.google.com/?cid=7", "Rite Aid"), _web("https://riteaid.com", "riteaid.com")],
    )
    adapter = QueryAdapter(GeminiGroundingService(api_key="k", model="gemini-2.5-flash"))

    result = adapter.search("lip balm", Coordinate(latitude=1.0, longitude=2.0))

    assert [ref.title for ref in result.references] == ["Rite Aid"]
    config = mock_genai_client.return_value.models.generate_content.call_args.kwargs["config"]
    assert config.tool_config.retrieval_config.lat_lng.latitude == 1.0
