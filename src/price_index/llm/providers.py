"""Grounding service factory and the Gemini-backed implementation.

Usage:
    from src.price_index.config import settings
    from src.price_index.llm.providers import get_grounding_service

    service = get_grounding_service(settings)
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from google import genai
from google.genai import types

from src.price_index.errors import MissingCredentialError
from src.price_index.types.search import (
    Coordinate,
    GroundingChunk,
    GroundingReference,
    GroundingResponse,
)
from src.price_index.utils.logging import setup_logger

if TYPE_CHECKING:
    from src.price_index.config import Settings
    from src.price_index.engine.adapter import GroundingService

logger = setup_logger(__name__)


class GeminiGroundingService:
    """One configured Gemini client, reused across searches.

    The API key is passed in explicitly; the environment is never consulted
    here. Each `generate` call is a single `generate_content` request with
    Google Maps and Google Search grounding enabled.
    """

    def __init__(self, api_key: str, model: str, timeout_seconds: int = 60):
        self.model = model
        self.timeout_seconds = timeout_seconds
        self._client: genai.Client | None = None
        self.set_api_key(api_key)

    @property
    def has_credential(self) -> bool:
        return self._client is not None

    def set_api_key(self, api_key: str) -> None:
        """Replace the credential, rebuilding the client."""
        api_key = (api_key or "").strip()
        if not api_key:
            self._client = None
            return
        self._client = genai.Client(
            api_key=api_key,
            http_options=types.HttpOptions(timeout=self.timeout_seconds * 1000),
        )

    def build_config(
        self, system_instruction: str, location: Coordinate | None
    ) -> types.GenerateContentConfig:
        """Build the request config; the retrieval bias is omitted without a location."""
        tool_config = None
        if location is not None:
            tool_config = types.ToolConfig(
                retrieval_config=types.RetrievalConfig(
                    lat_lng=types.LatLng(
                        latitude=location.latitude,
                        longitude=location.longitude,
                    )
                )
            )

        return types.GenerateContentConfig(
            system_instruction=system_instruction,
            tools=[
                types.Tool(google_maps=types.GoogleMaps()),
                types.Tool(google_search=types.GoogleSearch()),
            ],
            tool_config=tool_config,
        )

    def generate(
        self,
        prompt: str,
        system_instruction: str,
        location: Coordinate | None = None,
    ) -> GroundingResponse:
        """Issue one grounded generation call.

        Raises:
            MissingCredentialError: If no API key is configured.
            google.genai.errors.APIError: Propagated from the SDK unchanged.
        """
        if self._client is None:
            raise MissingCredentialError("Gemini API key is not configured")

        response = self._client.models.generate_content(
            model=self.model,
            contents=prompt,
            config=self.build_config(system_instruction, location),
        )
        return to_grounding_response(response)


def to_grounding_response(response: Any) -> GroundingResponse:
    """Convert an SDK `GenerateContentResponse` into our raw response model."""
    chunks: list[GroundingChunk] = []

    candidates = getattr(response, "candidates", None) or []
    metadata = getattr(candidates[0], "grounding_metadata", None) if candidates else None
    for raw in getattr(metadata, "grounding_chunks", None) or []:
        chunks.append(
            GroundingChunk(
                maps=_to_reference(getattr(raw, "maps", None)),
                web=_to_reference(getattr(raw, "web", None)),
            )
        )

    return GroundingResponse(text=getattr(response, "text", None), chunks=chunks)


def _to_reference(source: Any) -> GroundingReference | None:
    uri = getattr(source, "uri", None) if source is not None else None
    if not uri:
        return None
    return GroundingReference(uri=uri, title=getattr(source, "title", None) or "")


def get_grounding_service(settings: Settings, api_key: str | None = None) -> GroundingService:
    """Create the grounding service selected by configuration.

    Args:
        settings: Application settings.
        api_key: Overrides `settings.gemini_api_key` when given.

    Returns:
        The canned service when `settings.use_mock` is set, else a Gemini service.
    """
    if settings.use_mock:
        from src.price_index.engine.mock_service import MockGroundingService

        logger.info("Using mock grounding service")
        return MockGroundingService()

    return GeminiGroundingService(
        api_key=api_key if api_key is not None else settings.gemini_api_key,
        model=settings.gemini_model,
        timeout_seconds=settings.request_timeout_seconds,
    )


def check_provider_health(settings: Settings) -> dict[str, bool | str]:
    """Report whether a grounding service can be built from the settings.

    No request is sent; this only checks configuration.
    """
    if settings.use_mock:
        return {"healthy": True, "provider": "mock", "model": "mock"}

    if not settings.gemini_api_key.strip():
        return {
            "healthy": False,
            "provider": "google",
            "model": settings.gemini_model,
            "error": "Gemini API key is not configured",
        }
    return {"healthy": True, "provider": "google", "model": settings.gemini_model}
