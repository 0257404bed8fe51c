"""Query adapter: one grounded call per search, normalized into a SearchResult."""

from __future__ import annotations

from typing import Protocol

from src.price_index.errors import (
    EmptyQueryError,
    NoResultError,
    classify_error,
)
from src.price_index.llm.prompts import SYSTEM_INSTRUCTION, build_user_prompt
from src.price_index.types.search import (
    Coordinate,
    GroundingResponse,
    SearchRequest,
    SearchResult,
)
from src.price_index.utils.logging import setup_logger

logger = setup_logger(__name__)

NO_RESULTS_TEXT = "No results found."


class GroundingService(Protocol):
    """Anything that can answer a prompt with grounded text and citations."""

    def generate(
        self,
        prompt: str,
        system_instruction: str,
        location: Coordinate | None = None,
    ) -> GroundingResponse: ...


class QueryAdapter:
    """Builds the search request, calls the grounding service once, normalizes.

    Args:
        service: The configured grounding service, reused across searches.
        system_instruction: Behavioral instruction sent with every call.
    """

    def __init__(self, service: GroundingService, system_instruction: str = SYSTEM_INSTRUCTION):
        self.service = service
        self.system_instruction = system_instruction

    def set_api_key(self, api_key: str) -> None:
        """Hand a newly selected credential to the service, if it takes one."""
        setter = getattr(self.service, "set_api_key", None)
        if setter is None:
            logger.debug("Grounding service has no credential to replace")
            return
        setter(api_key)

    def search(self, query: str, location: Coordinate | None = None) -> SearchResult:
        """Search for local prices of `query`.

        Args:
            query: Product name; must not be blank.
            location: Optional coordinate used as a retrieval bias.

        Returns:
            SearchResult with the answer text and map references in model order.

        Raises:
            EmptyQueryError: If the query is blank (no call is made).
            NotFoundOrBillingError: If the service does not recognize the key's project.
            GenericServiceError: For any other failure, including empty answers.
        """
        if not query or not query.strip():
            raise EmptyQueryError("Search query cannot be blank")

        request = SearchRequest(query=query, location=location)
        logger.info(
            f"Indexing local prices for: {request.query}",
            extra={"has_location": request.location is not None},
        )

        try:
            response = self.service.generate(
                build_user_prompt(request.query),
                self.system_instruction,
                request.location,
            )
        except Exception as e:
            error = classify_error(e)
            logger.error(
                "Price index call failed",
                extra={"kind": type(error).__name__, "error": str(e)},
            )
            if error is e:
                raise
            raise error from e

        result = normalize_response(response)
        logger.info(
            f"Indexed {len(result.references)} stores",
            extra={"query": request.query},
        )
        return result


def normalize_response(response: GroundingResponse | None) -> SearchResult:
    """Keep the text verbatim and only the chunks that carry a map entry.

    Raises:
        NoResultError: If there is neither text nor a map reference.
    """
    if response is None:
        raise NoResultError("Grounding service returned no response")

    references = [chunk.maps for chunk in response.chunks if chunk.maps is not None]
    text = response.text or ""

    if not text.strip():
        if not references:
            raise NoResultError("Grounding service returned an empty answer")
        text = NO_RESULTS_TEXT

    return SearchResult(raw_text=text, references=references)
