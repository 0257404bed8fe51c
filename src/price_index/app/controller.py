"""Search screen controller.

Holds the UI state and drives the query adapter:

    IDLE/SUCCESS/FAILED --submit--> SEARCHING --> SUCCESS | FAILED

The adapter is injected, so tests and the mock mode can swap the grounding
service without touching the UI.
"""

from __future__ import annotations

from collections.abc import Callable

from src.price_index.app.geolocation import Locator
from src.price_index.engine.adapter import QueryAdapter
from src.price_index.engine.pricing import extract_price, store_insight, summary_sentence
from src.price_index.errors import ServiceError
from src.price_index.types.api import StoreCard
from src.price_index.types.search import SearchResult
from src.price_index.types.state import SearchPhase, SearchState
from src.price_index.utils.logging import log_with_context, setup_logger

logger = setup_logger(__name__)

CredentialSelector = Callable[[], str | None]

NO_PRICE_LABEL = "Price at Store"
NO_BEST_PRICE_LABEL = "$--"
LOCATING_LABEL = "Locating GPS..."


class SearchController:
    """UI state machine for one search screen.

    Args:
        adapter: Query adapter used for every search.
        locator: Best-effort position lookup, run once by `mount()`.
        credential_selector: Host flow that lets the user pick a new API key.
            Returns the key, or None if the host applies it itself.
    """

    def __init__(
        self,
        adapter: QueryAdapter,
        locator: Locator | None = None,
        credential_selector: CredentialSelector | None = None,
    ):
        self.adapter = adapter
        self.locator = locator
        self.credential_selector = credential_selector
        self.state = SearchState()
        self._mounted = False

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def mount(self) -> None:
        """Request the device location once; failure leaves it unset."""
        if self._mounted:
            return
        self._mounted = True

        if self.locator is None:
            return
        try:
            self.state.location = self.locator()
        except Exception as e:
            logger.warning(
                "Geolocation permission denied. Distance estimates might be inaccurate.",
                extra={"error": str(e)},
            )
            self.state.location = None

    def submit(self, query: str) -> bool:
        """Run a search for `query`.

        Returns:
            False if the submit was ignored (blank query or a search already
            in flight), True otherwise.
        """
        query = (query or "").strip()
        if not query:
            return False
        if self.state.phase is SearchPhase.SEARCHING:
            logger.debug("Search already in flight; ignoring submit", extra={"query": query})
            return False

        self.state.phase = SearchPhase.SEARCHING
        self.state.query = query
        self.state.last_query = query
        self.state.error = None
        self.state.needs_credential = False

        try:
            result = self.adapter.search(query, self.state.location)
        except ServiceError as e:
            self._finish_failed(e)
        else:
            self._finish_success(result)
        return True

    def select_credential(self) -> bool:
        """Run the credential flow, then retry the last query.

        Returns:
            False if no credential was requested or no flow is available.
        """
        if not self.state.needs_credential or self.credential_selector is None:
            return False

        api_key = self.credential_selector()
        if api_key:
            self.adapter.set_api_key(api_key)

        self.state.needs_credential = False
        self.state.error = None
        if self.state.phase is SearchPhase.FAILED:
            self.state.phase = SearchPhase.IDLE
        return self.submit(self.state.last_query)

    def _finish_success(self, result: SearchResult) -> None:
        self.state.result = result
        self.state.phase = SearchPhase.SUCCESS

    def _finish_failed(self, error: ServiceError) -> None:
        log_with_context(
            logger,
            "warning",
            "Search failed",
            query=self.state.query,
            kind=type(error).__name__,
            needs_credential=error.needs_credential,
        )
        self.state.error = error.user_message
        self.state.needs_credential = error.needs_credential
        self.state.phase = SearchPhase.FAILED

    # ------------------------------------------------------------------
    # View values
    # ------------------------------------------------------------------

    def best_price(self) -> str:
        if self.state.result is None:
            return NO_BEST_PRICE_LABEL
        return extract_price(self.state.result.raw_text, 0) or NO_BEST_PRICE_LABEL

    def summary(self) -> str:
        if self.state.result is None:
            return ""
        return summary_sentence(self.state.result.raw_text)

    def has_map_index(self) -> bool:
        return self.state.result is not None and bool(self.state.result.references)

    def store_cards(self) -> list[StoreCard]:
        if self.state.result is None:
            return []
        return build_store_cards(self.state.result)

    def location_label(self) -> str:
        if self.state.location is None:
            return LOCATING_LABEL
        return self.state.location.label()


def build_store_cards(result: SearchResult) -> list[StoreCard]:
    """One card per map reference, ranked as returned; the first is the best deal.

    Prices are matched to stores by position in the answer text.
    """
    return [
        StoreCard(
            title=ref.title,
            uri=ref.uri,
            price=extract_price(result.raw_text, idx) or NO_PRICE_LABEL,
            is_best_deal=idx == 0,
            insight=store_insight(result.raw_text, ref.title),
        )
        for idx, ref in enumerate(result.references)
    ]
