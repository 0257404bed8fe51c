"""Pydantic state for the search screen."""

from __future__ import annotations

from enum import StrEnum

from pydantic import BaseModel, Field

from src.price_index.types.search import Coordinate, SearchResult


class SearchPhase(StrEnum):
    """Lifecycle of one search, as seen by the UI.

    Values:
        IDLE       – Nothing searched yet.
        SEARCHING  – A request is in flight; new submits are refused.
        SUCCESS    – `result` holds the latest answer.
        FAILED     – `error` holds a user-facing message.
    """

    IDLE = "idle"
    SEARCHING = "searching"
    SUCCESS = "success"
    FAILED = "failed"


class SearchState(BaseModel):
    """Everything the search screen renders from."""

    phase: SearchPhase = SearchPhase.IDLE
    query: str = Field(default="", description="Query of the latest submitted search")
    last_query: str = Field(default="", description="Query to re-run after credential selection")
    result: SearchResult | None = None
    error: str | None = None
    needs_credential: bool = False
    location: Coordinate | None = None

    @property
    def loading(self) -> bool:
        return self.phase is SearchPhase.SEARCHING
