"""Type definitions for price_index.

This module re-exports all types from submodules for convenient imports.
"""

from src.price_index.types.api import (
    HealthResponse,
    SearchApiRequest,
    SearchApiResponse,
    StoreCard,
)
from src.price_index.types.search import (
    Coordinate,
    GroundingChunk,
    GroundingReference,
    GroundingResponse,
    SearchRequest,
    SearchResult,
)
from src.price_index.types.state import SearchPhase, SearchState

__all__ = [
    # Search
    "Coordinate",
    "SearchRequest",
    "GroundingReference",
    "GroundingChunk",
    "GroundingResponse",
    "SearchResult",
    # State
    "SearchPhase",
    "SearchState",
    # API
    "SearchApiRequest",
    "SearchApiResponse",
    "StoreCard",
    "HealthResponse",
]
