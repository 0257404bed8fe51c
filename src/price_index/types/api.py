"""API request/response schemas for FastAPI endpoints."""

from pydantic import BaseModel, Field

from src.price_index.types.search import GroundingReference


class SearchApiRequest(BaseModel):
    """Request schema for POST /api/search."""

    query: str = Field(..., description="Product name to price; blank is rejected with 400")
    latitude: float | None = Field(default=None, ge=-90.0, le=90.0)
    longitude: float | None = Field(default=None, ge=-180.0, le=180.0)


class StoreCard(BaseModel):
    """Display values for one ranked store."""

    title: str
    uri: str
    price: str = Field(..., description="Extracted dollar amount or 'Price at Store'")
    is_best_deal: bool = False
    insight: str | None = Field(default=None, description="Store line from the answer text")


class SearchApiResponse(BaseModel):
    """Response schema for POST /api/search."""

    raw_text: str
    references: list[GroundingReference] = Field(default_factory=list)
    best_price: str = Field(default="$--")
    stores: list[StoreCard] = Field(default_factory=list)


class HealthResponse(BaseModel):
    """Response schema for GET /health endpoint."""

    status: str = Field(default="ok")
    mode: str = Field(default="real", description="Backend mode (mock or real)")
    model: str = Field(default="")
    error: str | None = Field(default=None, description="Why the backend is degraded")
    version: str = Field(default="0.1.0")
