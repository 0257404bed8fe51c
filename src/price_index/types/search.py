"""Search-related Pydantic schemas."""

from pydantic import BaseModel, Field, field_validator


class Coordinate(BaseModel):
    """Geographic point used to bias grounding towards nearby stores."""

    latitude: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    longitude: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")

    def label(self) -> str:
        return f"{self.latitude:.3f}, {self.longitude:.3f}"


class SearchRequest(BaseModel):
    """One product search, built per submit action."""

    query: str = Field(..., min_length=1, description="Product name to price")
    location: Coordinate | None = Field(default=None, description="Optional location bias")

    @field_validator("query")
    @classmethod
    def strip_query(cls, v: str) -> str:
        """Trim surrounding whitespace; reject blank queries."""
        v = v.strip()
        if not v:
            raise ValueError("Search query cannot be blank")
        return v


class GroundingReference(BaseModel):
    """A single citation attached to a grounded answer."""

    uri: str = Field(..., description="Link to the place or page")
    title: str = Field(default="", description="Display title (store name for map entries)")


class GroundingChunk(BaseModel):
    """Raw grounding chunk as returned by the service; either part may be absent."""

    maps: GroundingReference | None = None
    web: GroundingReference | None = None


class GroundingResponse(BaseModel):
    """Raw output of one grounded generation call."""

    text: str | None = Field(default=None, description="Generated answer text")
    chunks: list[GroundingChunk] = Field(default_factory=list)


class SearchResult(BaseModel):
    """Normalized search result.

    `references` keeps the model-assigned order; the first entry is the
    best local deal by convention.
    """

    raw_text: str = Field(..., description="Model answer, verbatim")
    references: list[GroundingReference] = Field(default_factory=list)
