"""Canned grounding service for UI development and tests.

Trigger strings in the prompt select a scenario:
    mock:billing  - raises a "Requested entity was not found" error
    mock:error    - raises a generic failure
    mock:empty    - returns no text and no chunks
    mock:nomap    - returns text with web citations only
Anything else returns three ranked stores.
"""

from dataclasses import dataclass, field

from src.price_index.types.search import (
    Coordinate,
    GroundingChunk,
    GroundingReference,
    GroundingResponse,
)

RANKED_TEXT = (
    "I indexed 3 stores. The best local deal for your product is $3.49 at Walgreens.\n"
    "\n"
    "- **Walgreens** - Exact price on the shelf tag, open until 10pm\n"
    "  - **EXACT PRICE:** $3.49\n"
    "  - **Distance:** 0.8 km\n"
    "- **CVS Pharmacy** - Equivalent lip balms start here\n"
    "  - **EXACT PRICE:** Equivalent starting at $4.00\n"
    "  - **Distance:** 1.2 km\n"
    "- **Target** - Usually stocked in the health aisle\n"
    "  - **EXACT PRICE:** $5.29\n"
    "  - **Distance:** 3.4 km\n"
)

RANKED_CHUNKS = [
    GroundingChunk(maps=GroundingReference(uri="https://maps.google.com/?cid=101", title="Walgreens")),
    GroundingChunk(maps=GroundingReference(uri="https://maps.google.com/?cid=102", title="CVS Pharmacy")),
    GroundingChunk(web=GroundingReference(uri="https://www.target.com/", title="target.com")),
    GroundingChunk(maps=GroundingReference(uri="https://maps.google.com/?cid=103", title="Target")),
]

NO_MAP_TEXT = (
    "I could not find stores carrying this product near you. "
    "Online retailers list it from $6.99."
)


@dataclass
class MockCall:
    prompt: str
    system_instruction: str
    location: Coordinate | None


@dataclass
class MockGroundingService:
    """Records every call and answers from the canned scenarios."""

    api_key: str = "mock-key"
    calls: list[MockCall] = field(default_factory=list)

    def set_api_key(self, api_key: str) -> None:
        self.api_key = api_key

    def generate(
        self,
        prompt: str,
        system_instruction: str,
        location: Coordinate | None = None,
    ) -> GroundingResponse:
        self.calls.append(MockCall(prompt, system_instruction, location))
        trigger = prompt.lower()

        if "mock:billing" in trigger:
            raise RuntimeError("404 NOT_FOUND. Requested entity was not found.")
        if "mock:error" in trigger:
            raise RuntimeError("503 UNAVAILABLE. The model is overloaded.")
        if "mock:empty" in trigger:
            return GroundingResponse(text=None, chunks=[])
        if "mock:nomap" in trigger:
            return GroundingResponse(
                text=NO_MAP_TEXT,
                chunks=[
                    GroundingChunk(
                        web=GroundingReference(uri="https://www.example.com/", title="example.com")
                    )
                ],
            )
        return GroundingResponse(text=RANKED_TEXT, chunks=list(RANKED_CHUNKS))
