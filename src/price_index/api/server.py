"""FastAPI server for the price index.

Exposes the same single grounded search the Streamlit UI runs.

Endpoints:
    POST /api/search - Index local prices for a product
    GET /health - Health check
"""

import logging

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from src.price_index.app.controller import NO_BEST_PRICE_LABEL, build_store_cards
from src.price_index.config import settings
from src.price_index.engine.adapter import QueryAdapter
from src.price_index.engine.pricing import extract_price
from src.price_index.errors import EmptyQueryError, NotFoundOrBillingError, ServiceError
from src.price_index.llm.providers import check_provider_health, get_grounding_service
from src.price_index.types.api import HealthResponse, SearchApiRequest, SearchApiResponse
from src.price_index.types.search import Coordinate

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

adapter = QueryAdapter(get_grounding_service(settings))

# =============================================================================
# FastAPI App
# =============================================================================
app = FastAPI(
    title="PriceIndex API",
    description="Local live retail price comparison backed by grounded Gemini search.",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",  # Vite React dev server
        "http://localhost:8501",  # Streamlit
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# =============================================================================
# Endpoints
# =============================================================================


@app.post("/api/search", response_model=SearchApiResponse)
def search(request: SearchApiRequest) -> SearchApiResponse:
    """Index local prices for one product.

    Latitude and longitude are used as a location bias only when both are given.
    """
    if not request.query.strip():
        raise HTTPException(status_code=400, detail="Query cannot be empty")

    location = None
    if request.latitude is not None and request.longitude is not None:
        location = Coordinate(latitude=request.latitude, longitude=request.longitude)

    try:
        result = adapter.search(request.query, location)
    except EmptyQueryError as e:
        raise HTTPException(status_code=400, detail=e.user_message) from e
    except NotFoundOrBillingError as e:
        raise HTTPException(
            status_code=403,
            detail={"message": e.user_message, "needs_credential": True},
        ) from e
    except ServiceError as e:
        logger.exception(f"Error processing search request: {e}")
        raise HTTPException(status_code=502, detail=e.user_message) from e

    return SearchApiResponse(
        raw_text=result.raw_text,
        references=result.references,
        best_price=extract_price(result.raw_text, 0) or NO_BEST_PRICE_LABEL,
        stores=build_store_cards(result),
    )


@app.get("/health", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Health check endpoint; reports "degraded" when no API key is configured."""
    health = check_provider_health(settings)
    return HealthResponse(
        status="ok" if health["healthy"] else "degraded",
        mode="mock" if settings.use_mock else "real",
        model=str(health["model"]),
        error=health.get("error"),
        version="0.1.0",
    )
