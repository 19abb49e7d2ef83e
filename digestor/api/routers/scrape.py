"""Page summarisation endpoint.

Routes
------
POST /api/scrape    Body: {"url": "https://..."}    → summarize_page
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from digestor.errors import MalformedInput

router = APIRouter()

MISSING_URL_ERROR = "URL is required"
FAILURE_PREFIX = "Failed to process URL"


# ---------------------------------------------------------------------------
# Schemas
# ---------------------------------------------------------------------------

class ScrapeRequest(BaseModel):
    url: Optional[str] = None


class ScrapeMetadata(BaseModel):
    originalLength: int
    cleanedLength: int
    summaryLength: int


class ScrapeResponse(BaseModel):
    scrapedText: str
    summarizedText: str
    summarizer: str
    metadata: ScrapeMetadata


# ---------------------------------------------------------------------------
# Endpoint
# ---------------------------------------------------------------------------

@router.post("", response_model=ScrapeResponse)
def scrape_endpoint(body: ScrapeRequest, request: Request) -> Any:
    """Fetch a page, extract its main text and summarise it.

    Errors are returned as ``{"error": "..."}``: 400 when ``url`` is missing,
    500 when every fetch strategy failed or anything else went wrong.
    """
    pipeline = request.app.state.pipeline
    try:
        result = pipeline.summarize_page((body.url or "").strip())
    except MalformedInput as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    except Exception as exc:  # noqa: BLE001
        print(f"[scrape] Error processing request: {exc}")
        return JSONResponse(
            {"error": f"{FAILURE_PREFIX}: {str(exc) or type(exc).__name__}"},
            status_code=500,
        )

    payload: dict[str, Any] = {
        "scrapedText": result.scraped_text,
        "summarizedText": result.summarized_text,
        "summarizer": result.summarizer,
        "metadata": {
            "originalLength": result.payload.original_length,
            "cleanedLength": len(result.scraped_text),
            "summaryLength": len(result.summarized_text),
        },
    }
    return JSONResponse(payload, headers={"Cache-Control": "no-store"})
