"""Reddit persona endpoint.

Routes
------
POST /api/analyze-reddit    Body: {"profileUrl": "https://www.reddit.com/user/<name>/"}
"""

from __future__ import annotations

from dataclasses import asdict
from typing import Any, Optional

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from digestor.errors import MalformedInput, NoContentFound
from digestor.pipeline import PersonaReport

router = APIRouter()

MISSING_URL_ERROR = "Profile URL is required"
FAILURE_PREFIX = "Failed to analyze profile"


class PersonaRequest(BaseModel):
    profileUrl: Optional[str] = None


def _report_dict(report: PersonaReport) -> dict[str, Any]:
    bundle = report.bundle
    return {
        "username": report.username,
        "posts": [asdict(p) for p in bundle.posts],
        "comments": [asdict(c) for c in bundle.comments],
        "structuredPersona": report.persona.model_dump(),
        "citations": [asdict(c) for c in report.citations],
        "metadata": {
            "totalPosts": len(bundle.real_posts),
            "totalComments": len(bundle.real_comments),
            "analysisDate": report.analysis_date,
            "processingTime": report.processing_time_ms,
            "placeholder": bundle.placeholder,
            "personaSource": "model" if report.persona_from_model else "fallback",
        },
    }


@router.post("")
def analyze_reddit_endpoint(body: PersonaRequest, request: Request) -> Any:
    """Fetch a user's posts and comments and synthesise a persona.

    Errors are returned as ``{"error": "..."}``: 400 for a missing or
    non-profile URL, 404 when nothing was found and placeholders are
    disabled, 500 otherwise.
    """
    pipeline = request.app.state.pipeline
    try:
        report = pipeline.analyze_profile((body.profileUrl or "").strip())
    except MalformedInput as exc:
        return JSONResponse({"error": str(exc)}, status_code=400)
    except NoContentFound as exc:
        return JSONResponse({"error": str(exc)}, status_code=404)
    except Exception as exc:  # noqa: BLE001
        print(f"[persona] Error analyzing Reddit profile: {exc}")
        return JSONResponse(
            {"error": f"{FAILURE_PREFIX}: {str(exc) or type(exc).__name__}"},
            status_code=500,
        )
    return JSONResponse(_report_dict(report))
