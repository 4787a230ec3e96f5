"""
Copydesk Backend — Analyze Route Handler
==========================================

What:  POST /api/figma/analyze: review frame text against content standards.
Who:   Called by the plugin when the user runs a check on a selection.

Request Flow:
    1. Bearer token checked (401 before anything else)
    2. Body must carry textContent or a non-empty textNodes list (400)
    3. AnalysisService loads standards, calls the model, stores the result
    4. The analysis object is returned as-is with 200

The body is taken as raw JSON and validated by AnalysisService after the
token check, so an unauthenticated request gets 401 whatever its body holds.
Only bytes that are not JSON at all are refused up front (400).
"""

from typing import Any, Dict, Optional

from fastapi import APIRouter, Body, Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from copydesk.database import get_db_session
from copydesk.schemas.analysis import AnalysisResult
from copydesk.schemas.common import ErrorResponse
from copydesk.services.analysis_service import AnalysisService

router = APIRouter(prefix="/api/figma", tags=["Analysis"])


def get_analysis_service(request: Request) -> AnalysisService:
    """The AnalysisService built by create_app() with its injected LLM client."""
    return request.app.state.analysis_service


@router.post(
    "/analyze",
    responses={
        200: {"description": "Content standards review", "model": AnalysisResult},
        400: {"description": "No text content, or malformed fields", "model": ErrorResponse},
        401: {"description": "Missing, invalid or expired token", "model": ErrorResponse},
        500: {
            "description": "No active standards, or analysis failed",
            "model": ErrorResponse,
        },
    },
    summary="Review design text against content standards",
    description=(
        "Sends the frame text and every active content standard to the "
        "generation API and returns a scored review. If the model's reply "
        "cannot be parsed, a low-confidence default review (score 50) is "
        "returned instead of an error."
    ),
)
async def analyze(
    body: Any = Body(default=None),
    authorization: Optional[str] = Header(default=None),
    db: AsyncSession = Depends(get_db_session),
    service: AnalysisService = Depends(get_analysis_service),
) -> Dict[str, Any]:
    return await service.analyze(db=db, authorization=authorization, body=body)
