"""
Copydesk Backend — Analysis Service (Business Logic Orchestrator)
===================================================================

What:  Reviews design text against the active content standards.
How:   Composes token verification, the standards table, the injected
       LLMService and the analysis log.
Who:   Built once per app in create_app() with its LLMService; called by
       POST /api/figma/analyze.

Orchestration Flow:
    ┌──────────┐   ┌──────────┐   ┌────────────┐   ┌──────────┐   ┌──────────┐
    │  Bearer  │──▶│  Input   │──▶│  Active    │──▶│  Gemini  │──▶│  Store   │
    │  token   │   │  check   │   │  standards │   │  review  │   │  result  │
    └──────────┘   └──────────┘   └────────────┘   └──────────┘   └──────────┘
        401           400            500 if none     parse/fallback     commit

    Any failure other than the 400/401 and "no standards" cases is reported
    as 500 "Analysis failed: <error>". Nothing is retried, and an unparseable
    model reply is not a failure: it becomes FALLBACK_ANALYSIS.
"""

import copy
import json
import logging
import re
from typing import Any, Dict, List, Optional, Sequence

from pydantic import ValidationError as SchemaValidationError
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from copydesk.exceptions import (
    AuthError,
    ConfigError,
    CopydeskError,
    InternalError,
    ValidationError,
)
from copydesk.models.analysis import ScreenshotAnalysis
from copydesk.models.standard import ContentStandard
from copydesk.schemas.analysis import AnalyzeRequest, TextNode, number_text
from copydesk.services.llm_base import LLMService
from copydesk.services.token_service import token_service

logger = logging.getLogger(__name__)

DEFAULT_FRAME_NAME = "Unknown"
DEFAULT_RECORD_LABEL = "Figma Analysis"

FALLBACK_ANALYSIS: Dict[str, Any] = {
    "score": 50,
    "summary": "Analysis completed but response parsing failed",
    "compliant": [],
    "violations": [],
    "recommendations": ["Please try again"],
}

# Greedy: first "{" through last "}", across newlines
_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")


# ══════════════════════════════════════════════════════════════════════════
# Prompt construction
# ══════════════════════════════════════════════════════════════════════════


def render_standard(standard: ContentStandard) -> str:
    """One standard as a compact markdown block for the prompt."""
    return (
        f"**{standard.title}** ({standard.id})\n"
        f"- Domain: {standard.domain}\n"
        f"- Definition: {standard.term_definition or 'N/A'}\n"
        f"- Guidance: {standard.guidance or 'N/A'}\n"
        f"- Correct: {standard.correct_examples or 'N/A'}\n"
        f"- Incorrect: {standard.incorrect_examples or 'N/A'}"
    )


def build_standards_context(standards: Sequence[ContentStandard]) -> str:
    return "\n\n".join(render_standard(s) for s in standards)


def render_text_nodes(nodes: List[TextNode]) -> str:
    return "\n".join(f'[{node.name or ""}]: "{node.content}"' for node in nodes)


def render_input_text(request: AnalyzeRequest) -> str:
    """Structured text nodes win over the flat string when both are sent."""
    if request.text_nodes:
        return render_text_nodes(request.text_nodes)
    return request.text_content or ""


def build_review_prompt(standards_context: str, frame_name: Optional[str], text: str) -> str:
    return f"""You are a content standards reviewer. Analyze the following Figma design text against these content standards:

{standards_context}

---

**Figma Frame**: {frame_name or DEFAULT_FRAME_NAME}

**Text Content to Analyze**:
{text}

---

Analyze each piece of text and provide:
1. An overall compliance score (0-100)
2. List of standards that are being followed well
3. List of violations with specific examples and suggested fixes
4. General recommendations

Respond in this JSON format:
{{
  "score": <number 0-100>,
  "summary": "<brief summary>",
  "compliant": [
    {{"standardId": "<id>", "standardTitle": "<title>", "evidence": "<what text follows this standard>"}}
  ],
  "violations": [
    {{"standardId": "<id>", "standardTitle": "<title>", "issue": "<what's wrong>", "text": "<problematic text>", "suggestion": "<how to fix>"}}
  ],
  "recommendations": ["<general improvement suggestions>"]
}}"""


# ══════════════════════════════════════════════════════════════════════════
# Reply parsing
# ══════════════════════════════════════════════════════════════════════════


def fallback_analysis() -> Dict[str, Any]:
    return copy.deepcopy(FALLBACK_ANALYSIS)


def _reject_constant(name: str) -> Any:
    # NaN / Infinity are not JSON; json.loads accepts them by default
    raise ValueError(f"Non-standard JSON constant: {name}")


def parse_analysis_reply(reply: str) -> Dict[str, Any]:
    """
    Extract the JSON object from the model's reply.

    Takes the greedy {...} span, so prose before or after the object (or a
    markdown code fence around it) is tolerated. Returns a fresh copy of
    FALLBACK_ANALYSIS when there is no span or it is not strict JSON.
    """
    match = _JSON_OBJECT_RE.search(reply or "")
    if match is None:
        logger.error("Parse error: no JSON object found in model reply")
        return fallback_analysis()

    try:
        parsed = json.loads(match.group(0), parse_constant=_reject_constant)
    except ValueError as e:
        logger.error("Parse error: %s", str(e))
        return fallback_analysis()

    return parsed


def format_score(analysis: Dict[str, Any]) -> Optional[str]:
    """Score column value: "82%", or None when the score is missing or zero."""
    score = analysis.get("score")
    if not score:
        return None
    if isinstance(score, bool):
        return "true%"
    if isinstance(score, (int, float)):
        return f"{number_text(score)}%"
    return f"{score}%"


def parse_analyze_body(body: Any) -> AnalyzeRequest:
    """
    Validate the raw JSON body of an analyze request.

    A missing or non-object body is treated as empty, so it fails the
    "no text" check rather than the shape check.

    Raises:
        ValidationError: fields present but of the wrong shape (→ 400)
    """
    if not isinstance(body, dict):
        return AnalyzeRequest()
    try:
        return AnalyzeRequest.model_validate(body)
    except SchemaValidationError as e:
        raise ValidationError(
            "Invalid request body",
            context={"errors": e.errors(include_url=False)},
        )


# ══════════════════════════════════════════════════════════════════════════
# Analysis Service
# ══════════════════════════════════════════════════════════════════════════


class AnalysisService:
    """
    Content standards review workflow.

    Holds only its injected LLMService; the DB session is passed per call.
    """

    def __init__(self, llm: LLMService):
        self.llm = llm

    async def analyze(
        self,
        db: AsyncSession,
        authorization: Optional[str],
        body: Any,
    ) -> Dict[str, Any]:
        """
        Authenticate, review the submitted text, log and return the result.

        Returns:
            The parsed analysis object (or FALLBACK_ANALYSIS).

        Raises:
            AuthError: bearer token missing/invalid/expired (→ 401)
            ValidationError: malformed fields, or neither textContent nor
                             textNodes given (→ 400)
            ConfigError: no active content standards (→ 500)
            InternalError: any other failure, incl. the generation call (→ 500)
        """
        try:
            identity = await token_service.authenticate_bearer(db, authorization)

            request = parse_analyze_body(body)
            if not request.has_text():
                raise ValidationError("No text content provided", field="textContent")

            standards = await self._load_active_standards(db)
            if not standards:
                raise ConfigError("No content standards found")

            prompt = build_review_prompt(
                build_standards_context(standards),
                request.frame_name,
                render_input_text(request),
            )

            reply = await self.llm.generate(prompt)
            analysis = parse_analysis_reply(reply)

            db.add(
                ScreenshotAnalysis(
                    user_id=identity.id,
                    image_name=request.frame_name or DEFAULT_RECORD_LABEL,
                    result=json.dumps(analysis),
                    overall_score=format_score(analysis),
                    standards_count=str(len(standards)),
                )
            )
            await db.commit()

        except (AuthError, ValidationError, ConfigError):
            raise
        except Exception as e:
            detail = e.message if isinstance(e, CopydeskError) else str(e)
            logger.error("Analysis error: %s", detail, exc_info=True)
            raise InternalError(
                message=f"Analysis failed: {detail}",
                context={"error_type": type(e).__name__},
            )

        logger.info(
            "Analysis stored for user %s (frame=%r, standards=%d, score=%s)",
            identity.id,
            request.frame_name,
            len(standards),
            analysis.get("score"),
        )
        return analysis

    async def _load_active_standards(self, db: AsyncSession) -> List[ContentStandard]:
        result = await db.execute(
            select(ContentStandard).where(ContentStandard.status == "active")
        )
        return list(result.scalars().all())
