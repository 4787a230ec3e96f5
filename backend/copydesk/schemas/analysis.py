"""
Copydesk Backend — Analysis Request/Response Schemas
======================================================

What:  Pydantic models for POST /api/figma/analyze.

The request mirrors what the plugin sends: either one flat `textContent`
string or a list of `textNodes` collected from the selected frame. The
request is validated by AnalysisService after the bearer token is checked,
not by FastAPI, so an unauthenticated caller always gets 401.

The response models document the JSON shape the model is asked to produce.
The endpoint returns the parsed object as-is (it is not re-validated), so a
reply with extra or missing keys still reaches the client unchanged.
"""

from typing import Any, List, Optional

from pydantic import BaseModel, Field, field_validator


def number_text(value: float) -> str:
    """Render a number the way the plugin's JS does: 82.0 → "82"."""
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def scalar_text(value: Any) -> Any:
    """
    Accept JSON scalars where a string is expected.

    Falsy scalars (0, false) become None so they count as "no text".
    Strings, None and non-scalars pass through for normal validation.
    """
    if isinstance(value, bool):
        return "true" if value else None
    if isinstance(value, (int, float)):
        return number_text(value) if value else None
    return value


# ══════════════════════════════════════════════════════════════════════════
# Request Models
# ══════════════════════════════════════════════════════════════════════════


class TextNode(BaseModel):
    """A named text layer from the design file."""
    name: Optional[str] = Field(default=None, description="Layer name")
    characters: Optional[str] = Field(default=None, description="Layer text")
    text: Optional[str] = Field(
        default=None,
        description="Alternate key for the layer text, used when `characters` is absent",
    )

    @field_validator("name", "characters", "text", mode="before")
    @classmethod
    def coerce_scalars(cls, v: Any) -> Any:
        if isinstance(v, bool):
            return "true" if v else "false"
        if isinstance(v, (int, float)):
            return number_text(v)
        return v

    @property
    def content(self) -> str:
        if self.characters is not None:
            return self.characters
        return self.text or ""


class AnalyzeRequest(BaseModel):
    """Body of POST /api/figma/analyze."""
    text_content: Optional[str] = Field(default=None, alias="textContent")
    frame_name: Optional[str] = Field(default=None, alias="frameName")
    text_nodes: Optional[List[TextNode]] = Field(default=None, alias="textNodes")

    model_config = {"populate_by_name": True}

    @field_validator("text_content", "frame_name", mode="before")
    @classmethod
    def coerce_scalars(cls, v: Any) -> Any:
        return scalar_text(v)

    def has_text(self) -> bool:
        return bool(self.text_content) or bool(self.text_nodes)


# ══════════════════════════════════════════════════════════════════════════
# Response Models (documentation of the requested JSON shape)
# ══════════════════════════════════════════════════════════════════════════


class CompliantItem(BaseModel):
    standardId: str
    standardTitle: str
    evidence: str


class Violation(BaseModel):
    standardId: str
    standardTitle: str
    issue: str
    text: str
    suggestion: str


class AnalysisResult(BaseModel):
    """
    Content standards review for one frame.

    score is 0-100. When the model's reply cannot be parsed the service
    substitutes score 50 and a "parsing failed" summary.
    """
    score: int = Field(ge=0, le=100)
    summary: str
    compliant: List[CompliantItem] = Field(default_factory=list)
    violations: List[Violation] = Field(default_factory=list)
    recommendations: List[str] = Field(default_factory=list)
