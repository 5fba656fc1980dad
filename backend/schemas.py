"""Pydantic schemas for API request/response."""

from pydantic import BaseModel, field_validator

from models import ContentSignals, ExternalSignalSummary, ScoreReport


class ExtractRequest(BaseModel):
    """Request body for POST /extract."""

    content: str = ""
    url: str | None = None

    @field_validator("content", mode="before")
    @classmethod
    def normalize_content(cls, value: object) -> str:
        return str(value or "")

    @field_validator("url", mode="before")
    @classmethod
    def normalize_url(cls, value: object) -> str | None:
        text = str(value or "").strip()
        return text or None


class AnalyzeRequest(ExtractRequest):
    """Request body for POST /analyze."""

    external: ExternalSignalSummary | None = None


class AnalyzeResponse(BaseModel):
    """Response for POST /analyze."""

    signals: ContentSignals
    report: ScoreReport
    query_name: str
