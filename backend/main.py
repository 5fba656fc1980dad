"""Readiness API – FastAPI app exposing the extractor and the scorer."""

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from config import CORS_ORIGINS, MAX_CONTENT_CHARS, REQUEST_LOG
from extractor import as_markup, derive_query_name, extract
from models import ContentSignals
from schemas import AnalyzeRequest, AnalyzeResponse, ExtractRequest
from scorer import score

app = FastAPI(
    title="Content Readiness API",
    description="Content-readiness signals and pillar scores for product pages",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _extract_request(body: ExtractRequest) -> ContentSignals:
    if len(body.content) > MAX_CONTENT_CHARS:
        raise HTTPException(
            status_code=413,
            detail=f"Content exceeds {MAX_CONTENT_CHARS} characters.",
        )
    return extract(as_markup(body.content), body.url)


@app.post("/extract", response_model=ContentSignals)
def extract_signals(body: ExtractRequest) -> ContentSignals:
    """Return the content signals found in the supplied markup or text."""
    return _extract_request(body)


@app.post("/analyze", response_model=AnalyzeResponse)
def analyze(body: AnalyzeRequest) -> AnalyzeResponse:
    """
    Pipeline: wrap plain text -> extract signals -> score pillars -> return report.
    """
    signals = _extract_request(body)
    report = score(signals, body.external)

    if REQUEST_LOG:
        print(
            f"READINESS SCORE: url={body.url or '-'} overall={report.overall} "
            f"suggestions={len(report.suggestions)} external={body.external is not None}"
        )

    return AnalyzeResponse(
        signals=signals,
        report=report,
        query_name=derive_query_name(signals),
    )


@app.get("/health")
def health() -> dict:
    """Health check for deployment."""
    return {"status": "ok"}
