"""Data models shared by the extractor, the scorer and the API.

Request/response bodies for the HTTP layer are in schemas.py.
Every record here is immutable once built.
"""

from pydantic import BaseModel, ConfigDict, Field, computed_field, field_validator, model_validator

# Overall blend, in pillar order (Product, Category, Depth, Technical, Off-Site).
PILLAR_WEIGHTS: tuple[int, ...] = (30, 20, 25, 20, 5)

EXTERNAL_SOURCES: tuple[str, ...] = ("trustpilot", "google", "reddit", "quora", "youtube")


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounded half up (2.5 -> 3), unlike built-in round()."""
    denominator = max(1, denominator)
    return (2 * numerator + denominator) // (2 * denominator)


class _Record(BaseModel):
    model_config = ConfigDict(frozen=True)


class ImageAltCoverage(_Record):
    """Image counts; the ratio is computed by the scorer."""

    with_alt: int = Field(default=0, ge=0)
    total: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_counts(self) -> "ImageAltCoverage":
        if self.with_alt > self.total:
            raise ValueError("with_alt cannot exceed total")
        return self


class InternalLink(_Record):
    text: str
    href: str


class ContentSignals(_Record):
    """Normalized facts extracted from one page."""

    source_url: str | None = None
    markup: str = Field(default="", repr=False, exclude=True)
    title: str | None = None
    meta_description: str | None = None
    h1: tuple[str, ...] = ()
    h2: tuple[str, ...] = ()
    h3: tuple[str, ...] = ()
    body_text: str = ""
    brand_name: str | None = None
    product_schema_found: bool = False
    faq_schema_found: bool = False
    breadcrumb_schema_found: bool = False
    reviews_schema_found: bool = False
    image_alt_coverage: ImageAltCoverage = Field(default_factory=ImageAltCoverage)
    internal_links: tuple[InternalLink, ...] = ()
    reviews_or_testimonials_mentioned: bool = False


class PillarCheck(_Record):
    id: str
    label: str
    passed: bool
    weight: int = Field(ge=1)


class PillarScore(_Record):
    name: str
    score: int = Field(ge=0, le=100)
    checks: tuple[PillarCheck, ...]


class ScoreReport(_Record):
    """Scored pillars plus remediation suggestions for the failed checks."""

    pillars: tuple[PillarScore, ...]
    suggestions: tuple[str, ...] = ()

    @computed_field
    @property
    def overall(self) -> int:
        weighted = sum(p.score * w for p, w in zip(self.pillars, PILLAR_WEIGHTS))
        return round_half_up(weighted, 100)


class ExternalTotals(_Record):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    total_mentions: int = Field(default=0, alias="totalMentions")

    @field_validator("total_mentions", mode="before")
    @classmethod
    def normalize_count(cls, value: object) -> int:
        return _as_count(value)


class ExternalSignalSummary(_Record):
    """Off-site evidence supplied by the caller (review sites, search, social, video)."""

    counts: dict[str, int] = Field(default_factory=dict)
    totals: ExternalTotals = Field(default_factory=ExternalTotals)

    @field_validator("counts", mode="before")
    @classmethod
    def normalize_counts(cls, value: object) -> dict[str, int]:
        if not isinstance(value, dict):
            return {}
        return {str(key).strip().lower(): _as_count(count) for key, count in value.items()}

    def positive_sources(self) -> int:
        return sum(1 for name in EXTERNAL_SOURCES if self.counts.get(name, 0) > 0)


def _as_count(value: object) -> int:
    if isinstance(value, bool):
        return int(value)
    try:
        count = int(value)  # type: ignore[arg-type]
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, count)
