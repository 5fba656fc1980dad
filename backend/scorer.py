"""Pillar scorer: turn extracted content signals into a readiness score.

Five fixed pillars of weighted checks, blended into an overall 0-100 score,
plus one remediation suggestion per failed check. Pure and deterministic.
"""

import re
from enum import Enum

from models import (
    ContentSignals,
    ExternalSignalSummary,
    PillarCheck,
    PillarScore,
    ScoreReport,
    round_half_up,
)

FAQ_RE = re.compile(r"\bfaqs?\b|frequently asked questions", re.IGNORECASE)
SPECS_RE = re.compile(r"size|dimensions?|material|care|price|stock|sku|model", re.IGNORECASE)
RICH_DESCRIPTION_RE = re.compile(
    r"benefit|use case|why|features?|specifications?|ideal for|best for", re.IGNORECASE
)
BUYING_GUIDE_RE = re.compile(r"buying guide|how to choose|what to look for", re.IGNORECASE)
COMPARISON_RE = re.compile(r"compare|vs\.?|comparison", re.IGNORECASE)
TABLE_RE = re.compile(r"<table[\s\S]*?</table>", re.IGNORECASE)
SEASONAL_RE = re.compile(r"summer|winter|spring|fall|seasonal|202\d", re.IGNORECASE)
TOPICS_RE = re.compile(
    r"features?|benefits?|pros|cons|alternatives?|questions?|best|top|guide|review",
    re.IGNORECASE,
)
VIEWPORT_RE = re.compile(r"<meta[^>]+name=[\"']viewport[\"'][^>]*>", re.IGNORECASE)
TRUST_RE = re.compile(
    r"trustpilot|google reviews?|as seen on|featured in|award|certified|warranty",
    re.IGNORECASE,
)

MIN_ALT_COVERAGE = 0.7
MIN_INTERNAL_LINKS = 10
MIN_WORD_COUNT = 500
POINTS_PER_SOURCE = 20

SUGGESTIONS: dict[str, str] = {
    "specs": "Add structured product specs like size, material, care, price, and stock.",
    "rich": "Expand product description with benefits, use cases, and differentiators.",
    "faqs": "Add an FAQ section or implement FAQ schema to answer common questions.",
    "reviews": "Show customer reviews or ratings; implement Review/AggregateRating schema.",
    "alt": "Ensure at least 70% of product images have descriptive alt text.",
    "guide": "Publish a buying guide explaining how to choose the right product.",
    "comparison": "Add a comparison table between models or alternatives.",
    "seasonal": "Incorporate seasonal/trend keywords where relevant.",
    "links": "Add internal links to related categories, guides, and products.",
    "length": "Increase page content to at least 500 words with useful details.",
    "topics": "Cover more topics: features, benefits, pros/cons, alternatives, FAQs.",
    "questions": "Answer the questions shoppers ask, in a dedicated Q&A or FAQ block.",
    "productSchema": "Add Product JSON-LD schema with offers, brand, and ratings.",
    "faqSchema": "Add FAQPage JSON-LD schema for your FAQ section.",
    "breadcrumb": "Implement BreadcrumbList schema for better navigation.",
    "mobile": "Add meta viewport and ensure mobile-friendly layout.",
    "https": "Serve the page over HTTPS with a valid certificate.",
    "externalReviews": "Build trust with external reviews (Trustpilot/Google) and cite them.",
}


class ScoringRule(str, Enum):
    """How a pillar turns its checks into a 0-100 score."""

    WEIGHTED = "weighted"
    SOURCE_COUNT = "source_count"


def _check(check_id: str, label: str, passed: bool, weight: int) -> PillarCheck:
    return PillarCheck(id=check_id, label=label, passed=bool(passed), weight=weight)


def _pillar(
    name: str,
    checks: list[PillarCheck],
    rule: ScoringRule = ScoringRule.WEIGHTED,
    sources_present: int = 0,
) -> PillarScore:
    if rule is ScoringRule.SOURCE_COUNT:
        value = min(100, POINTS_PER_SOURCE * sources_present)
    else:
        total = sum(c.weight for c in checks)
        gained = sum(c.weight for c in checks if c.passed)
        value = round_half_up(100 * gained, total)
    return PillarScore(name=name, score=value, checks=tuple(checks))


def _alt_coverage_ok(signals: ContentSignals) -> bool:
    coverage = signals.image_alt_coverage
    if coverage.total == 0:
        return True
    return coverage.with_alt / coverage.total >= MIN_ALT_COVERAGE


def _product_page(signals: ContentSignals, has_faqs: bool) -> PillarScore:
    text = signals.body_text
    has_reviews = signals.reviews_schema_found or signals.reviews_or_testimonials_mentioned
    return _pillar(
        "Product Page Quality",
        [
            _check("specs", "Product specs present", SPECS_RE.search(text), 3),
            _check("rich", "Rich description (benefits/use cases)", RICH_DESCRIPTION_RE.search(text), 3),
            _check("faqs", "FAQs included", has_faqs, 2),
            _check("reviews", "Customer reviews present", has_reviews, 3),
            _check("alt", "Image alt tags coverage", _alt_coverage_ok(signals), 2),
        ],
    )


def _category_guides(signals: ContentSignals) -> PillarScore:
    text = signals.body_text
    has_comparison = bool(COMPARISON_RE.search(text) or TABLE_RE.search(signals.markup))
    return _pillar(
        "Category & Guides",
        [
            _check("guide", "Buying guides present", BUYING_GUIDE_RE.search(text), 2),
            _check("comparison", "Comparison charts/tables", has_comparison, 2),
            _check("seasonal", "Trend/seasonal keywords", SEASONAL_RE.search(text), 1),
            _check(
                "links",
                f"Adequate internal links (>={MIN_INTERNAL_LINKS})",
                len(signals.internal_links) >= MIN_INTERNAL_LINKS,
                2,
            ),
        ],
    )


def _content_depth(signals: ContentSignals, has_faqs: bool) -> PillarScore:
    word_count = len(signals.body_text.split())
    return _pillar(
        "Content Depth & Authority",
        [
            _check("length", f"Sufficient word count (>={MIN_WORD_COUNT})", word_count >= MIN_WORD_COUNT, 3),
            _check("topics", "Topical coverage breadth", TOPICS_RE.search(signals.body_text), 3),
            _check("questions", "Questions answered present", has_faqs, 2),
        ],
    )


def _technical(signals: ContentSignals) -> PillarScore:
    is_https = not signals.source_url or signals.source_url.startswith("https://")
    return _pillar(
        "Technical & Schema",
        [
            _check("productSchema", "Product schema implemented", signals.product_schema_found, 3),
            _check("faqSchema", "FAQ schema implemented", signals.faq_schema_found, 2),
            _check("breadcrumb", "Breadcrumb schema", signals.breadcrumb_schema_found, 1),
            _check("mobile", "Mobile-friendly (viewport tag)", VIEWPORT_RE.search(signals.markup), 2),
            _check("https", "HTTPS secure", is_https, 1),
        ],
    )


def _off_site(signals: ContentSignals, external: ExternalSignalSummary | None) -> PillarScore:
    name = "Off-Site & Trust Signals"
    label = "External reviews/mentions referenced"
    if external is None:
        passed = TRUST_RE.search(signals.body_text)
        return _pillar(name, [_check("externalReviews", label, passed, 2)])

    # The check's weight is reported but the score comes from the source count.
    sources_present = external.positive_sources()
    passed = sources_present > 0 or external.totals.total_mentions > 0
    return _pillar(
        name,
        [_check("externalReviews", label, passed, 2)],
        rule=ScoringRule.SOURCE_COUNT,
        sources_present=sources_present,
    )


def suggestions_for(pillars: list[PillarScore]) -> tuple[str, ...]:
    """One remediation per failed check, deduplicated in first-seen order."""
    failed = (c for p in pillars for c in p.checks if not c.passed)
    return tuple(dict.fromkeys(SUGGESTIONS.get(c.id, c.label) for c in failed))


def score(signals: ContentSignals, external: ExternalSignalSummary | None = None) -> ScoreReport:
    """Score `signals` across the five pillars. Never raises."""
    has_faqs = bool(FAQ_RE.search(signals.body_text)) or signals.faq_schema_found
    pillars = [
        _product_page(signals, has_faqs),
        _category_guides(signals),
        _content_depth(signals, has_faqs),
        _technical(signals),
        _off_site(signals, external),
    ]
    return ScoreReport(pillars=tuple(pillars), suggestions=suggestions_for(pillars))
