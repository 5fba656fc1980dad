import pytest

from extractor import extract
from models import (
    ContentSignals,
    ExternalSignalSummary,
    ImageAltCoverage,
    InternalLink,
    round_half_up,
)
from scorer import SUGGESTIONS, ScoringRule, _pillar, score

PILLAR_NAMES = [
    "Product Page Quality",
    "Category & Guides",
    "Content Depth & Authority",
    "Technical & Schema",
    "Off-Site & Trust Signals",
]

SCENARIO_A = (
    "<html><head><title>Widget</title></head><body><h1>Buy Widget</h1>"
    "<p>size material price stock sku model benefit use case review rating "
    + "lorem " * 500
    + "</p></body></html>"
)

FULL_MARKS_BODY = (
    "Size, material and price with stock info. Benefits and use case notes. "
    "FAQ: frequently asked questions answered. Buying guide: how to choose. "
    "Compare models. Summer 2025 range. Pros and cons, alternatives. "
    "Featured in the press, award winning, 5-year warranty. " + "detail " * 500
)


def _pillar_by_name(report, name):
    return next(p for p in report.pillars if p.name == name)


def _check_by_id(report, check_id):
    return next(c for p in report.pillars for c in p.checks if c.id == check_id)


def _full_marks_signals() -> ContentSignals:
    return ContentSignals(
        source_url="https://shop.example.com/products/widget",
        markup='<meta name="viewport" content="width=device-width"><table><tr><td>1</td></tr></table>',
        body_text=FULL_MARKS_BODY,
        product_schema_found=True,
        faq_schema_found=True,
        breadcrumb_schema_found=True,
        reviews_schema_found=True,
        image_alt_coverage=ImageAltCoverage(with_alt=4, total=4),
        internal_links=tuple(InternalLink(text=f"Link {i}", href=f"/c/{i}") for i in range(10)),
    )


def test_pillars_come_in_fixed_order():
    report = score(extract(""))

    assert [p.name for p in report.pillars] == PILLAR_NAMES
    assert [[c.id for c in p.checks] for p in report.pillars] == [
        ["specs", "rich", "faqs", "reviews", "alt"],
        ["guide", "comparison", "seasonal", "links"],
        ["length", "topics", "questions"],
        ["productSchema", "faqSchema", "breadcrumb", "mobile", "https"],
        ["externalReviews"],
    ]


def test_scenario_a_moderate_score():
    report = score(extract(SCENARIO_A))

    assert _check_by_id(report, "specs").passed
    assert _check_by_id(report, "rich").passed
    assert _check_by_id(report, "reviews").passed
    assert _check_by_id(report, "alt").passed
    assert not _check_by_id(report, "faqs").passed
    assert [p.score for p in report.pillars] == [85, 0, 75, 11, 0]
    assert report.overall == 46
    assert 0 < report.overall < 100


def test_scenario_b_empty_markup():
    report = score(extract(""))
    failed = [c for p in report.pillars for c in p.checks if not c.passed]

    assert [p.score for p in report.pillars] == [15, 0, 0, 11, 0]
    assert report.overall == 7
    assert {c.id for c in failed} == set(SUGGESTIONS) - {"alt", "https"}
    assert len(report.suggestions) == len(failed)


def test_scenario_c_external_sources_drive_off_site_score():
    external = ExternalSignalSummary.model_validate(
        {"counts": {"trustpilot": 3, "google": 1}, "totals": {"totalMentions": 10}}
    )
    for markup in ("", SCENARIO_A, "<body>award winning warranty, as seen on TV</body>"):
        report = score(extract(markup), external)
        off_site = _pillar_by_name(report, "Off-Site & Trust Signals")

        assert off_site.score == 40
        assert off_site.checks[0].passed


def test_off_site_source_score_caps_at_100():
    external = ExternalSignalSummary(
        counts={"trustpilot": 1, "google": 2, "reddit": 3, "quora": 4, "youtube": 5, "bing": 6}
    )
    off_site = _pillar_by_name(score(extract(""), external), "Off-Site & Trust Signals")

    assert off_site.score == 100


def test_off_site_mentions_only_pass_check_with_zero_score():
    external = ExternalSignalSummary.model_validate(
        {"counts": {"bing": 4, "google": "n/a"}, "totals": {"totalMentions": 7}}
    )
    report = score(extract(""), external)
    off_site = _pillar_by_name(report, "Off-Site & Trust Signals")

    assert off_site.checks[0].passed
    assert off_site.score == 0
    assert SUGGESTIONS["externalReviews"] not in report.suggestions


def test_off_site_falls_back_to_trust_vocabulary():
    with_trust = score(extract("<body>Rated Excellent on Trustpilot</body>"))
    without_trust = score(extract("<body>Plain page</body>"))

    assert _pillar_by_name(with_trust, "Off-Site & Trust Signals").score == 100
    assert _pillar_by_name(without_trust, "Off-Site & Trust Signals").score == 0


def test_full_marks_page_scores_100():
    external = ExternalSignalSummary(counts={name: 1 for name in ("trustpilot", "google", "reddit", "quora", "youtube")})
    report = score(_full_marks_signals(), external)

    assert [p.score for p in report.pillars] == [100] * 5
    assert report.overall == 100
    assert report.suggestions == ()


def test_vacuous_truths_without_images_or_url():
    report = score(extract("<body><p>No images here</p></body>"))

    assert _check_by_id(report, "alt").passed
    assert _check_by_id(report, "https").passed


def test_http_url_fails_https_check():
    report = score(extract("<body></body>", "http://shop.example.com/"))

    assert not _check_by_id(report, "https").passed
    assert SUGGESTIONS["https"] in report.suggestions


@pytest.mark.parametrize(("with_alt", "passed"), [(7, True), (6, False), (10, True), (0, False)])
def test_alt_coverage_threshold(with_alt, passed):
    signals = ContentSignals(image_alt_coverage=ImageAltCoverage(with_alt=with_alt, total=10))

    assert _check_by_id(score(signals), "alt").passed is passed


def test_faq_schema_satisfies_text_faq_checks():
    report = score(ContentSignals(faq_schema_found=True))

    assert _check_by_id(report, "faqs").passed
    assert _check_by_id(report, "questions").passed
    assert _check_by_id(report, "faqSchema").passed


def test_table_in_markup_counts_as_comparison():
    report = score(extract("<body><table><tr><td>A</td><td>B</td></tr></table></body>"))

    assert _check_by_id(report, "comparison").passed


def test_viewport_meta_passes_mobile_check():
    markup = '<html><head><meta name="viewport" content="width=device-width, initial-scale=1"></head></html>'

    assert _check_by_id(score(extract(markup)), "mobile").passed


def test_every_failed_check_has_its_suggestion():
    markups = ["", SCENARIO_A, "<body>Compare our summer range. Buying guide inside.</body>"]
    for markup in markups:
        report = score(extract(markup))
        for pillar in report.pillars:
            for check in pillar.checks:
                if not check.passed:
                    assert SUGGESTIONS[check.id] in report.suggestions
        assert len(set(report.suggestions)) == len(report.suggestions)


def test_scores_stay_in_bounds():
    inputs = [
        (extract(""), None),
        (extract(SCENARIO_A), None),
        (_full_marks_signals(), None),
        (_full_marks_signals(), ExternalSignalSummary()),
        (extract("<body><img><img alt='a'></body>", "ftp://x"), ExternalSignalSummary(counts={"reddit": 99})),
    ]
    for signals, external in inputs:
        report = score(signals, external)
        assert 0 <= report.overall <= 100
        assert all(0 <= p.score <= 100 for p in report.pillars)


def test_scoring_is_idempotent():
    external = ExternalSignalSummary(counts={"youtube": 2})
    first = score(extract(SCENARIO_A, "https://shop.example.com/w"), external)
    second = score(extract(SCENARIO_A, "https://shop.example.com/w"), external)

    assert first.model_dump_json() == second.model_dump_json()


def test_weighted_pillar_guards_empty_weights():
    assert _pillar("Empty", []).score == 0
    assert _pillar("Sources", [], rule=ScoringRule.SOURCE_COUNT, sources_present=3).score == 60


@pytest.mark.parametrize(
    ("numerator", "denominator", "expected"),
    [(250, 100, 3), (249, 100, 2), (1100, 13, 85), (0, 0, 0), (7, 0, 7)],
)
def test_round_half_up(numerator, denominator, expected):
    assert round_half_up(numerator, denominator) == expected


def test_unclosed_head_page_still_scores_body_content():
    markup = (
        "<html><head><title>Widget</title><meta charset='utf-8'>"
        "<body><h1>Buy Widget</h1><p>size material price review</p></body></html>"
    )
    report = score(extract(markup))

    assert _check_by_id(report, "specs").passed
    assert _check_by_id(report, "reviews").passed
