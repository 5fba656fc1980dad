"""Page signal extractor: parse markup and extract content-readiness signals.

Extracts title/description, headings (with fallbacks for pages that have no
real <h1>), visible text, internal links, JSON-LD schema flags, image alt
coverage and review mentions. Does NOT fetch anything: callers supply the
markup. Malformed input degrades to empty values and never raises.
"""

import html as _html
import json as _json
import re
from typing import Any, Callable
from urllib.parse import unquote, urljoin, urlparse

from bs4 import BeautifulSoup
from bs4.element import PreformattedString, Tag

from models import ContentSignals, ImageAltCoverage, InternalLink

HEADING_MAX_CHARS = 300
QUERY_NAME_MAX_CHARS = 80

WHITESPACE_RE = re.compile(r"\s+")
JSONLD_TYPE_RE = re.compile(r"application/ld\+json", re.IGNORECASE)
REVIEWS_MENTION_RE = re.compile(r"reviews?|ratings?|testimonials?|\bstars\b", re.IGNORECASE)

_HIDDEN_TAGS = {"script", "style", "noscript", "template", "title"}
_TITLE_KEYS = ("name", "headline", "alternativeHeadline", "title")
_BRAND_KEYS = ("name", "@name", "title")

ARIA_H1_SELECTOR = '[role="heading"][aria-level="1"]'
PRODUCT_TITLE_SELECTOR = (
    '[itemprop="name"], .product-title, .title, [data-test="product-title"], h1[title]'
)

# Marketplace decorations stripped from titles before they are used as a search query.
_QUERY_SUFFIX_RES = (
    re.compile(r"\s*\|\s*Flipkart.*$", re.IGNORECASE),
    re.compile(r"\s*\|\s*Amazon.*$", re.IGNORECASE),
    re.compile(r"\s*- Buy.*Online.*$", re.IGNORECASE),
    re.compile(r"\s*\(.*?\)\s*$"),
)


def _clean(text: str | None) -> str:
    return WHITESPACE_RE.sub(" ", text or "").strip()


def _meta_content(soup: BeautifulSoup, **attrs: str) -> str:
    tag = soup.find("meta", attrs=attrs)
    if tag is None:
        return ""
    return _clean(tag.get("content") or "")


def _texts(elements: list[Tag]) -> list[str]:
    return [text for text in (_clean(el.get_text(" ")) for el in elements) if text]


def _dedupe(headings: list[str]) -> tuple[str, ...]:
    clipped = (_clean(h)[:HEADING_MAX_CHARS] for h in headings)
    return tuple(dict.fromkeys(h for h in clipped if h))


def _visible_text(soup: BeautifulSoup) -> str:
    # The whole document is walked: html.parser can nest <body> inside an
    # unclosed <head> and keeps text found after </body> outside it.
    parts: list[str] = []
    for node in soup.find_all(string=True):
        if isinstance(node, PreformattedString):
            continue
        if any(parent.name in _HIDDEN_TAGS for parent in node.parents):
            continue
        parts.append(str(node))
    return _clean(" ".join(parts))


def _host(url: str | None) -> str:
    if not url:
        return ""
    try:
        return (urlparse(url).netloc or "").lower()
    except ValueError:
        return ""


def _internal_links(soup: BeautifulSoup, source_url: str | None) -> tuple[InternalLink, ...]:
    base_host = _host(source_url)
    links: list[InternalLink] = []
    for a in soup.find_all("a", href=True):
        href = (a.get("href") or "").strip()
        if not href:
            continue
        if base_host:
            try:
                resolved = urljoin(source_url, href)
                is_internal = (urlparse(resolved).netloc or "").lower() == base_host
            except ValueError:
                continue
        else:
            resolved = href
            is_internal = href.startswith(("/", "#"))
        if is_internal:
            links.append(InternalLink(text=_clean(a.get_text(" ")), href=resolved))
    return tuple(links)


def _truthy(value: Any) -> bool:
    # Empty JSON objects and arrays still count as present.
    if isinstance(value, (dict, list)):
        return True
    return bool(value)


class _JsonLdFindings:
    """Accumulates what the structured-data walk finds across all blocks."""

    def __init__(self) -> None:
        self.product = False
        self.faq = False
        self.breadcrumb = False
        self.reviews = False
        self.title_candidates: list[str] = []
        self.brand_name = ""

    def visit(self, value: Any) -> None:
        # Pre-order walk: an object is inspected before its children.
        stack = [value]
        while stack:
            node = stack.pop()
            if isinstance(node, dict):
                self._inspect(node)
                children = list(node.values())
            elif isinstance(node, list):
                children = node
            else:
                continue
            stack.extend(reversed(children))

    def _inspect(self, obj: dict) -> None:
        raw_type = obj.get("@type")
        types = raw_type if isinstance(raw_type, list) else [raw_type]
        if "Product" in types:
            self.product = True
        if "FAQPage" in types:
            self.faq = True
        if "BreadcrumbList" in types:
            self.breadcrumb = True
        if "Review" in types or _truthy(obj.get("aggregateRating")):
            self.reviews = True

        candidate = next((obj[k] for k in _TITLE_KEYS if _truthy(obj.get(k))), None)
        if isinstance(candidate, str) and candidate.strip():
            self.title_candidates.append(candidate.strip())

        brand = obj.get("brand")
        if not self.brand_name and isinstance(brand, dict):
            name = next((brand[k] for k in _BRAND_KEYS if _truthy(brand.get(k))), None)
            if isinstance(name, str) and name.strip():
                self.brand_name = name.strip()


def _walk_json_ld(soup: BeautifulSoup) -> _JsonLdFindings:
    findings = _JsonLdFindings()
    for script_tag in soup.find_all("script", attrs={"type": JSONLD_TYPE_RE}):
        try:
            payload = _json.loads(script_tag.string or "")
        except (ValueError, RecursionError):
            continue
        findings.visit(payload)
    return findings


def _heading_fallbacks(
    soup: BeautifulSoup, og_title: str, findings: _JsonLdFindings
) -> tuple[Callable[[], list[str]], ...]:
    """Candidate producers for a missing <h1>, highest priority first."""

    def aria_level_one() -> list[str]:
        return _texts(soup.select(ARIA_H1_SELECTOR))

    def product_title_markers() -> list[str]:
        found = []
        for el in soup.select(PRODUCT_TITLE_SELECTOR):
            text = _clean(el.get_text(" ")) or _clean(el.get("title") or "")
            if text:
                found.append(text)
        return found

    def open_graph_title() -> list[str]:
        return [og_title] if og_title else []

    def json_ld_title() -> list[str]:
        return findings.title_candidates[:1]

    return (aria_level_one, product_title_markers, open_graph_title, json_ld_title)


def resolve_h1(candidates: tuple[Callable[[], list[str]], ...]) -> list[str]:
    """Return the first non-empty result among the candidate producers."""
    for produce in candidates:
        found = produce()
        if found:
            return found
    return []


def extract(markup: str | None, source_url: str | None = None) -> ContentSignals:
    """
    Parse `markup` and return the page's content signals.
    Never raises on malformed markup; missing elements give empty values.
    """
    markup = markup or ""
    source_url = (source_url or "").strip() or None
    soup = BeautifulSoup(markup, "html.parser")

    # --- Title / description ---
    og_title = _meta_content(soup, property="og:title")
    title = ""
    if soup.title is not None:
        title = _clean(soup.title.get_text())
    title = title or og_title

    meta_description = _meta_content(soup, name="description") or _meta_content(
        soup, property="og:description"
    )

    # --- Headings ---
    h1 = _texts(soup.find_all("h1"))
    h2 = _texts(soup.find_all("h2"))
    h3 = _texts(soup.find_all("h3"))

    body_text = _visible_text(soup)
    internal_links = _internal_links(soup, source_url)
    findings = _walk_json_ld(soup)

    if not h1:
        h1 = resolve_h1(_heading_fallbacks(soup, og_title, findings))

    # --- Images ---
    images = soup.find_all("img")
    with_alt = sum(1 for img in images if (img.get("alt") or "").strip())

    return ContentSignals(
        source_url=source_url,
        markup=markup,
        title=title or None,
        meta_description=meta_description or None,
        h1=_dedupe(h1),
        h2=_dedupe(h2),
        h3=_dedupe(h3),
        body_text=body_text,
        brand_name=findings.brand_name or None,
        product_schema_found=findings.product,
        faq_schema_found=findings.faq,
        breadcrumb_schema_found=findings.breadcrumb,
        reviews_schema_found=findings.reviews,
        image_alt_coverage=ImageAltCoverage(with_alt=with_alt, total=len(images)),
        internal_links=internal_links,
        reviews_or_testimonials_mentioned=bool(REVIEWS_MENTION_RE.search(body_text)),
    )


def as_markup(content: str | None) -> str:
    """Wrap pasted plain text in a minimal HTML envelope; markup passes through."""
    content = content or ""
    if "<" in content:
        return content
    escaped = _html.escape(content, quote=False)
    return (
        "<html><head><title>Document</title></head>"
        f"<body><article>{escaped}</article></body></html>"
    )


def _slug_name(source_url: str) -> str:
    try:
        segments = [s for s in urlparse(source_url).path.split("/") if s]
    except ValueError:
        return ""
    for segment in reversed(segments):
        if segment.lower() in {"buy", "p"} or segment.isdigit():
            continue
        if re.search(r"[a-z\-_%]", segment, re.IGNORECASE):
            decoded = _clean(re.sub(r"[-_]+", " ", unquote(segment)))
            return decoded if len(decoded) > 4 else ""
    return ""


def derive_query_name(signals: ContentSignals) -> str:
    """
    Best brand/product name to search for when collecting off-site signals.
    Title or first h1 (marketplace suffixes removed), then URL slug, then host.
    """
    candidates = [signals.title or ""]
    if signals.h1:
        candidates.append(signals.h1[0])
    best = next((c for c in candidates if len(c) > 3), "")
    for suffix_re in _QUERY_SUFFIX_RES:
        best = suffix_re.sub("", best)
    best = _clean(best)

    if len(best) < 4 and signals.source_url:
        best = _slug_name(signals.source_url) or best

    if not best:
        host = _host(signals.source_url).split(":")[0]
        if host.startswith("www."):
            host = host[4:]
        best = host.split(".")[0]

    return best[:QUERY_NAME_MAX_CHARS]
