"""Extraction strategies over a parsed article page.

Each body strategy takes a :class:`Page` and returns paragraphs joined by
blank lines, or an empty string when it finds nothing usable.
"""

import json
import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, Iterator, List, Optional, Sequence, Tuple

import trafilatura
from bs4 import BeautifulSoup

from newsbias.pipeline.extractors.filters import (
    container_label,
    filter_paragraphs,
    is_unwanted_container,
    remove_unwanted_elements,
    split_text_block,
)
from newsbias.utils.date_utils import parse_date
from newsbias.utils.logging import get_logger
from newsbias.utils.text_utils import clean_whitespace, count_words

logger = get_logger(__name__)

MIN_BODY_PARAGRAPHS = 3
MAX_PAGE_PARAGRAPHS = 50

MAIN_CONTAINER_SELECTORS = [
    "main",
    "article",
    ".main-content",
    ".content-main",
    ".article-main",
    ".story-main",
    "#main-content",
    "#article-content",
    "#story-content",
    "[role='main']",
    ".post-content",
    ".entry-content",
    ".article-body",
    ".story-body",
]

TITLE_FALLBACK_SELECTORS = [
    "h1",
    "h2",
    ".headline",
    ".title",
    ".story-headline",
    ".article-title",
    ".main-title",
    "[class*='title']",
    "[class*='headline']",
    "[data-title]",
]

TITLE_META = ["meta[property='og:title']", "meta[name='twitter:title']"]

AUTHOR_FALLBACK_SELECTORS = [
    ".author",
    ".byline",
    ".story-author",
    ".article-author",
    "[class*='author']",
    "[class*='byline']",
    "[rel='author']",
]

AUTHOR_META = ["meta[name='author']", "meta[property='article:author']"]

DATE_META = [
    "meta[property='article:published_time']",
    "meta[property='article:modified_time']",
    "meta[name='publish-date']",
    "meta[name='date']",
]

DESCRIPTION_META = [
    "meta[property='og:description']",
    "meta[name='description']",
    "meta[name='twitter:description']",
    "meta[property='article:content']",
]

REPORTING_VERBS = re.compile(r"\b(said|according|reported|announced|stated)\b", re.IGNORECASE)
SENTENCE_BREAK = re.compile(r"\.\s+[A-Z]")


@dataclass
class Page:
    """A fetched article page.

    ``json_ld`` holds structured-data payloads captured before the document
    is cleaned, since cleanup removes every script tag.
    """

    url: str
    html: str
    soup: BeautifulSoup
    json_ld: List[Any] = field(default_factory=list)

    @classmethod
    def parse(cls, html: str, url: str) -> "Page":
        """Parse HTML, capture JSON-LD, then strip page furniture."""
        soup = BeautifulSoup(html, "html.parser")
        json_ld = capture_json_ld(soup)
        remove_unwanted_elements(soup)
        return cls(url=url, html=html, soup=soup, json_ld=json_ld)


BodyStrategy = Callable[[Page], str]


def capture_json_ld(soup: BeautifulSoup) -> List[Any]:
    """Decode every application/ld+json block in the document."""
    payloads = []
    for script in soup.find_all("script", attrs={"type": "application/ld+json"}):
        raw = script.string or script.get_text()
        if not raw or not raw.strip():
            continue
        try:
            payloads.append(json.loads(raw))
        except json.JSONDecodeError:
            logger.debug("json_ld_decode_failed", length=len(raw))
    return payloads


def _element_text(element, separator: str = " ") -> str:
    return clean_whitespace(element.get_text(separator))


def _container_paragraphs(container) -> List[str]:
    """Valid paragraphs inside a container, from <p> tags or its raw text."""
    paragraphs = filter_paragraphs([p.get_text(" ") for p in container.find_all("p")])
    if paragraphs:
        return paragraphs

    text = container.get_text("\n")
    if len(clean_whitespace(text)) > 100:
        return filter_paragraphs(split_text_block(text))
    return []


def _select_first(soup: BeautifulSoup, selector: str) -> List[Any]:
    return soup.select(selector, limit=1)


def first_text(soup: BeautifulSoup, selectors: Sequence[str], min_length: int = 5) -> str:
    """Text of the first selector whose first match is longer than min_length."""
    for selector in selectors:
        matches = _select_first(soup, selector)
        if not matches:
            continue
        text = _element_text(matches[0])
        if len(text) > min_length:
            return text
    return ""


def body_from_selectors(page: Page, selectors: Sequence[str]) -> str:
    """Body from the first selector whose container yields enough paragraphs."""
    for selector in selectors:
        matches = _select_first(page.soup, selector)
        if not matches:
            continue
        paragraphs = _container_paragraphs(matches[0])
        if len(paragraphs) >= MIN_BODY_PARAGRAPHS:
            logger.debug("body_selector_matched", selector=selector, paragraphs=len(paragraphs))
            return "\n\n".join(paragraphs)
    return ""


def main_containers(page: Page) -> str:
    """Paragraphs from well-known main content containers."""
    return body_from_selectors(page, MAIN_CONTAINER_SELECTORS)


def score_block(element, text: str) -> float:
    """Score a candidate block: length, sentence breaks, reporting verbs, class."""
    label = container_label(element).lower()
    score = count_words(text) * 0.1 + len(SENTENCE_BREAK.findall(text)) * 10
    if REPORTING_VERBS.search(text):
        score += 50
    if "content" in label or "article" in label or "story" in label:
        score += 30
    return score


def best_scored_block(page: Page) -> str:
    """Paragraphs from the highest-scoring generic container."""
    best: Optional[Tuple[float, Any, str]] = None

    for element in page.soup.find_all(["div", "section", "article", "main"]):
        if is_unwanted_container(container_label(element)):
            continue
        text = _element_text(element)
        if len(text) <= 200:
            continue
        score = score_block(element, text)
        if best is None or score > best[0]:
            best = (score, element, text)

    if best is None:
        return ""

    _, element, text = best
    paragraphs = filter_paragraphs([p.get_text(" ") for p in element.find_all("p")])
    if len(paragraphs) < 2:
        paragraphs = filter_paragraphs(split_text_block(element.get_text("\n")))
    return "\n\n".join(paragraphs)


def _inside_unwanted_container(element) -> bool:
    return any(is_unwanted_container(container_label(parent)) for parent in element.parents if parent.name)


def all_paragraphs(page: Page) -> str:
    """Every valid paragraph on the page outside unwanted containers."""
    candidates = [p.get_text(" ") for p in page.soup.find_all("p") if not _inside_unwanted_container(p)]
    paragraphs = filter_paragraphs(candidates)
    if len(paragraphs) < MIN_BODY_PARAGRAPHS:
        return ""
    return "\n\n".join(paragraphs[:MAX_PAGE_PARAGRAPHS])


def readability(page: Page) -> str:
    """Main text as found by trafilatura, filtered through the paragraph validator."""
    content = trafilatura.extract(
        page.html,
        url=page.url,
        include_comments=False,
        include_tables=False,
        include_formatting=False,
        output_format="txt",
    )
    if not content:
        return ""
    return "\n\n".join(filter_paragraphs(content.splitlines()))


GENERIC_STRATEGIES: List[Tuple[str, BodyStrategy]] = [
    ("main_containers", main_containers),
    ("best_scored_block", best_scored_block),
    ("all_paragraphs", all_paragraphs),
    ("readability", readability),
]


def title_fallback(soup: BeautifulSoup) -> str:
    """Headline from generic selectors, meta tags or <title> (10-200 chars)."""
    for selector in TITLE_FALLBACK_SELECTORS:
        matches = _select_first(soup, selector)
        if matches:
            text = _element_text(matches[0])
            if 10 < len(text) < 200:
                return text

    for selector in TITLE_META:
        content = _meta_content(soup, selector)
        if 10 < len(content) < 200:
            return content

    if soup.title is not None:
        text = _element_text(soup.title)
        if 10 < len(text) < 200:
            return text
    return ""


def author_fallback(soup: BeautifulSoup) -> str:
    """Author from generic byline selectors or meta tags (2-100 chars)."""
    for selector in AUTHOR_FALLBACK_SELECTORS:
        matches = _select_first(soup, selector)
        if matches:
            text = _element_text(matches[0])
            if 2 < len(text) < 100:
                return text

    for selector in AUTHOR_META:
        content = _meta_content(soup, selector)
        if 2 < len(content) < 100:
            return content
    return ""


def extract_date(soup: BeautifulSoup, selectors: Sequence[str]) -> Optional[datetime]:
    """Publication date from selectors, then meta tags, then <time datetime>."""
    for selector in selectors:
        matches = _select_first(soup, selector)
        if matches:
            parsed = parse_date(_element_text(matches[0]))
            if parsed:
                return parsed

    for selector in DATE_META:
        parsed = parse_date(_meta_content(soup, selector))
        if parsed:
            return parsed

    for time_tag in soup.find_all("time"):
        parsed = parse_date(time_tag.get("datetime"))
        if parsed:
            return parsed
    return None


def _meta_content(soup: BeautifulSoup, selector: str) -> str:
    tag = soup.select_one(selector)
    if tag is None:
        return ""
    return clean_whitespace(tag.get("content") or "")


def _paragraphize(text: str) -> str:
    """Break a long unstructured block into three-sentence paragraphs."""
    text = text.strip()
    if "\n\n" in text:
        return text
    sentences = re.split(r"(?<=[.!?])\s+", clean_whitespace(text))
    chunks = [" ".join(sentences[i : i + 3]) for i in range(0, len(sentences), 3)]
    return "\n\n".join(c for c in chunks if c)


def _walk_json_ld(payload: Any) -> Iterator[Dict[str, Any]]:
    if isinstance(payload, list):
        for item in payload:
            yield from _walk_json_ld(item)
    elif isinstance(payload, dict):
        yield payload
        if "@graph" in payload:
            yield from _walk_json_ld(payload["@graph"])


def metadata_body(page: Page) -> str:
    """Body from description meta tags, then JSON-LD articleBody/description."""
    for selector in DESCRIPTION_META:
        content = _meta_content(page.soup, selector)
        if 100 < len(content) < 1000:
            return content

    for node in (n for payload in page.json_ld for n in _walk_json_ld(payload)):
        article_body = node.get("articleBody")
        if isinstance(article_body, str) and len(article_body.strip()) > 100:
            return _paragraphize(article_body)
        description = node.get("description")
        if isinstance(description, str) and 100 < len(description.strip()) < 1000:
            return description.strip()
    return ""
