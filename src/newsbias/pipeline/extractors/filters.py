"""Paragraph and container filters used during content extraction."""

import re
from typing import List

from bs4 import BeautifulSoup

from newsbias.utils.text_utils import clean_whitespace, count_words

MIN_PARAGRAPH_CHARS = 25
MIN_PARAGRAPH_WORDS = 6
MAX_TOTAL_WORDS = 8000

# Boilerplate that marks a paragraph as page furniture rather than article text
BOILERPLATE_PATTERNS = [
    re.compile(p, re.IGNORECASE)
    for p in (
        r"\bsubscri(be|bed|ption)\b|\bnewsletters?\b",
        r"\badvertisements?\b|\bsponsored\b|\bpromoted content\b",
        r"\brelated (articles?|stories|news)\b|\bmore news\b|\balso read\b",
        r"\bshare (this|on|via)\b|\bfollow us\b|\bconnect with us\b|\bjoin us on\b",
        r"\bskip to (main )?content\b|\bmain menu\b|\bread more\b|\bview all\b|\bsee all\b",
        r"\b(poll|polls|quiz)\b|\btake (our|the|this) survey\b",
        r"^\s*(by\s+[\w .,'-]{2,60}?\s*[|,]\s*)?(published|updated|last modified|posted)\s*(on|at)?\s*:",
        r"\b(tags?|categories?)\s*:",
        r"\bcopyright\b|©|\ball rights reserved\b|\bterms of (service|use)\b|\bprivacy policy\b",
        r"\bdownload (the |our )?app\b|\bmobile app\b",
        r"\bclick here\b|\bregister now\b|\bsign up\b",
    )
]

NAVIGATION_PHRASES = re.compile(
    r"\b(login|log in|sign in|menu|cookies?|trending now|breaking news|live updates|"
    r"whatsapp|telegram|instagram|back to top|next story|previous story)\b",
    re.IGNORECASE,
)

# class/id tokens that mark ads, navigation and other non-article containers
UNWANTED_CONTAINER_TOKENS = {
    "ad", "ads", "advert", "advertisement", "sponsored", "promo", "banner",
    "nav", "navbar", "navigation", "menu", "header", "footer", "sidebar",
    "social", "share", "sharing", "comment", "comments", "related",
    "trending", "popular", "recommended", "newsletter", "subscribe", "signup",
    "tag", "tags", "category", "breadcrumb", "breadcrumbs", "widget",
}

_TOKEN_SPLIT = re.compile(r"[\s_\-]+")

UNWANTED_TAGS = ["script", "style", "noscript", "iframe", "embed", "object", "nav", "footer", "aside"]

UNWANTED_SELECTORS = [
    ".ad", ".ads", ".advertisement", ".sponsored", ".promo",
    ".social", ".share", ".comments", ".comment-section",
    ".related", ".recommended", ".trending", ".popular",
    ".newsletter", ".subscription", ".subscribe",
    ".footer", ".site-header", ".nav", ".navigation", ".menu", ".sidebar", ".widget", ".breadcrumb",
    ".tags", ".tag-list", ".categories",
    ".poll", ".quiz", ".survey", ".vote",
    ".gallery", ".slideshow", ".carousel", ".video-player", ".audio-player",
    ".breaking-news", ".live-blog", ".live-updates",
    ".disclaimer", ".copyright", ".terms", ".mobile-app", ".download-app",
]

# Prefixed class/id tokens, e.g. "ad-slot", "share-bar", "comments-list"
UNWANTED_PREFIX = re.compile(
    r"^(ad|ads|social|share|related|recommended|trending|popular|newsletter|subscribe|comment|comments)-",
    re.IGNORECASE,
)


def is_navigation_text(text: str) -> bool:
    """Check whether text looks like navigation or UI chrome."""
    stripped = text.strip()
    if len(stripped) < 20 or count_words(stripped) < 5:
        return True
    if re.fullmatch(r"[A-Z\s]+", stripped):
        return True
    if re.fullmatch(r"\d+", stripped):
        return True
    return bool(NAVIGATION_PHRASES.search(stripped))


def is_valid_paragraph(text: str) -> bool:
    """Check whether a text fragment is plausible article prose.

    Args:
        text: Candidate paragraph

    Returns:
        True if the paragraph is long enough, free of boilerplate and
        not repetitive
    """
    if not text or len(text) < MIN_PARAGRAPH_CHARS:
        return False

    words = text.split()
    if len(words) < MIN_PARAGRAPH_WORDS:
        return False

    for pattern in BOILERPLATE_PATTERNS:
        if pattern.search(text):
            return False

    if is_navigation_text(text):
        return False

    unique_words = {w.lower() for w in words}
    if len(words) > 10 and len(unique_words) / len(words) < 0.4:
        return False

    return True


def is_unwanted_container(class_and_id: str) -> bool:
    """Check whether a container's class/id names it as non-article chrome."""
    tokens = {t.lower() for t in _TOKEN_SPLIT.split(class_and_id) if t}
    return bool(tokens & UNWANTED_CONTAINER_TOKENS)


def container_label(element) -> str:
    """Joined class and id attributes of an element."""
    classes = element.get("class") or []
    if isinstance(classes, str):
        classes = [classes]
    return " ".join(classes) + " " + (element.get("id") or "")


def remove_unwanted_elements(soup: BeautifulSoup) -> None:
    """Strip scripts, ads, navigation and widgets from a parsed document in place."""
    doomed = soup.find_all(UNWANTED_TAGS)
    for selector in UNWANTED_SELECTORS:
        doomed.extend(soup.select(selector))
    doomed.extend(soup.find_all(class_=UNWANTED_PREFIX))
    doomed.extend(soup.find_all(id=UNWANTED_PREFIX))

    for element in doomed:
        if not element.decomposed:
            element.decompose()


def split_text_block(text: str) -> List[str]:
    """Split a text block into paragraph-sized segments."""
    segments = re.split(r"\n\s*\n+|(?<=[.!?])\s+(?=[A-Z])", text)
    return [clean_whitespace(s) for s in segments if s and s.strip()]


def filter_paragraphs(candidates: List[str]) -> List[str]:
    """Keep the valid paragraphs from a list of candidates."""
    return [p for p in (clean_whitespace(c) for c in candidates) if is_valid_paragraph(p)]


def final_clean(content: str, max_words: int = MAX_TOTAL_WORDS) -> str:
    """Keep valid paragraphs, stopping once max_words is reached.

    Args:
        content: Paragraphs separated by blank lines
        max_words: Word budget for the cleaned body

    Returns:
        Cleaned body, possibly empty
    """
    if not content:
        return ""

    kept = []
    total_words = 0
    for paragraph in re.split(r"\n\s*\n+", content):
        cleaned = clean_whitespace(paragraph)
        if not is_valid_paragraph(cleaned):
            continue
        kept.append(cleaned)
        total_words += count_words(cleaned)
        if total_words >= max_words:
            break

    return "\n\n".join(kept)
