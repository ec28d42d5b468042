"""
Brand name and description extraction.

Both fields come from an ordered chain of strategies. Each strategy is a
small function taking the parsed page and returning text or None; the
first non-empty result wins. Reordering the tuples below changes the
output, so keep them in sync with the documented priority.
"""

import re
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from bs4 import BeautifulSoup, NavigableString

from . import config

# Elements that never contribute text
NON_CONTENT_TAGS = ['script', 'style', 'nav', 'footer', 'header', 'noscript', 'form', 'iframe', 'svg']

# "Page Title - Brand", "Page | Brand", "Brand: tagline" ...
TITLE_SEPARATORS = re.compile(r'[-–—|•:]')


@dataclass(frozen=True)
class ExtractionResult:
    brand_name: Optional[str] = None
    description: Optional[str] = None


def clean_text(text: Optional[str]) -> Optional[str]:
    """Collapse whitespace runs and trim. Empty results become None."""
    if not text:
        return None
    cleaned = re.sub(r'\s+', ' ', text).strip()
    return cleaned or None


def _meta_content(soup: BeautifulSoup, attr: str, value: str) -> Optional[str]:
    tag = soup.find('meta', attrs={attr: value})
    return tag.get('content') if tag else None


def _meta_strategy(attr: str, value: str) -> Callable[[BeautifulSoup], Optional[str]]:
    def strategy(soup):
        return _meta_content(soup, attr, value)
    strategy.__name__ = f'meta_{value}'
    return strategy


def brand_from_title(soup: BeautifulSoup) -> Optional[str]:
    """Last separator-delimited segment of <title>, or the whole title if there is only one."""
    title_tag = soup.find('title')
    if not title_tag:
        return None

    segments = [part.strip() for part in TITLE_SEPARATORS.split(title_tag.get_text())]
    segments = [part for part in segments if part]
    if not segments:
        return None
    return segments[-1]


def brand_from_h1(soup: BeautifulSoup) -> Optional[str]:
    h1_tag = soup.find('h1')
    return h1_tag.get_text() if h1_tag else None


def description_from_paragraphs(soup: BeautifulSoup) -> Optional[str]:
    """Longest <p> of at least MIN_PARAGRAPH_LENGTH chars. Earliest wins on ties."""
    best = None
    for paragraph in soup.find_all('p'):
        text = clean_text(paragraph.get_text())
        if not text or len(text) < config.MIN_PARAGRAPH_LENGTH:
            continue
        if best is None or len(text) > len(best):
            best = text
    return best


def visible_text(soup: BeautifulSoup) -> str:
    """All text a reader would see, whitespace-collapsed. Excludes <head> and comments."""
    root = soup.body or soup
    strings = []
    for node in root.find_all(string=True):
        # Comments, doctypes and CDATA are NavigableString subclasses
        if type(node) is not NavigableString:
            continue
        if node.find_parent(['head', 'title']):
            continue
        strings.append(str(node))
    return clean_text(' '.join(strings)) or ''


def description_from_visible_text(soup: BeautifulSoup) -> Optional[str]:
    text = visible_text(soup)
    if not text:
        return None

    limit = config.DESCRIPTION_FALLBACK_LENGTH
    if len(text) > limit:
        return text[:limit] + config.TRUNCATION_MARKER
    return text


BRAND_STRATEGIES = (
    _meta_strategy('property', 'og:site_name'),
    _meta_strategy('name', 'application-name'),
    _meta_strategy('name', 'apple-mobile-web-app-title'),
    _meta_strategy('name', 'twitter:site'),
    brand_from_title,
    brand_from_h1,
)

DESCRIPTION_STRATEGIES = (
    _meta_strategy('name', 'description'),
    _meta_strategy('property', 'og:description'),
    _meta_strategy('name', 'twitter:description'),
    description_from_paragraphs,
    description_from_visible_text,
)


def _first_match(soup: BeautifulSoup, strategies: Iterable[Callable]) -> Optional[str]:
    for strategy in strategies:
        value = clean_text(strategy(soup))
        if value:
            return value
    return None


def strip_non_content(soup: BeautifulSoup) -> BeautifulSoup:
    for element in soup.find_all(NON_CONTENT_TAGS):
        # Nested matches (svg inside header) go with their ancestor
        if not element.decomposed:
            element.decompose()
    return soup


def extract_brand_and_description(html: Optional[str]) -> ExtractionResult:
    """
    Derive a brand name and description from page markup.

    Never raises: empty or malformed markup yields a result with None fields.

    Brand priority:
        og:site_name > application-name > apple-mobile-web-app-title >
        twitter:site > <title> last segment > first <h1>

    Description priority:
        description > og:description > twitter:description >
        longest <p> (>= 50 chars) > visible text (240 chars + "...")
    """
    soup = strip_non_content(BeautifulSoup(html or '', 'html.parser'))

    return ExtractionResult(
        brand_name=_first_match(soup, BRAND_STRATEGIES),
        description=_first_match(soup, DESCRIPTION_STRATEGIES),
    )
