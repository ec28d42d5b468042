"""
Analysis pipeline: guard -> fetch -> extract -> (optional) enhance.

analyze() is the single entry point for the routing/persistence layer.
Guard and fetch failures propagate as PipelineError; enhancement never
fails the pipeline.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from . import config
from .enhancer import EnhancementResult, enhance_description
from .errors import PrivateURLError
from .extractor import extract_brand_and_description
from .fetcher import fetch_html
from .url_guard import is_private_or_local, normalize_url


@dataclass(frozen=True)
class AnalysisResult:
    url: str
    brand_name: Optional[str]
    description: Optional[str]
    is_enhanced: bool = False

    def to_dict(self) -> dict:
        """Shape stored by the persistence layer, keyed by the normalized url."""
        return {
            'url': self.url,
            'brandName': self.brand_name,
            'description': self.description,
            'isEnhanced': self.is_enhanced,
        }


def analyze(
    raw_url: str,
    enhance: bool = False,
    timeout_ms: Optional[int] = None,
    enhancer: Optional[Callable[[str, Optional[str]], EnhancementResult]] = None,
) -> AnalysisResult:
    """
    Analyze one page and return its brand name and description.

    Args:
        raw_url: Candidate URL as received from the caller
        enhance: Rewrite the description with AI when one was found
        timeout_ms: Fetch deadline (defaults to FETCH_TIMEOUT_MS)
        enhancer: Replacement for enhance_description (same signature)

    Raises:
        ValidationError, PrivateURLError, FetchTimeoutError,
        HostNotFoundError, BadResponseError, TransportError
    """
    url = normalize_url(raw_url)

    if is_private_or_local(url):
        raise PrivateURLError('Private or local addresses are not allowed')

    print(f"Analyzing: {url}")
    fetched = fetch_html(url, timeout_ms=timeout_ms or config.FETCH_TIMEOUT_MS)
    if fetched.final_url and fetched.final_url.rstrip('/') != url.rstrip('/'):
        print(f"Redirected to: {fetched.final_url}")

    extracted = extract_brand_and_description(fetched.body)

    description = extracted.description
    is_enhanced = False
    if enhance and description:
        enhancement = (enhancer or enhance_description)(description, extracted.brand_name)
        description = enhancement.text
        is_enhanced = enhancement.was_enhanced

    return AnalysisResult(
        url=url,
        brand_name=extracted.brand_name,
        description=description,
        is_enhanced=is_enhanced,
    )
