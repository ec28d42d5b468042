"""Brand name and description analysis for arbitrary web pages."""

from .errors import (
    ErrorKind,
    PipelineError,
    ValidationError,
    PrivateURLError,
    FetchTimeoutError,
    HostNotFoundError,
    BadResponseError,
    TransportError,
)

from .url_guard import canonical_ipv4, normalize_url, is_private_or_local
from .fetcher import FetchResult, fetch_html
from .extractor import ExtractionResult, extract_brand_and_description
from .enhancer import EnhancementResult, enhance_description
from .pipeline import AnalysisResult, analyze

__all__ = [
    # Errors
    'ErrorKind',
    'PipelineError',
    'ValidationError',
    'PrivateURLError',
    'FetchTimeoutError',
    'HostNotFoundError',
    'BadResponseError',
    'TransportError',
    # Pipeline stages
    'canonical_ipv4',
    'normalize_url',
    'is_private_or_local',
    'FetchResult',
    'fetch_html',
    'ExtractionResult',
    'extract_brand_and_description',
    'EnhancementResult',
    'enhance_description',
    # Entry point
    'AnalysisResult',
    'analyze',
]
