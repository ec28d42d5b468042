"""
Error taxonomy for the analysis pipeline.

Every failure that leaves the pipeline is a PipelineError with a named
kind. The routing layer maps kinds to response codes; that mapping does
not live here.

Error envelope:
    {'stage': 'fetch', 'kind': 'Timeout', 'message': '...', 'recoverable': True}
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    VALIDATION = 'Validation'
    PRIVATE_URL = 'PrivateURL'
    TIMEOUT = 'Timeout'
    HOST_NOT_FOUND = 'HostNotFound'
    BAD_RESPONSE = 'BadResponse'
    TRANSPORT = 'Transport'


class PipelineError(Exception):
    """
    Base class for every failure that halts the pipeline.

    Raise one of the subclasses. A bare PipelineError has no kind and
    serializes with kind None.
    """

    kind = None
    stage = 'processing'
    recoverable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        return {
            'stage': self.stage,
            'kind': self.kind.value if self.kind else None,
            'message': self.message,
            'recoverable': self.recoverable,
        }


class ValidationError(PipelineError):
    kind = ErrorKind.VALIDATION
    stage = 'validation'


class PrivateURLError(PipelineError):
    kind = ErrorKind.PRIVATE_URL
    stage = 'validation'


class FetchTimeoutError(PipelineError):
    kind = ErrorKind.TIMEOUT
    stage = 'fetch'
    recoverable = True


class HostNotFoundError(PipelineError):
    kind = ErrorKind.HOST_NOT_FOUND
    stage = 'fetch'
    recoverable = True


class BadResponseError(PipelineError):
    kind = ErrorKind.BAD_RESPONSE
    stage = 'fetch'

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code

    @property
    def recoverable(self) -> bool:
        # Server errors and rate limits may clear up; other client errors won't
        if self.status_code is None:
            return True
        return self.status_code >= 500 or self.status_code == 429

    def to_dict(self) -> dict:
        data = super().to_dict()
        data['status_code'] = self.status_code
        return data


class TransportError(PipelineError):
    """Any other network-layer failure. Message is the underlying error, verbatim."""

    kind = ErrorKind.TRANSPORT
    stage = 'fetch'
    recoverable = True
