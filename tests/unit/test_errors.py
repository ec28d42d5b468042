"""
Error contract tests.

Every failure path yields a distinguishable, named kind and a
stage/message/recoverable envelope the routing layer can map.
"""

import pytest

from website_analyzer.errors import (
    BadResponseError,
    ErrorKind,
    FetchTimeoutError,
    HostNotFoundError,
    PipelineError,
    PrivateURLError,
    TransportError,
    ValidationError,
)


class TestErrorKinds:
    """Each error class carries exactly one kind."""

    @pytest.mark.parametrize("error_class,kind", [
        (ValidationError, ErrorKind.VALIDATION),
        (PrivateURLError, ErrorKind.PRIVATE_URL),
        (FetchTimeoutError, ErrorKind.TIMEOUT),
        (HostNotFoundError, ErrorKind.HOST_NOT_FOUND),
        (BadResponseError, ErrorKind.BAD_RESPONSE),
        (TransportError, ErrorKind.TRANSPORT),
    ])
    def test_kind(self, error_class, kind):
        error = error_class("boom")
        assert isinstance(error, PipelineError)
        assert error.kind == kind

    def test_kinds_are_distinct(self):
        assert len({kind.value for kind in ErrorKind}) == 6

    def test_kind_values_are_strings(self):
        assert ErrorKind.PRIVATE_URL == 'PrivateURL'
        assert ErrorKind.HOST_NOT_FOUND.value == 'HostNotFound'

    def test_message_preserved(self):
        error = TransportError("Connection reset by peer")
        assert error.message == "Connection reset by peer"
        assert str(error) == "Connection reset by peer"


class TestErrorEnvelope:
    """Tests for PipelineError.to_dict()"""

    def test_envelope_fields(self):
        envelope = FetchTimeoutError("Timeout while fetching the URL").to_dict()
        assert envelope == {
            'stage': 'fetch',
            'kind': 'Timeout',
            'message': 'Timeout while fetching the URL',
            'recoverable': True,
        }

    def test_bare_base_error_serializes(self):
        envelope = PipelineError("unexpected").to_dict()
        assert envelope == {
            'stage': 'processing',
            'kind': None,
            'message': 'unexpected',
            'recoverable': False,
        }

    @pytest.mark.parametrize("error_class", [ValidationError, PrivateURLError])
    def test_input_errors_not_recoverable(self, error_class):
        envelope = error_class("bad input").to_dict()
        assert envelope['stage'] == 'validation'
        assert envelope['recoverable'] is False

    @pytest.mark.parametrize("error_class", [FetchTimeoutError, HostNotFoundError, TransportError])
    def test_network_errors_recoverable(self, error_class):
        envelope = error_class("network").to_dict()
        assert envelope['stage'] == 'fetch'
        assert envelope['recoverable'] is True

    def test_bad_response_includes_status(self):
        envelope = BadResponseError("HTTP error: 404 Not Found", status_code=404).to_dict()
        assert envelope['status_code'] == 404
        assert envelope['kind'] == 'BadResponse'

    @pytest.mark.parametrize("status_code,recoverable", [
        (404, False),
        (403, False),
        (410, False),
        (429, True),
        (500, True),
        (503, True),
        (None, True),
    ])
    def test_bad_response_recoverability(self, status_code, recoverable):
        assert BadResponseError("HTTP error", status_code=status_code).recoverable is recoverable
