import logging

import pytest

from httprequest import CachePolicy, HttpMethod, MaterializedRequest, ResponseHead
from httprequest._logging import log_request, log_response


@pytest.fixture
def request_() -> MaterializedRequest:
    return MaterializedRequest(
        method=HttpMethod.POST,
        url="https://api.example.com/v1/contacts",
        headers={"Content-Type": "application/json"},
        body=b'{"firstName":"A"}',
        timeout=60.0,
        cache_policy=CachePolicy.USE_PROTOCOL_CACHE_POLICY,
    )


class TestLogging:
    def test_log_request(
        self, caplog: pytest.LogCaptureFixture, request_: MaterializedRequest
    ):
        with caplog.at_level(logging.INFO, logger="httprequest"):
            log_request(request_)

        assert caplog.messages == [
            "---> POST https://api.example.com/v1/contacts\n"
            "Content-Type: application/json\n"
            '{"firstName":"A"}\n'
            "---> END (17 bytes)"
        ]

    def test_log_response(
        self, caplog: pytest.LogCaptureFixture, request_: MaterializedRequest
    ):
        head = ResponseHead(status_code=201, headers=(("Location", "/contacts/1"),))

        with caplog.at_level(logging.INFO, logger="httprequest"):
            log_response(request_, head, 0.256, b"")

        assert caplog.messages == [
            "<--- POST https://api.example.com/v1/contacts (201, 0.26s)\n"
            "Location: /contacts/1\n"
            "<--- END (0 bytes)"
        ]

    def test_binary_body_is_described_by_size(
        self, caplog: pytest.LogCaptureFixture, request_: MaterializedRequest
    ):
        head = ResponseHead(status_code=200)

        with caplog.at_level(logging.INFO, logger="httprequest"):
            log_response(request_, head, 1.0, b"\xff\xd8\xff\xe0")

        assert caplog.messages == [
            "<--- POST https://api.example.com/v1/contacts (200, 1.00s)\n"
            "<--- END (4 bytes)"
        ]
