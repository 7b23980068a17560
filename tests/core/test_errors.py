import pytest

from httprequest import (
    CacheMissError,
    HttpError,
    HttpRequestError,
    InvalidPathError,
    NoDataError,
    NoResponseError,
    UnknownError,
)


class TestErrors:
    def test_http_error_description(self):
        error = HttpError(401, {"Content-Type": "application/json"}, b"{}")

        assert error.status_code == 401
        assert error.reason == "Unauthorized"
        assert str(error) == "401 - Unauthorized"

    def test_http_error_body(self):
        error = HttpError(401, body=b'{"error":"unauthorized"}')

        assert error.body == b'{"error":"unauthorized"}'
        assert error.json() == {"error": "unauthorized"}
        assert error.text == '{"error":"unauthorized"}'
        assert error.error_message == "unauthorized"

    @pytest.mark.parametrize(
        "body",
        [b"", b"<html>oops</html>", b"[1, 2]", b'{"code": 7}', b"\xff\xfe"],
    )
    def test_http_error_message_missing(self, body: bytes):
        assert HttpError(500, body=body).error_message is None

    def test_unknown_status_code(self):
        assert HttpError(599).reason == "Unknown status"

    @pytest.mark.parametrize(
        "error",
        [
            InvalidPathError("x"),
            NoResponseError(),
            NoDataError(),
            UnknownError(),
            CacheMissError("https://example.com"),
            HttpError(404),
        ],
    )
    def test_common_base(self, error: Exception):
        assert isinstance(error, HttpRequestError)
        assert str(error) == error.message
        assert "HttpError" not in str(error)
