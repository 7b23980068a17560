import json

import pytest
from pydantic import BaseModel, ConfigDict, Field

from httprequest import (
    CachePolicy,
    HttpMethod,
    InvalidPathError,
    RequestSpec,
    TransportOptions,
)


class NewContact(BaseModel):
    model_config = ConfigDict(validate_by_name=True, validate_by_alias=True)

    first_name: str = Field(alias="firstName")
    nickname: str | None = None


@pytest.fixture
def spec(base_url: str) -> RequestSpec:
    return RequestSpec(base_path=base_url, relative_path="/contacts")


class TestRequestSpec:
    class TestSnapshots:
        def test_with_methods_return_new_specs(self, spec: RequestSpec):
            updated = spec.with_path("/1").with_params({"simple": "true"})

            assert updated is not spec
            assert spec.relative_path == "/contacts"
            assert dict(spec.params) == {}
            assert updated.relative_path == "/contacts/1"
            assert dict(updated.params) == {"simple": "true"}

        def test_none_removes_params_and_headers(self, spec: RequestSpec):
            spec = spec.with_params({"a": "1", "b": "2"}).with_headers(
                {"Authorization": "Token X", "X-Trace": "abc"}
            )

            spec = spec.with_params({"a": None}).with_headers({"X-Trace": None})

            assert dict(spec.params) == {"b": "2"}
            assert dict(spec.headers) == {"Authorization": "Token X"}

        def test_removing_unknown_key_is_a_noop(self, spec: RequestSpec):
            assert dict(spec.with_params({"missing": None}).params) == {}

        def test_copy_shares_no_mappings(self, spec: RequestSpec):
            original = spec.with_headers({"Accept": "application/json"})

            copy = original.copy()

            assert copy == original
            assert copy.headers is not original.headers
            assert copy.params is not original.params
            assert copy.decode_options is not original.decode_options

        def test_with_transport_keeps_other_options(self, spec: RequestSpec):
            updated = spec.with_transport(timeout=5.0)

            assert updated.transport == TransportOptions(
                timeout=5.0, cache_policy=CachePolicy.USE_PROTOCOL_CACHE_POLICY
            )

        def test_with_decode_options_merges(self, spec: RequestSpec):
            updated = spec.with_decode_options({"strict": True}).with_decode_options(
                {"encoding": "latin-1"}
            )

            assert dict(updated.decode_options) == {
                "strict": True,
                "encoding": "latin-1",
            }

    class TestMaterialize:
        def test_joins_path_and_params(self, spec: RequestSpec):
            request = spec.with_params({"simple": "true"}).materialize()

            assert request.url == "https://api.example.com/v1/contacts?simple=true"
            assert request.method is HttpMethod.GET
            assert request.body is None

        def test_params_are_url_encoded(self, spec: RequestSpec):
            request = spec.with_params({"q": "a b&c"}).materialize()

            assert "q=a+b%26c" in request.url or "q=a%20b%26c" in request.url

        def test_keeps_query_already_in_path(self, base_url: str):
            spec = RequestSpec(base_path=base_url, relative_path="/contacts?page=2")

            request = spec.with_params({"simple": "true"}).materialize()

            assert "page=2" in request.url
            assert "simple=true" in request.url

        @pytest.mark.parametrize(
            "path", ["not a url", "/contacts", "ftp://example.com/file", "http://"]
        )
        def test_invalid_path(self, path: str):
            with pytest.raises(InvalidPathError) as exc_info:
                RequestSpec(base_path=path).materialize()

            assert exc_info.value.path == path

        def test_invalid_path_message(self):
            with pytest.raises(InvalidPathError) as exc_info:
                RequestSpec(base_path="not a url").materialize()

            assert str(exc_info.value) == "not a url is an invalid path"

        def test_timeout_and_cache_policy(self, spec: RequestSpec):
            spec = spec.with_transport(
                timeout=3.0, cache_policy=CachePolicy.RETURN_CACHE_DATA_ELSE_LOAD
            )

            assert spec.materialize().timeout == 3.0
            assert (
                spec.materialize().cache_policy
                is CachePolicy.RETURN_CACHE_DATA_ELSE_LOAD
            )
            assert (
                spec.materialize(CachePolicy.RETURN_CACHE_DATA_DONT_LOAD).cache_policy
                is CachePolicy.RETURN_CACHE_DATA_DONT_LOAD
            )

    class TestBody:
        def test_json_body(self, spec: RequestSpec):
            request = spec.with_body({"firstName": "A"}).materialize()

            assert json.loads(request.body) == {"firstName": "A"}
            assert request.headers["Content-Type"] == "application/json"

        def test_model_body_uses_aliases(self, spec: RequestSpec):
            request = spec.with_body(NewContact(first_name="A")).materialize()

            assert json.loads(request.body) == {"firstName": "A", "nickname": None}

        def test_exclude_none_option(self, spec: RequestSpec):
            request = (
                spec.with_body(NewContact(first_name="A"))
                .with_decode_options({"exclude_none": True})
                .materialize()
            )

            assert json.loads(request.body) == {"firstName": "A"}

        def test_explicit_content_type_is_kept(self, spec: RequestSpec):
            request = (
                spec.with_headers({"content-type": "text/json"})
                .with_body([1, 2])
                .materialize()
            )

            assert request.headers == {"content-type": "text/json"}

        def test_raw_bodies_have_no_implied_content_type(self, spec: RequestSpec):
            assert spec.with_body(b"\x00\x01").materialize().body == b"\x00\x01"
            request = spec.with_body("plain").materialize()

            assert request.body == b"plain"
            assert "Content-Type" not in request.headers
