import json

import httpx
import pytest

from du_pipeline.remote.client import RemoteClient, parse_json_object
from du_pipeline.remote.exceptions import RemoteError, SchemaError, TransportError

BASE_URL = "https://du.example.com/api/framework/projects/"


def _make_client(handler: httpx.MockTransport | None = None, **kwargs: object) -> RemoteClient:
    transport = handler or httpx.MockTransport(lambda request: httpx.Response(200, json={}))
    return RemoteClient(
        base_url=BASE_URL,
        project_id="p1",
        bearer_token="tok",
        http_client=httpx.Client(transport=transport),
        **kwargs,
    )


class TestRequestShape:
    def test_builds_project_scoped_url(self) -> None:
        client = _make_client()
        assert client.url("/digitization/start") == (
            "https://du.example.com/api/framework/projects/p1/digitization/start"
        )

    def test_sends_bearer_token_and_api_version(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"ok": True})

        client = _make_client(httpx.MockTransport(handler), api_version="1.1")
        client.get_json("classifiers/ml-classification/validation/result/op1")

        assert seen[0].headers["Authorization"] == "Bearer tok"
        assert seen[0].url.params["api-version"] == "1.1"
        assert seen[0].method == "GET"

    def test_post_json_sends_body(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"classificationResults": []})

        client = _make_client(httpx.MockTransport(handler))
        body = client.post_json("classifiers/x/classification", {"documentId": "d1"})

        assert json.loads(seen[0].content) == {"documentId": "d1"}
        assert body == {"classificationResults": []}

    def test_post_content_sends_raw_bytes_with_content_type(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(202, json={"documentId": "d1"})

        client = _make_client(httpx.MockTransport(handler))
        body = client.post_content(
            "digitization/start", b"%PDF-fake", content_type="application/pdf"
        )

        assert seen[0].content == b"%PDF-fake"
        assert seen[0].headers["Content-Type"] == "application/pdf"
        assert seen[0].headers["Accept"] == "text/plain"
        assert body == {"documentId": "d1"}


class TestErrorMapping:
    def test_unexpected_status_raises_remote_error(self) -> None:
        client = _make_client(
            httpx.MockTransport(lambda request: httpx.Response(500, text="boom"))
        )
        with pytest.raises(RemoteError) as excinfo:
            client.post_json("classifiers/x/classification", {"documentId": "d1"})
        assert excinfo.value.status == 500
        assert excinfo.value.body == "boom"

    def test_success_status_outside_expected_raises(self) -> None:
        client = _make_client(
            httpx.MockTransport(lambda request: httpx.Response(200, json={"documentId": "d1"}))
        )
        with pytest.raises(RemoteError, match="HTTP 200"):
            client.post_content("digitization/start", b"x", content_type="image/png")

    def test_connection_failure_raises_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        client = _make_client(httpx.MockTransport(handler))
        with pytest.raises(TransportError, match="refused"):
            client.get_json("anything")

    def test_timeout_raises_transport_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("slow", request=request)

        client = _make_client(httpx.MockTransport(handler))
        with pytest.raises(TransportError):
            client.get_json("anything")

    def test_non_json_body_raises_schema_error(self) -> None:
        client = _make_client(
            httpx.MockTransport(lambda request: httpx.Response(200, text="<html>"))
        )
        with pytest.raises(SchemaError, match="Invalid JSON"):
            client.get_json("anything")


class TestParseJsonObject:
    def test_rejects_json_array(self) -> None:
        with pytest.raises(SchemaError, match="got list"):
            parse_json_object("[1, 2]", source="test")

    def test_returns_object(self) -> None:
        assert parse_json_object('{"a": 1}', source="test") == {"a": 1}
