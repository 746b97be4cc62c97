"""Tests for outbound request construction (http/request.py)."""

import pytest

from xaiclient.errors import InvalidURLError
from xaiclient.http.request import build_direct_request, build_request, compose_url


class TestComposeURL:
    @pytest.mark.parametrize(
        ("base", "path"),
        [
            ("https://api.x.ai", "/v1/chat/completions"),
            ("https://api.x.ai/", "/v1/chat/completions"),
            ("https://api.x.ai/", "v1/chat/completions"),
        ],
    )
    def test_single_slash_between_parts(self, base: str, path: str) -> None:
        assert compose_url(base, path) == "https://api.x.ai/v1/chat/completions"

    def test_base_path_kept(self) -> None:
        assert compose_url("http://proxy.local/xai", "/v1/responses") == (
            "http://proxy.local/xai/v1/responses"
        )

    @pytest.mark.parametrize("base", ["api.x.ai", "ftp://api.x.ai", "https://", ""])
    def test_not_absolute_http_raises(self, base: str) -> None:
        with pytest.raises(InvalidURLError):
            compose_url(base, "/v1/chat/completions")


class TestBuildRequest:
    def test_json_body_sets_content_type(self) -> None:
        request = build_request("https://api.x.ai", "/v1/x", "POST", body=b"{}")
        assert request.headers["Content-Type"] == "application/json"
        assert request.body == b"{}"
        assert request.method == "POST"

    def test_no_body_no_content_type(self) -> None:
        request = build_request("https://api.x.ai", "/v1/models", "GET")
        assert "Content-Type" not in request.headers
        assert request.body is None

    def test_explicit_content_type_kept(self) -> None:
        request = build_request(
            "https://api.x.ai",
            "/v1/x",
            "POST",
            body=b"x",
            headers={"content-type": "text/plain"},
        )
        assert dict(request.headers) == {"content-type": "text/plain"}

    def test_headers_read_only(self) -> None:
        request = build_request("https://api.x.ai", "/v1/x", "POST", body=b"{}")
        with pytest.raises(TypeError):
            request.headers["X-Extra"] = "1"  # type: ignore[index]

    def test_timeout_carried(self) -> None:
        request = build_request("https://api.x.ai", "/v1/x", "GET", timeout=5)
        assert request.timeout == 5.0


class TestBuildDirectRequest:
    def test_bearer_header(self) -> None:
        request = build_direct_request(
            "https://api.x.ai", "/v1/chat/completions", "POST", api_key="xai-secret", body=b"{}"
        )
        assert request.headers["Authorization"] == "Bearer xai-secret"
        assert request.headers["Content-Type"] == "application/json"

    def test_repr_hides_credential(self) -> None:
        """The key must not leak through logging the descriptor."""
        request = build_direct_request("https://api.x.ai", "/v1/x", "POST", api_key="xai-secret")
        assert "xai-secret" not in repr(request)

    def test_invalid_base_raises(self) -> None:
        with pytest.raises(InvalidURLError):
            build_direct_request("not a url", "/v1/x", "POST", api_key="k")
