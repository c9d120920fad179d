"""Unit tests for the infrastructure layer: HttpClient and JinjaTemplateRenderer."""

import httpx
import pytest

from config import HttpClientSettings
from errors import ConfigurationError, TemplatingError
from infrastructure.http_client import HttpClient
from infrastructure.templating.jinja import JinjaTemplateRenderer
from schemas.models.alert import Alert
from schemas.models.template_data import build_template_data


# ── HttpClient ────────────────────────────────────────────────────────────────


class TestHttpClient:
    async def test_post_json_sets_content_type_and_reads_body(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, content=b'{"errcode":0}')

        client = HttpClient(transport=httpx.MockTransport(handler))
        resp = await client.post_json("http://robot.local/send", b'{"a":1}')
        assert resp.status_code == 200
        assert resp.content == b'{"errcode":0}'
        assert resp.is_closed
        assert seen[0].method == "POST"
        assert seen[0].headers["content-type"] == "application/json"
        assert seen[0].content == b'{"a":1}'
        await client.aclose()

    async def test_post_json_propagates_transport_errors(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = HttpClient(transport=httpx.MockTransport(handler))
        with pytest.raises(httpx.ConnectError, match="connection refused"):
            await client.post_json("http://robot.local/send", b"{}")
        await client.aclose()

    async def test_context_manager(self):
        async with HttpClient() as client:
            assert client is not None


class TestHttpClientFromSettings:
    async def test_sends_configured_user_agent(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, content=b"{}")

        settings = HttpClientSettings(user_agent="robot-test/1")
        async with HttpClient.from_settings(
            settings, transport=httpx.MockTransport(handler)
        ) as client:
            await client.post_json("http://robot.local/send", b"{}")
        assert seen[0].headers["user-agent"] == "robot-test/1"

    async def test_bearer_token_header(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, content=b"{}")

        settings = HttpClientSettings(bearer_token="tok")
        async with HttpClient.from_settings(
            settings, transport=httpx.MockTransport(handler)
        ) as client:
            await client.post_json("http://robot.local/send", b"{}")
        assert seen[0].headers["authorization"] == "Bearer tok"

    async def test_basic_auth_header(self):
        seen = []

        def handler(request):
            seen.append(request)
            return httpx.Response(200, content=b"{}")

        settings = HttpClientSettings(
            basic_auth_username="bot", basic_auth_password="pw"
        )
        async with HttpClient.from_settings(
            settings, transport=httpx.MockTransport(handler)
        ) as client:
            await client.post_json("http://robot.local/send", b"{}")
        assert seen[0].headers["authorization"].startswith("Basic ")

    @pytest.mark.parametrize(
        "overrides",
        [
            {"ca_file": "/nonexistent/ca.pem"},
            {"cert_file": "/nonexistent/client.pem", "key_file": "/nonexistent/client.key"},
            {"key_file": "/nonexistent/client.key"},
            {"proxy_url": "ftp://proxy.local:21"},
            {"basic_auth_username": "bot", "bearer_token": "tok"},
        ],
        ids=["missing_ca", "missing_cert", "key_without_cert", "bad_proxy", "two_auths"],
    )
    def test_invalid_options_raise_configuration_error(self, overrides):
        with pytest.raises(ConfigurationError):
            HttpClient.from_settings(HttpClientSettings(**overrides))


# ── JinjaTemplateRenderer ─────────────────────────────────────────────────────


def _data(**overrides):
    labels = overrides.pop("labels", {"alertname": "HighCPU", "instance": "node-1"})
    annotations = overrides.pop("annotations", {"summary": "CPU above 90%"})
    return build_template_data(
        [Alert(labels=labels, annotations=annotations)], **overrides
    )


class TestJinjaTemplateRenderer:
    def test_renders_against_template_data(self):
        renderer = JinjaTemplateRenderer()
        out = renderer.render(
            "{{ status }} {{ receiver }} {{ alerts | length }}",
            _data(receiver="ops"),
        )
        assert out == "firing ops 1"

    def test_common_labels_available(self):
        out = JinjaTemplateRenderer().render(
            "{{ common_labels.alertname }}", _data()
        )
        assert out == "HighCPU"

    def test_default_message(self):
        out = JinjaTemplateRenderer().render(
            '{% include "wecomrobot.default.message" %}',
            _data(group_labels={"alertname": "HighCPU"}),
        )
        assert out.startswith("[FIRING:1] HighCPU")
        assert "Summary: CPU above 90%" in out
        assert " - instance = node-1" in out

    def test_extra_named_templates(self):
        renderer = JinjaTemplateRenderer(
            extra_templates={"short": "{{ alerts | length }} alert(s)"}
        )
        assert renderer.render('{% include "short" %}', _data()) == "1 alert(s)"

    def test_no_html_escaping(self):
        out = JinjaTemplateRenderer().render(
            "{{ alerts[0].annotations.summary }}",
            _data(annotations={"summary": "load > 5 & rising"}),
        )
        assert out == "load > 5 & rising"

    @pytest.mark.parametrize(
        "source",
        [
            "{{ no_such_variable }}",
            "{% if %}",
            '{% include "missing.template" %}',
            "{{ alerts[5].labels }}",
            "{{ 1 // 0 }}",
        ],
        ids=["undefined", "syntax", "missing_include", "index", "arithmetic"],
    )
    def test_failures_raise_templating_error(self, source):
        with pytest.raises(TemplatingError):
            JinjaTemplateRenderer().render(source, _data())

    def test_error_keeps_cause(self):
        with pytest.raises(TemplatingError) as exc_info:
            JinjaTemplateRenderer().render("{{ nope }}", _data())
        assert exc_info.value.__cause__ is not None
        assert exc_info.value.retryable is False
